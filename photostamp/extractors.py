"""
Filename date extraction rules for devices and messaging apps.
"""

import calendar
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

# Two-digit directive that strptime parses but ignores when no weekday is given
_IGNORED_DIRECTIVE = "%W"
_ZONE_DIRECTIVE = re.compile(r"%[zZ]")


def parse_civil_datetime(text: str, date_format: str) -> datetime:
    """Parse text with strptime, clamping an out-of-range day to the month's last day.

    "2023-02-30" yields 2023-02-28 and "2023:04:31" yields April 30. A day
    above 31, a month above 12 or any other mismatch still raises ValueError.
    """
    try:
        return datetime.strptime(text, date_format)
    except ValueError:
        if "%d" not in date_format or "%m" not in date_format:
            raise

    # Day read against January, everything else against the 1st of the month
    day = datetime.strptime(text, date_format.replace("%m", _IGNORED_DIRECTIVE)).day
    parsed = datetime.strptime(text, date_format.replace("%d", _IGNORED_DIRECTIVE))
    last_day = calendar.monthrange(parsed.year, parsed.month)[1]
    return parsed.replace(day=min(day, last_day))


@dataclass(frozen=True)
class ExtractorRule:
    """A filename pattern with one capture group and the strptime format of that group.

    The pattern must match the whole basename. The captured text is parsed with
    ``date_format``; a parse failure means the rule abstains.
    """
    pattern: str
    date_format: str
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        regex = re.compile(self.pattern)
        if regex.groups != 1:
            raise ValueError(
                f"Filename pattern must have exactly one capture group, "
                f"got {regex.groups}: {self.pattern!r}"
            )
        if _ZONE_DIRECTIVE.search(self.date_format.replace("%%", "")):
            raise ValueError(f"Date format must not carry a time zone: {self.date_format!r}")
        object.__setattr__(self, "regex", regex)

    def extract(self, basename: str) -> Optional[datetime]:
        """Return the timestamp encoded in basename, or None if the rule abstains."""
        match = self.regex.fullmatch(basename)
        if not match:
            return None
        try:
            parsed = parse_civil_datetime(match.group(1), self.date_format)
        except ValueError:
            return None
        # Second precision only; sub-second digits (threema) are dropped
        return parsed.replace(microsecond=0)


# Consulted in order, first match wins
FILENAME_RULES = (
    ExtractorRule(r"PHOTO-(\d{4}-\d{2}-\d{2}-\d{2}-\d{2}-\d{2}).*", "%Y-%m-%d-%H-%M-%S"),
    ExtractorRule(r"threema-(\d{8}-\d{9}).*", "%Y%m%d-%H%M%S%f"),
    ExtractorRule(r"image-(\d{8}-\d{6}).*", "%Y%m%d-%H%M%S"),
    ExtractorRule(r"IMG-(\d{8})-WA.*", "%Y%m%d"),
)


def extract_date_from_filename(basename: str,
                               rules: Iterable[ExtractorRule] = FILENAME_RULES) -> Optional[datetime]:
    """Apply rules in order and return the first timestamp found."""
    for rule in rules:
        date = rule.extract(basename)
        if date is not None:
            return date
    return None
