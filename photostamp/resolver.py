"""
Capture date resolution: EXIF metadata first, filename conventions as fallback.
"""

from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .constants import EXIF_DATE_FORMAT, get_logger
from .extractors import FILENAME_RULES, ExtractorRule, parse_civil_datetime
from .metadata import read_date_time_original

logger = get_logger()


def parse_exif_date(value: str) -> Optional[datetime]:
    """Parse a canonical EXIF date string ("YYYY:MM:DD HH:MM:SS").

    A day past the end of its month is clamped to the last day of that month.
    """
    try:
        return parse_civil_datetime(value, EXIF_DATE_FORMAT)
    except ValueError:
        return None


class MetadataStrategy:
    """Use the embedded EXIF DateTimeOriginal tag."""

    name = "exif"

    def extract(self, path: Path) -> Optional[datetime]:
        reading = read_date_time_original(path)
        if not reading.found:
            logger.debug(f"No EXIF date in {path.name} ({reading.status.value})")
            return None

        date = parse_exif_date(reading.value)
        if date is None:
            logger.debug(f"Unparseable EXIF date {reading.value!r} in {path.name}")
        return date


class FilenameStrategy:
    """Use a single filename rule against the file's basename."""

    def __init__(self, rule: ExtractorRule):
        self.rule = rule
        self.name = f"filename:{rule.pattern}"

    def extract(self, path: Path) -> Optional[datetime]:
        return self.rule.extract(path.name)


class DateResolver:
    """Ordered chain of date strategies; the first one that yields a date wins."""

    def __init__(self, strategies: Sequence):
        self.strategies = tuple(strategies)

    @classmethod
    def default(cls, extra_rules: Iterable[ExtractorRule] = ()) -> "DateResolver":
        """Metadata first, then the built-in filename rules, then any extra rules."""
        strategies: List = [MetadataStrategy()]
        strategies.extend(FilenameStrategy(rule) for rule in FILENAME_RULES)
        strategies.extend(FilenameStrategy(rule) for rule in extra_rules)
        return cls(strategies)

    def resolve_with_source(self, path: Path) -> Tuple[Optional[datetime], Optional[str]]:
        """Return (timestamp, strategy name), or (None, None) if every strategy abstained.

        OSError raised while reading the file propagates.
        """
        for strategy in self.strategies:
            date = strategy.extract(path)
            if date is not None:
                return date, strategy.name
        return None, None

    def resolve(self, path: Path) -> Optional[datetime]:
        date, _ = self.resolve_with_source(path)
        return date
