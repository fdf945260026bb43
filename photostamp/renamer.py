"""
Collision-safe relocation of files under their timestamp-prefixed names.
"""

import errno
import os
import shutil
from datetime import datetime
from pathlib import Path

from .constants import PREFIX_DATE_FORMAT, PREFIX_SEPARATOR, get_logger
from .outcome import Outcome, OutcomeKind

# os.link errors after which a copy is attempted instead
LINK_UNSUPPORTED_ERRNOS = {
    errno.EXDEV, errno.EPERM, errno.EMLINK, errno.ENOTSUP, errno.EOPNOTSUPP,
}


def format_prefix(timestamp: datetime) -> str:
    """Format a timestamp as the canonical file prefix (YYYYMMDD-HHMMSS)."""
    return timestamp.strftime(PREFIX_DATE_FORMAT)


def target_name(timestamp: datetime, basename: str) -> str:
    return f"{format_prefix(timestamp)}{PREFIX_SEPARATOR}{basename}"


class Renamer:
    """Moves files into the output directory without ever overwriting."""

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run
        self.logger = get_logger()

    def place(self, source: Path, output_dir: Path, timestamp: datetime) -> Outcome:
        """Move source to output_dir/<prefix>_<basename> and classify the result."""
        target = output_dir / target_name(timestamp, source.name)

        if self.dry_run:
            if target.exists():
                return Outcome(OutcomeKind.SKIPPED_EXISTS, source, target)
            self.logger.debug(f"Dry run, not moving {source}")
            return Outcome(OutcomeKind.MOVED, source, target)

        try:
            self.move_no_clobber(source, target)
        except FileExistsError:
            return Outcome(OutcomeKind.SKIPPED_EXISTS, source, target)
        except OSError as e:
            return Outcome(OutcomeKind.FAILED, source, target, cause=e)

        return Outcome(OutcomeKind.MOVED, source, target)

    def move_no_clobber(self, source: Path, target: Path) -> None:
        """Move source to target, raising FileExistsError if target exists.

        On a single volume the target is created with a hard link, which
        fails atomically if the name is taken. Otherwise the target is claimed
        with an exclusive create and the content copied. In both cases the
        target is removed again if the source cannot be removed.

        The move is two steps: an interruption between creating the target and
        unlinking the source leaves both names in place, never neither.
        os.replace would be one step but overwrites an existing target.
        """
        try:
            os.link(source, target)
        except FileExistsError:
            raise
        except OSError as e:
            if e.errno not in LINK_UNSUPPORTED_ERRNOS:
                raise
            self.logger.debug(f"Hard link unavailable for {target} ({e}), copying instead")
            self._copy_exclusive(source, target)

        try:
            os.unlink(source)
        except OSError:
            self._discard(target)
            raise

    def _copy_exclusive(self, source: Path, target: Path) -> None:
        with open(source, "rb") as src:
            dst = open(target, "xb")
            try:
                with dst:
                    shutil.copyfileobj(src, dst)
                shutil.copystat(source, target)
            except BaseException:
                self._discard(target)
                raise

    def _discard(self, target: Path) -> None:
        try:
            target.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.error(f"Could not remove partial target {target}: {e}")
