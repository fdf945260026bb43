"""
Per-file processing outcomes.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class OutcomeKind(Enum):
    MOVED = "moved"
    SKIPPED_EXISTS = "skipped_exists"
    UNRESOLVED = "unresolved"
    FAILED = "failed"


# Log level used when reporting each kind of outcome
OUTCOME_LOG_LEVELS = {
    OutcomeKind.MOVED: logging.INFO,
    OutcomeKind.SKIPPED_EXISTS: logging.WARNING,
    OutcomeKind.UNRESOLVED: logging.ERROR,
    OutcomeKind.FAILED: logging.ERROR,
}


@dataclass(frozen=True)
class Outcome:
    """Result of processing one source file."""
    kind: OutcomeKind
    source: Path
    target: Optional[Path] = None
    cause: Optional[BaseException] = None

    @property
    def log_level(self) -> int:
        return OUTCOME_LOG_LEVELS[self.kind]

    def describe(self) -> str:
        """Human-readable one-line description for logging."""
        if self.kind is OutcomeKind.MOVED:
            return f"{self.source} -> {self.target}"
        if self.kind is OutcomeKind.SKIPPED_EXISTS:
            return f"Skipped {self.source}: {self.target} already exists"
        if self.kind is OutcomeKind.UNRESOLVED:
            return f"Could not determine a date for {self.source}"
        if self.target is not None:
            return f"Failed to move {self.source} -> {self.target}: {self.cause}"
        return f"Failed to process {self.source}: {self.cause}"
