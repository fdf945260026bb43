"""
Statistics tracking for a sorting run.
"""

from typing import Dict

from .outcome import Outcome, OutcomeKind


class StatsManager:
    """Counts outcomes per kind for the processing summary."""

    def __init__(self):
        self._stats = {kind: 0 for kind in OutcomeKind}
        self._total_size = 0

    def record(self, outcome: Outcome, file_size: int = 0) -> None:
        """Count an outcome; file_size is added for moved files only."""
        self._stats[outcome.kind] += 1
        if outcome.kind is OutcomeKind.MOVED:
            self._total_size += file_size

    def get_stats(self) -> Dict[OutcomeKind, int]:
        """Get a copy of current statistics."""
        return dict(self._stats)

    def get_count(self, kind: OutcomeKind) -> int:
        return self._stats[kind]

    def get_total_files(self) -> int:
        return sum(self._stats.values())

    def get_total_size_mb(self) -> float:
        return self._total_size / (1024 * 1024)

    def has_errors(self) -> bool:
        """Check if any file could not be dated or moved."""
        return (self._stats[OutcomeKind.UNRESOLVED] + self._stats[OutcomeKind.FAILED]) > 0

    def get_left_in_place(self) -> int:
        """Count files that were not moved, for whatever reason."""
        return self.get_total_files() - self._stats[OutcomeKind.MOVED]
