"""
Core photo stamping functionality.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from rich.progress import Progress
from rich.table import Table

from .constants import get_console, get_logger
from .outcome import Outcome, OutcomeKind
from .renamer import Renamer
from .resolver import DateResolver
from .stats import StatsManager


class PhotoStamper:
    """Walks a source tree and moves every datable file into the destination."""

    def __init__(self, source: Path, dest: Path, resolver: Optional[DateResolver] = None,
                 dry_run: bool = False):
        self.source = source
        self.dest = dest
        self.dry_run = dry_run
        self.resolver = resolver or DateResolver.default()
        self.renamer = Renamer(dry_run=dry_run)
        self.stats_manager = StatsManager()
        self.console = get_console()
        self.logger = get_logger()

        self.logger.debug(f"Starting session: {self.source} -> {self.dest}")
        self.logger.debug(f"Mode: {'DRY RUN' if self.dry_run else 'MOVE'}")

    def find_source_files(self) -> List[Path]:
        """Find all regular files below the source directory.

        Symbolic links are neither followed nor processed. The list is built
        before anything is moved, so a destination inside the source tree
        never feeds its own output back in.
        """
        files = []
        for dirpath, dirnames, filenames in os.walk(self.source, followlinks=False):
            dirnames.sort()
            for filename in sorted(filenames):
                file_path = Path(dirpath) / filename
                if file_path.is_symlink() or not file_path.is_file():
                    self.logger.debug(f"Skipping non-regular entry {file_path}")
                    continue
                files.append(file_path)
        return files

    def process_file(self, file_path: Path) -> Outcome:
        """Resolve the capture date of one file and move it. Never raises for per-file errors."""
        try:
            date, strategy = self.resolver.resolve_with_source(file_path)
        except OSError as e:
            return Outcome(OutcomeKind.FAILED, file_path, cause=e)

        if date is None:
            return Outcome(OutcomeKind.UNRESOLVED, file_path)

        self.logger.debug(f"Date {date} for {file_path.name} from {strategy}")
        return self.renamer.place(file_path, self.dest, date)

    def process_files(self, files: List[Path]) -> List[Outcome]:
        """Process all files with progress tracking, one outcome per file."""
        self.logger.debug(f"Starting to process {len(files)} files")
        outcomes = []

        with Progress(console=self.console, transient=True) as progress:
            task = progress.add_task("Processing files...", total=len(files))
            for file_path in files:
                outcomes.append(self._process_and_record(file_path))
                progress.advance(task)

        return outcomes

    def _process_and_record(self, file_path: Path) -> Outcome:
        try:
            file_size = file_path.stat().st_size
        except OSError:
            file_size = 0

        try:
            outcome = self.process_file(file_path)
        except Exception as e:
            outcome = Outcome(OutcomeKind.FAILED, file_path, cause=e)

        # Tracebacks only in verbose mode
        exc_info = outcome.cause if self.logger.isEnabledFor(logging.DEBUG) else None
        self.logger.log(outcome.log_level, outcome.describe(), exc_info=exc_info)
        self.stats_manager.record(outcome, file_size)
        return outcome

    def run(self) -> List[Outcome]:
        """Find and process every file below the source directory."""
        return self.process_files(self.find_source_files())

    def print_summary(self) -> None:
        """Print processing summary."""
        title = "Processing Summary (dry run)" if self.dry_run else "Processing Summary"
        table = Table(title=title)
        table.add_column("Category", style="cyan")
        table.add_column("Count", style="green")

        table.add_row("Moved", str(self.stats_manager.get_count(OutcomeKind.MOVED)))
        table.add_row("Skipped (target exists)",
                      str(self.stats_manager.get_count(OutcomeKind.SKIPPED_EXISTS)))
        table.add_row("Unresolved", str(self.stats_manager.get_count(OutcomeKind.UNRESOLVED)))
        table.add_row("Failed", str(self.stats_manager.get_count(OutcomeKind.FAILED)))

        size_mb = self.stats_manager.get_total_size_mb()
        if size_mb > 1024:
            size_str = f"{size_mb/1024:.1f} GB"
        else:
            size_str = f"{size_mb:.1f} MB"
        table.add_row("Total Size", size_str)

        self.console.print(table)

        if self.stats_manager.has_errors():
            self.console.print(f"\n[red]Files that could not be dated or moved were left in {self.source}[/red]")
