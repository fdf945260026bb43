"""
Command-line interface for photostamp.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import Config
from .constants import PROGRAM, get_console, get_logger
from .core import PhotoStamper
from .resolver import DateResolver


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    from . import __version__

    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Prefix photos with their capture date and move them into one folder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Files are renamed to YYYYMMDD-HHMMSS_<original name>. The date comes from the
EXIF DateTimeOriginal tag, or else from known app naming schemes
(PHOTO-..., threema-..., image-..., IMG-...-WA...).

Examples:
  {PROGRAM} ~/Downloads/Incoming ~/Pictures/Sorted
  {PROGRAM} --dry-run ~/Downloads/Incoming ~/Pictures/Sorted
        """
    )

    parser.add_argument(
        "source",
        help="Input directory, searched recursively"
    )
    parser.add_argument(
        "dest",
        help="Existing output directory for the renamed files"
    )
    parser.add_argument(
        "--dry-run", "-n", action="store_true",
        help="Preview operations without making changes"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--log-file", type=Path, metavar="PATH",
        help="Also write a detailed log to PATH"
    )
    parser.add_argument(
        "--version", "-V", action="version", version=f"%(prog)s {__version__}",
        help=f"Display the version number of {PROGRAM} and exit"
    )

    return parser


def configure_logging(console: Console, verbose: bool = False,
                      log_file: Optional[Path] = None) -> logging.Logger:
    """Attach console (and optional file) handlers to the program logger."""
    logger = get_logger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_level = logging.DEBUG if verbose else logging.INFO
    console_handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(console_handler)
    logger.setLevel(console_level)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(name)s] %(levelname)s: %(message)s'
        ))
        logger.addHandler(file_handler)
        # Ensure logger level allows DEBUG messages to reach the file handler
        logger.setLevel(logging.DEBUG)

    return logger


def show_processing_plan(source: Path, dest: Path, dry_run: bool, rule_count: int,
                         console: Console) -> None:
    """Display the processing plan before execution."""
    mode = "DRY RUN" if dry_run else "MOVE"

    console.print("\n[bold]Processing Plan:[/bold]")
    console.print(f"  Source:          [blue]{source}[/blue]")
    console.print(f"  Destination:     [blue]{dest}[/blue]")
    console.print(f"  Processing Mode: [cyan]{mode}[/cyan]")
    console.print(f"  Filename Rules:  [cyan]{rule_count}[/cyan]")
    console.print()


def validate_source(source: Path) -> Optional[str]:
    """Return an error message if the input directory cannot be traversed."""
    if not source.exists():
        return f"Source directory does not exist: {source}"
    if not source.is_dir():
        return f"Source is not a directory: {source}"
    try:
        with os.scandir(source):
            pass
    except OSError as e:
        return f"Source directory is not readable: {source} ({e.strerror})"
    return None


def main(config_path: Optional[Path] = None) -> int:
    """Main entry point.

    Args:
        config_path: Optional path to config file (for testing)
    """
    parser = create_parser()
    args = parser.parse_args()

    console = get_console()
    logger = configure_logging(console, verbose=args.verbose, log_file=args.log_file)

    source = Path(args.source).expanduser().resolve()
    dest = Path(args.dest).expanduser().resolve()

    error = validate_source(source)
    if error:
        print(f"Error: {error}")
        return 1

    if not dest.is_dir():
        logger.warning(f"Destination directory does not exist: {dest}; files cannot be moved")

    config = Config(config_path=config_path)
    resolver = DateResolver.default(extra_rules=config.get_filename_rules())
    rule_count = len(resolver.strategies) - 1

    show_processing_plan(source, dest, args.dry_run, rule_count, console)

    stamper = PhotoStamper(source=source, dest=dest, resolver=resolver, dry_run=args.dry_run)

    try:
        files = stamper.find_source_files()
        if not files:
            console.print("[yellow]No files found in source directory[/yellow]")
            return 0

        console.print(f"Found {len(files)} files to process")
        stamper.process_files(files)
        stamper.print_summary()

        left_in_place = stamper.stats_manager.get_left_in_place()
        if left_in_place:
            console.print(f"\n[green]✓ Processing completed![/green] [yellow]({left_in_place} files left in place)[/yellow]")
        else:
            console.print("\n[green]✓ Processing completed successfully![/green]")
        return 0

    except KeyboardInterrupt:
        console.print("\n[red]Operation cancelled by user[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
