"""
pytest configuration and fixtures for photostamp tests.
"""

import io
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import pytest
from PIL import Image

from photostamp.constants import TAG_DATE_TIME_ORIGINAL, TAG_EXIF_IFD


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str


def write_jpeg(path: Path, date_time_original: Optional[str] = None) -> Path:
    """Write a small JPEG, optionally carrying EXIF DateTimeOriginal in the Exif IFD."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("RGB", (8, 8), "white")
    if date_time_original is None:
        img.save(path, "JPEG")
    else:
        exif = Image.Exif()
        exif[TAG_EXIF_IFD] = {TAG_DATE_TIME_ORIGINAL: date_time_original}
        img.save(path, "JPEG", exif=exif)
    return path


def write_tiff(path: Path, date_time_original: Optional[str] = None) -> Path:
    """Write a small TIFF, optionally carrying DateTimeOriginal in IFD0."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("RGB", (8, 8), "white")
    tiffinfo = {}
    if date_time_original is not None:
        tiffinfo[TAG_DATE_TIME_ORIGINAL] = date_time_original
    img.save(path, "TIFF", tiffinfo=tiffinfo)
    return path


@pytest.fixture
def source_dir(tmp_path):
    """Empty input directory."""
    path = tmp_path / "incoming"
    path.mkdir()
    return path


@pytest.fixture
def dest_dir(tmp_path):
    """Empty, pre-existing output directory."""
    path = tmp_path / "sorted"
    path.mkdir()
    return path


@pytest.fixture
def test_config_path(tmp_path):
    """Config path that does not exist unless a test writes it."""
    return tmp_path / "config" / "config.yml"


@pytest.fixture
def make_jpeg():
    return write_jpeg


@pytest.fixture
def make_tiff():
    return write_tiff


@pytest.fixture
def cli_runner():
    """Create a CLI runner that captures output and uses test config."""

    def run_cli(*args, config_path=None):
        """Run photostamp CLI with given arguments.

        Args:
            *args: Command line arguments (source, dest, --flags, etc)
            config_path: Optional config path for test isolation

        Returns:
            CliResult with exit_code, output, and error
        """
        from photostamp.cli import main

        # Capture stdout/stderr
        old_stdout = sys.stdout
        old_stderr = sys.stderr
        stdout = io.StringIO()
        stderr = io.StringIO()

        # Store original argv
        old_argv = sys.argv

        try:
            sys.stdout = stdout
            sys.stderr = stderr
            sys.argv = ['photostamp'] + [str(a) for a in args]

            exit_code = main(config_path=config_path)

            return CliResult(
                exit_code=exit_code,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        except SystemExit as e:
            # argparse exits on usage errors and --version
            return CliResult(
                exit_code=e.code if e.code is not None else 0,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        finally:
            sys.stdout = old_stdout
            sys.stderr = old_stderr
            sys.argv = old_argv

    return run_cli


@pytest.fixture
def create_test_files(source_dir):
    """Helper to create plain (non-image) test files in the input directory."""

    def create_files(file_specs: List[dict]) -> Path:
        """Create test files based on specifications.

        Args:
            file_specs: List of dicts with keys:
                - name: path relative to the input directory
                - content: file content (optional)

        Returns:
            Path to directory containing created files
        """
        for spec in file_specs:
            file_path = source_dir / spec['name']
            file_path.parent.mkdir(parents=True, exist_ok=True)

            content = spec.get('content', b'test file content')
            if isinstance(content, str):
                file_path.write_text(content)
            else:
                file_path.write_bytes(content)

        return source_dir

    return create_files


@pytest.fixture
def assert_dir_contents():
    """Helper to assert the exact set of file names at the top level of a directory."""

    def check_contents(directory: Path, expected: List[str]):
        actual = sorted(f.name for f in directory.iterdir() if f.is_file())
        assert actual == sorted(expected), \
            f"Expected files {sorted(expected)} in {directory}, got {actual}"

    return check_contents
