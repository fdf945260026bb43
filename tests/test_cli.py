"""
Test command-line operations: argument handling, validation and exit codes.
"""

import logging
import os
import sys

import pytest

from photostamp import __version__


class TestBasicOperations:
    """Test fundamental photostamp CLI operations."""

    def test_move(self, cli_runner, source_dir, dest_dir, make_jpeg, test_config_path,
                  assert_dir_contents):
        make_jpeg(source_dir / "PHOTO-2023-06-01-14-30-00_holiday.jpg")
        make_jpeg(source_dir / "sub" / "random.jpg", "2019:12:31 23:59:59")

        result = cli_runner(source_dir, dest_dir, config_path=test_config_path)

        assert result.exit_code == 0
        assert "Processing completed successfully" in result.output
        assert_dir_contents(dest_dir, [
            "20230601-143000_PHOTO-2023-06-01-14-30-00_holiday.jpg",
            "20191231-235959_random.jpg",
        ])

    def test_per_file_problems_do_not_change_exit_code(self, cli_runner, source_dir, dest_dir,
                                                        make_jpeg, test_config_path):
        make_jpeg(source_dir / "holiday.jpg")
        make_jpeg(source_dir / "IMG-20220714-WA0001.jpg")
        (dest_dir / "20220714-000000_IMG-20220714-WA0001.jpg").write_bytes(b"taken")

        result = cli_runner(source_dir, dest_dir, config_path=test_config_path)

        assert result.exit_code == 0
        assert "2 files left in place" in result.output
        assert (source_dir / "holiday.jpg").exists()
        assert (source_dir / "IMG-20220714-WA0001.jpg").exists()

    def test_dry_run_mode(self, cli_runner, source_dir, dest_dir, make_jpeg, test_config_path):
        """Test dry-run mode doesn't modify files."""
        path = make_jpeg(source_dir / "IMG-20220714-WA0001.jpg")

        result = cli_runner(source_dir, dest_dir, "--dry-run", config_path=test_config_path)

        assert result.exit_code == 0
        assert "DRY RUN" in result.output
        assert path.exists()
        assert list(dest_dir.iterdir()) == []

    def test_empty_source_directory(self, cli_runner, source_dir, dest_dir, test_config_path):
        result = cli_runner(source_dir, dest_dir, config_path=test_config_path)

        assert result.exit_code == 0
        assert "No files found in source directory" in result.output

    def test_missing_dest_is_not_created(self, cli_runner, source_dir, tmp_path, make_jpeg,
                                         test_config_path):
        path = make_jpeg(source_dir / "IMG-20220714-WA0001.jpg")
        missing = tmp_path / "missing"

        result = cli_runner(source_dir, missing, config_path=test_config_path)

        assert result.exit_code == 0
        assert not missing.exists()
        assert path.exists()

    def test_verbose_mode(self, cli_runner, source_dir, dest_dir, make_jpeg, test_config_path):
        make_jpeg(source_dir / "IMG-20220714-WA0001.jpg")

        result = cli_runner(source_dir, dest_dir, "--verbose", "--dry-run",
                            config_path=test_config_path)

        assert result.exit_code == 0
        assert logging.getLogger("photostamp").level == logging.DEBUG

    def test_log_file(self, cli_runner, source_dir, dest_dir, make_jpeg, tmp_path,
                      test_config_path):
        make_jpeg(source_dir / "holiday.jpg")
        log_file = tmp_path / "run.log"

        result = cli_runner(source_dir, dest_dir, "--log-file", log_file,
                            config_path=test_config_path)

        assert result.exit_code == 0
        content = log_file.read_text()
        assert "ERROR: Could not determine a date for" in content
        assert "holiday.jpg" in content

    def test_version(self, cli_runner):
        result = cli_runner("--version")

        assert result.exit_code == 0
        assert __version__ in result.output


class TestValidation:
    """Test fatal conditions detected before traversal."""

    def test_missing_arguments(self, cli_runner, source_dir, test_config_path):
        assert cli_runner(config_path=test_config_path).exit_code == 2
        assert cli_runner(source_dir, config_path=test_config_path).exit_code == 2

    def test_nonexistent_source(self, cli_runner, tmp_path, dest_dir, test_config_path):
        result = cli_runner(tmp_path / "nope", dest_dir, config_path=test_config_path)

        assert result.exit_code == 1
        assert "Source directory does not exist" in result.output

    def test_source_is_file(self, cli_runner, tmp_path, dest_dir, test_config_path):
        not_a_dir = tmp_path / "not_a_directory.txt"
        not_a_dir.write_text("test")

        result = cli_runner(not_a_dir, dest_dir, config_path=test_config_path)

        assert result.exit_code == 1
        assert "Source is not a directory" in result.output

    @pytest.mark.skipif(sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
                        reason="requires POSIX permissions as a regular user")
    def test_unreadable_source(self, cli_runner, source_dir, dest_dir, test_config_path):
        source_dir.chmod(0o000)
        try:
            result = cli_runner(source_dir, dest_dir, config_path=test_config_path)
        finally:
            source_dir.chmod(0o755)

        assert result.exit_code == 1
        assert "Source directory is not readable" in result.output
