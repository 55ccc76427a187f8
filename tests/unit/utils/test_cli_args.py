"""Unit tests for command-line parsing."""

import argparse
from pathlib import Path

import pytest

from tzbot.utils.cli.args import (
    config_file_path,
    folder_path,
    get_parsed_args,
    parse_arguments,
)


def path_args(tmp_path: Path) -> list[str]:
    return [
        "--config-file",
        str(tmp_path / "config.yml"),
        "--data-folder",
        str(tmp_path / "data"),
        "--log-folder",
        str(tmp_path / "logs"),
    ]


class TestPathConverters:
    """Test the argparse path converters."""

    def test_missing_config_file_in_existing_directory(self, tmp_path: Path) -> None:
        """Test that a config file may be missing as long as its folder exists."""
        assert config_file_path(str(tmp_path / "config.yml")) == (tmp_path / "config.yml").resolve()

    def test_config_file_in_missing_directory(self) -> None:
        """Test that a config file under a missing folder is rejected."""
        with pytest.raises(argparse.ArgumentTypeError, match="does not exist"):
            _ = config_file_path("/nonexistent/directory/config.yml")

    def test_config_file_is_directory(self, tmp_path: Path) -> None:
        """Test that a directory is not accepted as config file."""
        with pytest.raises(argparse.ArgumentTypeError, match="is a directory"):
            _ = config_file_path(str(tmp_path))

    def test_folder_may_be_missing(self, tmp_path: Path) -> None:
        """Test that folders are created later and may not exist yet."""
        assert folder_path(str(tmp_path / "new")) == (tmp_path / "new").resolve()

    def test_folder_is_file(self, tmp_path: Path) -> None:
        """Test that an existing file is not accepted as folder."""
        file_path = tmp_path / "file.txt"
        _ = file_path.touch()

        with pytest.raises(argparse.ArgumentTypeError, match="not a directory"):
            _ = folder_path(str(file_path))


class TestParseArguments:
    """Test argument parsing."""

    def test_defaults_are_resolved(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that default paths resolve against the working directory."""
        monkeypatch.chdir(tmp_path)

        result = parse_arguments([])

        assert result.config_file == (tmp_path / "config.yml").resolve()
        assert result.data_folder == (tmp_path / "data").resolve()
        assert result.log_folder == (tmp_path / "logs").resolve()

    def test_custom_paths(self, tmp_path: Path) -> None:
        """Test parsing explicit path options."""
        result = parse_arguments(path_args(tmp_path))

        assert result.config_file == (tmp_path / "config.yml").resolve()
        assert result.data_folder == (tmp_path / "data").resolve()
        assert result.log_folder == (tmp_path / "logs").resolve()

    def test_invalid_path_is_a_usage_error(self) -> None:
        """Test that an invalid path exits through argparse."""
        with pytest.raises(SystemExit) as exc_info:
            _ = parse_arguments(["--config-file", "/nonexistent/directory/config.yml"])

        assert exc_info.value.code == 2

    @pytest.mark.parametrize("flag", ["--help", "--version"])
    def test_informational_flags_exit_cleanly(self, flag: str) -> None:
        """Test that --help and --version exit with code 0."""
        with pytest.raises(SystemExit) as exc_info:
            _ = parse_arguments([flag])

        assert exc_info.value.code == 0

    def test_get_parsed_args_creates_folders(self, tmp_path: Path) -> None:
        """Test that data and log folders are created, the config file is not."""
        result = get_parsed_args(path_args(tmp_path))

        assert result.data_folder.is_dir()
        assert result.log_folder.is_dir()
        assert not result.config_file.exists()
