"""
Command-line interface of the timezone bot.

Paths are resolved and checked by argparse ``type`` converters, so a bad
path is reported through the parser's usage error.
"""

import argparse
from pathlib import Path
from typing import NamedTuple

from ..core.version import get_version

DEFAULT_CONFIG_FILE = "config.yml"
DEFAULT_DATA_FOLDER = "data"
DEFAULT_LOG_FOLDER = "logs"


class ParsedArgs(NamedTuple):
    """Paths the bot runs with."""

    config_file: Path
    data_folder: Path
    log_folder: Path


def config_file_path(value: str) -> Path:
    """
    Resolve the configuration file argument.

    The file itself may be missing (a sample is written next to it), but its
    directory must exist.

    Raises:
        argparse.ArgumentTypeError: If the path is a directory or its parent
            directory does not exist
    """
    path = Path(value).expanduser().resolve()
    if path.is_dir():
        raise argparse.ArgumentTypeError(f"{path} is a directory, expected a file")
    if not path.parent.is_dir():
        raise argparse.ArgumentTypeError(f"directory {path.parent} does not exist")
    return path


def folder_path(value: str) -> Path:
    """
    Resolve a folder argument; the folder is created later if missing.

    Raises:
        argparse.ArgumentTypeError: If the path exists and is not a directory
    """
    path = Path(value).expanduser().resolve()
    if path.exists() and not path.is_dir():
        raise argparse.ArgumentTypeError(f"{path} exists and is not a directory")
    return path


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tzbot",
        description="Shows the current time of configured timezones in the bot's Discord nickname",
    )
    _ = parser.add_argument(
        "--config-file",
        type=config_file_path,
        default=DEFAULT_CONFIG_FILE,
        metavar="PATH",
        help="YAML configuration file (default: %(default)s)",
    )
    _ = parser.add_argument(
        "--data-folder",
        type=folder_path,
        default=DEFAULT_DATA_FOLDER,
        metavar="PATH",
        help="folder holding per-guild timezone settings (default: %(default)s)",
    )
    _ = parser.add_argument(
        "--log-folder",
        type=folder_path,
        default=DEFAULT_LOG_FOLDER,
        metavar="PATH",
        help="folder for log files (default: %(default)s)",
    )
    _ = parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version()}"
    )
    return parser


def parse_arguments(args: list[str] | None = None) -> ParsedArgs:
    """
    Parse command-line arguments.

    Args:
        args: Arguments to parse, defaults to ``sys.argv[1:]``

    Returns:
        ParsedArgs with resolved paths

    Raises:
        SystemExit: On invalid arguments, ``--help`` or ``--version``
    """
    namespace = create_argument_parser().parse_args(args)
    return ParsedArgs(
        config_file=namespace.config_file,
        data_folder=namespace.data_folder,
        log_folder=namespace.log_folder,
    )


def get_parsed_args(args: list[str] | None = None) -> ParsedArgs:
    """Parse arguments and create the data and log folders."""
    parsed_args = parse_arguments(args)
    parsed_args.data_folder.mkdir(parents=True, exist_ok=True)
    parsed_args.log_folder.mkdir(parents=True, exist_ok=True)
    return parsed_args
