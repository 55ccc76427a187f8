"""Command-line parsing."""

from .args import ParsedArgs, get_parsed_args, parse_arguments

__all__ = [
    "ParsedArgs",
    "get_parsed_args",
    "parse_arguments",
]
