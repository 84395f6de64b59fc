"""Argument parsing for the clipstash CLI."""

import argparse
from pathlib import Path


def add_common_args(parser: argparse.ArgumentParser, subcommand: bool = False) -> None:
    """Add --config and --verbose arguments to a parser.

    Subcommand copies suppress their defaults so `clipstash -v daemon` and
    `clipstash daemon -v` both work.
    """
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=argparse.SUPPRESS if subcommand else None,
        metavar="PATH",
        help="Config file (default: <data dir>/config.json if present)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=argparse.SUPPRESS if subcommand else False,
        help="Show debug output on the console",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog="clipstash",
        description="Clipboard history with a rofi picker",
    )
    add_common_args(parser)
    parser.add_argument(
        "--daemon",
        action="store_true",
        help="Same as the daemon subcommand",
    )

    subparsers = parser.add_subparsers(dest="command")

    daemon_parser = subparsers.add_parser(
        "daemon",
        help="Watch the clipboard and record history until interrupted",
    )
    add_common_args(daemon_parser, subcommand=True)

    select_parser = subparsers.add_parser(
        "select",
        help="Pick an entry from history and paste it (default)",
    )
    add_common_args(select_parser, subcommand=True)

    list_parser = subparsers.add_parser(
        "list",
        help="Print the history",
    )
    list_parser.add_argument(
        "--limit", "-n",
        type=int,
        default=None,
        metavar="N",
        help="Show at most N entries",
    )
    add_common_args(list_parser, subcommand=True)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    No subcommand means `select`, matching a keybinding that runs `clipstash`.
    """
    args = build_parser().parse_args(argv)
    if args.command is None:
        args.command = "daemon" if args.daemon else "select"
    return args
