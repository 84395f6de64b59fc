"""Entry point for the clipstash CLI.

Modes:
    clipstash daemon    Watch the clipboard and record history (Ctrl+C stops)
    clipstash [select]  Pick an entry with rofi and paste it
    clipstash list      Print the history
"""

import argparse
import asyncio
import logging
import signal
import sys

from dotenv import load_dotenv

from clipstash.capture.system_clipboard import ClipboardUnavailable
from clipstash.cli.arg_parser import parse_args
from clipstash.cli.bootstrap import (
    build_capture_loop,
    build_selection_flow,
    build_store,
    configure_logging,
)
from clipstash.config.loader import load_config
from clipstash.config.schema import Config
from clipstash.core.cancel import CancellationToken
from clipstash.core.constants import get_logs_dir
from clipstash.core.encoding import configure_stdio
from clipstash.core.errors import ClipstashError, ExternalServiceError, SetupError
from clipstash.display.console import get_console, get_error_console
from clipstash.display.history_list import print_history

logger = logging.getLogger(__name__)


async def run_daemon(config: Config) -> int:
    """Run the capture session until SIGINT/SIGTERM.

    Returns:
        Process exit code.
    """
    err = get_error_console()
    try:
        store = build_store(config)
        capture = build_capture_loop(config, store)
    except SetupError as e:
        err.print(f"[red]Cannot start:[/] {e.message}")
        return 1
    except ClipboardUnavailable as e:
        err.print(f"[red]Clipboard unavailable:[/] {e.message}")
        return 1

    token = CancellationToken()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, token.cancel)
        except NotImplementedError:
            # Windows event loops: KeyboardInterrupt ends asyncio.run instead
            pass
    token.on_cancel(lambda: err.print("\nShutting down daemon...", style="dim"))

    err.print(f"Recording clipboard history to [cyan]{store.path}[/]")
    try:
        await capture.run(token)
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.remove_signal_handler(sig)
            except NotImplementedError:
                pass
    return 0


def cmd_select(config: Config) -> int:
    """Show the picker and paste the chosen entry."""
    err = get_error_console()
    try:
        store = build_store(config)
        flow = build_selection_flow(config, store)
        flow.run()
    except ExternalServiceError as e:
        logger.error("Selection failed: %s", e.message)
        err.print(f"[red]Error:[/] {e.message}")
        return 1
    except ClipstashError as e:
        err.print(f"[red]Error:[/] {e.message}")
        return 1
    return 0


def cmd_list(config: Config, limit: int | None = None) -> int:
    """Print the history as a table."""
    try:
        store = build_store(config)
    except SetupError as e:
        get_error_console().print(f"[red]Error:[/] {e.message}")
        return 1

    items = store.snapshot()
    if limit is not None:
        items = items[: max(0, limit)]
    console = get_console()
    if not items:
        console.print("History is empty.", style="dim")
        return 0
    print_history(items, console)
    return 0


def dispatch(args: argparse.Namespace) -> int:
    """Run the selected command and return its exit code."""
    console_level = logging.DEBUG if args.verbose else logging.WARNING
    if args.command == "daemon":
        try:
            configure_logging(
                get_logs_dir(),
                level=logging.INFO,
                console_level=min(console_level, logging.INFO),
            )
        except OSError as e:
            get_error_console().print(f"[red]Cannot create log directory:[/] {e}")
            return 1
    else:
        configure_logging(None, console_level=console_level)

    try:
        config = load_config(args.config)
    except ClipstashError as e:
        get_error_console().print(f"[red]Configuration error:[/] {e.message}")
        return 1

    if args.command == "daemon":
        return asyncio.run(run_daemon(config))
    if args.command == "list":
        return cmd_list(config, args.limit)
    return cmd_select(config)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the clipstash CLI."""
    configure_stdio()
    # Allows CLIPSTASH_HOME etc. to come from a .env file
    load_dotenv()

    args = parse_args(argv)
    try:
        exit_code = dispatch(args)
    except KeyboardInterrupt:
        exit_code = 130
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
