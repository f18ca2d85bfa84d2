"""Entry point for python -m pomo."""

import argparse
import logging
import sys
from typing import List, Optional

from textual.logging import TextualHandler

from . import __version__
from .durations import build_config
from .notifications import SilentNotifier
from .session import initial_transition
from .ui import run_ui

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="pomo",
        description="Pomodoro timer for the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Controls (setup):
  Tab/↑/↓  Switch field
  Enter    Next field / start
  a        Toggle autobreak
  q        Quit

Controls (timer):
  Space    Pause/Resume
  s        Skip current session
  ↑/↓      Adjust time ±1 minute
  Esc      Return to setup
  q        Quit

Examples:
  pomo                    # Interactive setup
  pomo 25m                # 25min work, 5min break, 4 sessions
  pomo 50m 10m            # 50min work, 10min break, 4 sessions
  pomo 45m 15m 6          # 45min work, 15min break, 6 sessions
""",
    )

    parser.add_argument("work", nargs="?", help="Work duration, e.g. 25, 25m, 90s (default: 25m)")
    parser.add_argument("break_", nargs="?", metavar="break", help="Break duration (default: 5m)")
    parser.add_argument("sessions", nargs="?", help="Number of work sessions (default: 4)")

    parser.add_argument(
        "--no-auto-break",
        action="store_false",
        dest="auto_break",
        help="Ask before starting each break and work session",
    )
    parser.add_argument(
        "--no-notify",
        action="store_true",
        help="Disable notifications (bell and system)",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Write logs to PATH instead of the textual devtools console",
    )
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """Configure logging for the application.

    A terminal UI owns stdout, so records go either to a file or to the
    textual devtools console.
    """
    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    else:
        handler = TextualHandler()
    logging.basicConfig(level=level, handlers=[handler], force=True)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO, args.log_file)

    config = None
    if args.work:
        config = build_config(args.work, args.break_ or "", args.sessions or "", args.auto_break)

    notifier = SilentNotifier() if args.no_notify else None

    try:
        run_ui(initial_transition(config, auto_break=args.auto_break), notifier)
    except KeyboardInterrupt:
        pass

    return 0


if __name__ == "__main__":
    sys.exit(main())
