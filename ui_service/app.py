"""Terminal UI entrypoint for Multi-Counter."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from common.config import Config, default_config
from common.errors import MultiCounterError, TerminalRestoreError
from common.logging_setup import get_logger, setup_logging
from counters.state import AppState, handle_event
from terminal.session import TerminalSession
from ui_service.ui import render_frame

logger = get_logger(__name__)

RESTORE_HINT = (
    "failed to restore terminal. Run `reset` or restart your terminal to recover"
)


class App:
    """
    Event loop over a terminal session.

    Each iteration draws the whole state, blocks for one key and applies it.
    Errors from a transition end the loop and propagate to the caller, which
    is responsible for restoring the terminal.
    """

    def __init__(self, session: TerminalSession, state: AppState, config: Config):
        self.session = session
        self.state = state
        self.config = config

    def run(self) -> None:
        """Run until the quit key is pressed."""
        while not self.state.exit:
            self.session.draw(lambda frame: render_frame(self.state, frame))
            event = self.session.read_event()
            handle_event(event, self.state, clamp=self.config.clamp)
        logger.info("Quit requested")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Multi-Counter - three focusable counters in the terminal",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--log-level",
        default=default_config.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    parser.add_argument(
        "--log-file",
        default=default_config.log_file,
        help="Log file path (optional; nothing is logged to the screen)",
    )

    parser.add_argument(
        "--clamp",
        action="store_true",
        default=default_config.clamp,
        help="Ignore increments at the maximum and decrements at zero instead of exiting",
    )

    return parser.parse_args(argv)


def _restore(session: TerminalSession) -> bool:
    try:
        session.restore()
    except TerminalRestoreError as exc:
        logger.error("Terminal restore failed: %s", exc)
        print(f"{RESTORE_HINT}: {exc}", file=sys.stderr)
        return False
    return True


def run_app(config: Config, session: Optional[TerminalSession] = None) -> int:
    """Run the UI with the given config and return the process exit code."""
    session = session or TerminalSession()
    state = AppState.create(config.counter_count, config.max_value)
    app = App(session, state, config)

    exit_code = 0
    failure: Optional[MultiCounterError] = None
    try:
        session.initialize()
        app.run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except MultiCounterError as exc:
        logger.error("Application failed: %s", exc)
        failure = exc
    finally:
        restored = _restore(session)

    # Reported after restore so the message lands on the normal screen.
    if failure is not None:
        print(f"Error: {failure}", file=sys.stderr)
        exit_code = 1
    elif not restored:
        exit_code = 1
    return exit_code


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    config = Config(
        clamp=args.clamp,
        log_level=args.log_level,
        log_file=args.log_file,
    )

    setup_logging(level=config.log_level, log_file=config.log_file, console=False)

    sys.exit(run_app(config))


if __name__ == "__main__":
    main()
