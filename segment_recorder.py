"""
Segment Recorder Service

Interactive front end for a segmented recording session.
Wires the permission gate, capture backends and session manager together
and drives them from line commands on stdin.

Commands:
    record          Start a segment
    stop            Stop the current segment
    flip            Switch front/back camera
    delete ID       Delete a segment
    preview         Play the segments back-to-back
    next            Segment finished playing, advance
    back            Leave preview, back to the camera
    hide / show     Simulate the app going to background / foreground
    retry           Re-acquire the camera after an error
    status          Print session details
    quit            Hand off segments and exit

On quit the recorded segments are handed off and summarized in the log.
"""

import argparse
import logging
import logging.handlers
import signal
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, TextIO

from capture import Facing, create_capture_backends
from config.settings import LOG_DIR, LOG_SERVICE_FILE
from permissions import PermissionGate, create_permissions
from session import (
    SessionConfig,
    SessionEvent,
    SessionManager,
    SessionStatus,
    describe,
    format_ms,
)


class SegmentRecorderService:
    """
    Line-command loop around one SessionManager.

    Usage:
        service = SegmentRecorderService(manager, gate)
        service.run()          # reads stdin until "quit" or EOF
    """

    def __init__(
        self,
        manager: SessionManager,
        gate: PermissionGate,
        output: TextIO = sys.stdout,
    ):
        self.logger = logging.getLogger(__name__)
        self.manager = manager
        self.gate = gate
        self.output = output
        self.running = False

        self._commands: Dict[str, Callable[[List[str]], None]] = {
            "record": lambda _: self.manager.start_recording(),
            "stop": lambda _: self.manager.stop_recording(),
            "flip": lambda _: self.manager.flip(),
            "delete": self._delete,
            "preview": lambda _: self.manager.enter_preview(),
            "next": lambda _: self.manager.preview_advance(),
            "back": lambda _: self.manager.exit_preview(),
            "hide": lambda _: self.manager.handle_visibility(hidden=True),
            "show": lambda _: self.manager.handle_visibility(hidden=False),
            "retry": lambda _: self.manager.initialize(),
            "status": lambda _: self._print(self.manager.get_session_info()),
        }

        # Show auto-stops as they happen
        self.manager.events.subscribe(SessionEvent.BUDGET_EXHAUSTED, self._on_budget_exhausted)

    def start(self) -> bool:
        """
        Run onboarding and open the camera.

        Returns:
            False if permissions were refused
        """
        if not self.gate.ensure():
            for line in self.gate.instructions():
                self._print(line)
            self._print(self.gate.denied_message())
            return False

        self.manager.initialize()
        self._print(describe(self.manager.get_status()))
        return True

    def handle_command(self, line: str) -> bool:
        """
        Execute one command line.

        Returns:
            False when the loop should end
        """
        parts = line.strip().split()
        if not parts:
            return True

        name, args = parts[0].lower(), parts[1:]

        if name in ("quit", "exit"):
            return False

        command = self._commands.get(name)
        if command is None:
            self._print(f"Unknown command: {name}")
            return True

        command(args)
        self._print(describe(self.manager.get_status()))
        return True

    def run(self, input_stream: TextIO = sys.stdin) -> None:
        """Read commands until quit or end of input"""
        self.running = True

        if not self.start():
            self._print("Type 'retry' after granting access, or 'quit'")
            if not self._wait_for_permissions(input_stream):
                self.shutdown()
                return

        for line in input_stream:
            if not self.running or not self.handle_command(line):
                break

        self.shutdown()

    def shutdown(self) -> None:
        """Hand off segments, log the summary and release everything"""
        if not self.running:
            return
        self.running = False

        self.manager.stop_recording()
        if self.manager.status is SessionStatus.PREVIEW_ACTIVE:
            self.manager.exit_preview(reacquire=False)

        segments = self.manager.hand_off_segments()
        total = sum(segment.duration_ms for segment in segments)
        self.logger.info(f"Session finished: {len(segments)} segments, {format_ms(total)}")
        for segment in segments:
            self.logger.info(
                f"  segment {segment.id}: {format_ms(segment.duration_ms)}, "
                f"{segment.payload.size_bytes} bytes",
            )
            segment.release()

        self.manager.cleanup()

    def _wait_for_permissions(self, input_stream: TextIO) -> bool:
        for line in input_stream:
            command = line.strip().lower()
            if command == "retry" and self.gate.retry():
                self.manager.initialize()
                self._print(describe(self.manager.get_status()))
                return True
            if command in ("quit", "exit"):
                return False
            self._print(self.gate.denied_message())
        return False

    def _delete(self, args: List[str]) -> None:
        if not args or not args[0].isdigit():
            self._print("Usage: delete ID")
            return
        if not self.manager.delete_segment(int(args[0])):
            self._print(f"No segment {args[0]}")

    def _on_budget_exhausted(self, _event) -> None:
        self._print("Recording limit reached")

    def _print(self, text: str) -> None:
        print(text, file=self.output, flush=True)

    def _signal_handler(self, signum, _frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            _frame: Current stack frame (unused, required by signal API)
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received signal {signal_name}, shutting down...")
        self.shutdown()
        sys.exit(0)


def setup_logging(level: str = "INFO"):
    """
    Setup logging with rotation.

    Logs to both console and file with rotation:
    - Daily rotation
    - Keep 7 days of logs
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    log_format = logging.Formatter("%(asctime)s %(levelname)s %(message)s | %(name)s")

    # Console handler (stderr, stdout is the command channel)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(log_format)
    logger.addHandler(console_handler)

    log_file = Path(LOG_DIR) / LOG_SERVICE_FILE
    try:
        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(log_file),
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
    except (PermissionError, FileNotFoundError):
        # Fallback to local logs directory if LOG_DIR is not writable
        logs_dir = Path("logs")
        logs_dir.mkdir(exist_ok=True)

        fallback_log = logs_dir / "segment-recorder.log"
        logger.warning(f"Cannot write to {log_file}, using fallback: {fallback_log}")

        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(fallback_log),
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )

    file_handler.setFormatter(log_format)
    logger.addHandler(file_handler)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Record up to one minute of video as deletable segments",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use simulated camera, encoder and permissions",
    )
    parser.add_argument(
        "--facing",
        choices=[facing.value for facing in Facing],
        help="Camera to start with (default: from config)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Session YAML config file (default: config/session.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    return parser.parse_args(argv)


def build_service(args: argparse.Namespace) -> SegmentRecorderService:
    """Create the session and its collaborators from CLI options"""
    overrides = {"default_facing": args.facing} if args.facing else None
    config = SessionConfig(config_path=args.config, overrides=overrides)

    provider, encoder = create_capture_backends(force_mock=args.mock)
    permissions = create_permissions(mode="mock" if args.mock else "auto")

    manager = SessionManager(provider, encoder, config=config)
    return SegmentRecorderService(manager, PermissionGate(permissions))


def main(argv: Optional[List[str]] = None):
    """
    Main entry point for the service.

    Sets up logging and runs the command loop.
    """
    args = parse_args(argv)
    setup_logging(args.log_level)

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("Segment Recorder Starting")
    logger.info("=" * 60)

    try:
        service = build_service(args)
        signal.signal(signal.SIGTERM, service._signal_handler)
        service.run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except Exception as e:
        logger.critical(f"Fatal error in main: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
