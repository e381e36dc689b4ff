"""Command-line interface: replay a transcript through a live session.

WHY: Without a microphone app in front of it, the quickest way to run
the pipeline end to end is to treat a text file as speech arriving over
time: each line extends the transcript, the scheduler extracts on its
interval, and the final lists are printed in any export format.

HOW: Uses argparse for options and asyncio.run() for the session. Lines
are replayed as cumulative transcript updates (one per --chunk-delay
seconds) into a SessionController backed by an ExtractionClient. When
the file is exhausted the session is stopped, the final extraction is
awaited, and the chosen formatter's output goes to stdout or --output.

RULES:
- Positional argument: transcript text file (UTF-8)
- Status messages go to stderr; the export goes to stdout
- Exit 1 when the file is missing or the session ends with an error
- Exit 130 on Ctrl-C
- --verbose enables DEBUG logging for the pipeline
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from listy.api.client import ExtractionClient
from listy.config import EXTRACTION_INTERVAL_S
from listy.formatters import FORMATTERS
from listy.session.controller import SessionController
from listy.session.sources import replay
from listy.session.state import SessionSnapshot


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


class _ProgressReporter:
    """Session listener that reports new items and errors as they happen."""

    def __init__(self) -> None:
        self._item_count = 0
        self._error: Optional[str] = None

    def __call__(self, snapshot: SessionSnapshot) -> None:
        item_count = sum(len(c.items) for c in snapshot.categories)
        if item_count != self._item_count:
            _status("  {} items in {} categories".format(item_count, len(snapshot.categories)))
            self._item_count = item_count

        error = snapshot.error_message
        if error and error != self._error:
            _status("  Extraction error: {}".format(error))
        self._error = error


async def _run_session(args: argparse.Namespace) -> SessionSnapshot:
    """Replay the transcript file through a session and return the final state."""
    lines = Path(args.transcript_file).read_text(encoding="utf-8").splitlines()

    async with ExtractionClient() as client:
        controller = SessionController(client, interval=args.interval)
        controller.subscribe(_ProgressReporter())

        _status("Listening ({} lines, extraction every {:.1f}s)...".format(
            len(lines), args.interval,
        ))
        controller.start()
        await controller.follow(replay(lines, delay=args.chunk_delay))

        _status("Stopping session...")
        controller.stop()
        await controller.drain()
        return controller.snapshot()


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="listy",
        description="Replay a transcript as live speech and extract the lists "
                    "(pros, cons, action items, ...) mentioned in it.",
    )

    parser.add_argument(
        "transcript_file",
        help="Path to a UTF-8 text file; each line is one chunk of speech.",
    )

    parser.add_argument(
        "--interval",
        type=float,
        default=EXTRACTION_INTERVAL_S,
        help="Seconds between extraction attempts (default: %(default)s).",
    )

    parser.add_argument(
        "--chunk-delay",
        type=float,
        default=1.0,
        help="Seconds between replayed lines (default: %(default)s).",
    )

    parser.add_argument(
        "--format",
        dest="format_key",
        choices=sorted(FORMATTERS.keys()),
        default="markdown",
        help="Export format (default: %(default)s).",
    )

    parser.add_argument(
        "--output",
        default=None,
        help="Write the export to this file instead of stdout.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``listy`` console script.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.interval <= 0:
        print("Error: --interval must be positive", file=sys.stderr)
        sys.exit(1)

    transcript_path = Path(args.transcript_file)
    if not transcript_path.is_file():
        print("Error: File not found: {}".format(transcript_path), file=sys.stderr)
        sys.exit(1)

    try:
        snapshot = asyncio.run(_run_session(args))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)

    output = FORMATTERS[args.format_key]().format(snapshot.categories)[0]
    if args.output:
        Path(args.output).write_text(output.content, encoding="utf-8")
        _status("Saved: {}".format(args.output))
    else:
        sys.stdout.write(output.content)
        sys.stdout.flush()

    if snapshot.last_error is not None:
        print("Error: {}".format(snapshot.error_message), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
