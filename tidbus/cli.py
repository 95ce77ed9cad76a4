"""Command line entry point: render the departure board once or on a timer."""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Sequence

from dotenv import load_dotenv

from tidbus.render import DEFAULT_FONT_PATH, RenderArgs, render


def _non_negative(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {text!r}")
    return value


def parse_args(argv: Sequence[str] | None = None) -> RenderArgs:
    """Parse command line options into render arguments."""
    parser = argparse.ArgumentParser(
        prog="tidbus", description="Show the next buses on a pixel display."
    )
    parser.add_argument("-d", "--debug", help="Filename of the debug file")
    parser.add_argument(
        "-r", "--retry", type=_non_negative, help="Seconds to wait between renders"
    )
    parser.add_argument(
        "--font", default=DEFAULT_FONT_PATH, help="Path of the BDF font to draw with"
    )
    namespace = parser.parse_args(argv)
    return RenderArgs(debug=namespace.debug, retry=namespace.retry, font_path=namespace.font)


def main(argv: Sequence[str] | None = None) -> int:
    """Render once, or repeatedly every ``--retry`` seconds unless writing a debug file."""
    load_dotenv()
    args = parse_args(argv)
    try:
        while True:
            render(args)
            if args.debug is not None or args.retry is None:
                break
            time.sleep(args.retry)
    except Exception as exc:  # noqa: BLE001 - report any failure as a non-zero exit
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())