"""Command line entry point.

Usage::

    mly loop-find song.mid
    mly loop-find -r 48000 -s -1024 < song.mid
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .errors import MlyError
from .loop_find import find_loop
from .recording import DEFAULT_SAMPLERATE, project_loop
from .report import render_report
from .smf import SmfSequence, read_smf, read_smf_file
from .timeline import timeline_from_smf

PROG = "mly"


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Filters for Standard MIDI Files",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress details to stderr",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    loop_find = commands.add_parser(
        "loop-find",
        help="Find the longest fully repeated and unique range of MIDI events",
        description=(
            "Finds the longest fully repeated and unique range of MIDI events. "
            "With --shift or --samplerate, also reports the loop in recording "
            "space, anchored at a Note-On event."
        ),
    )
    loop_find.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Path to the .mid file (default: standard input)",
    )
    loop_find.add_argument(
        "-s",
        "--shift",
        type=int,
        default=None,
        help="Offset in samples applied to both recording-space loop points",
    )
    loop_find.add_argument(
        "-r",
        "--samplerate",
        type=_positive_int,
        default=None,
        help=f"Sampling rate for converting times to PCM samples (default {DEFAULT_SAMPLERATE} when --shift is given)",
    )
    loop_find.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Log progress details to stderr",
    )
    return parser


def _read_input(name: str) -> SmfSequence:
    if name == "-":
        return read_smf(sys.stdin.buffer.read())
    return read_smf_file(name)


def run_loop_find(args: argparse.Namespace) -> str:
    sequence = _read_input(args.input)
    search = find_loop(timeline_from_smf(sequence))

    recording = None
    if args.shift is not None or args.samplerate is not None:
        recording = project_loop(
            search,
            samplerate=args.samplerate or DEFAULT_SAMPLERATE,
            shift=args.shift or 0,
        )
    return render_report(search, recording)


def _error_prefix(argv: List[str]) -> str:
    return "`" + " ".join([PROG, *argv]) + "`"


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        report = run_loop_find(args)
    except MlyError as exc:
        print(f"{_error_prefix(argv)}: error: {exc}", file=sys.stderr)
        return exc.exit_code

    sys.stdout.write(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
