#!/usr/bin/env python3
"""Find the longest fully repeated and unique range of events in a MIDI file.

Examples
--------
    python tools/loop_find.py song.mid
    python tools/loop_find.py -r 44100 -s 0 < song.mid
"""

from __future__ import annotations

from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from mly.cli import main  # noqa: E402


if __name__ == "__main__":
    raise SystemExit(main(["loop-find", *sys.argv[1:]]))
