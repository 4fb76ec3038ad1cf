from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from mly.timing import MidiTimeDisplay  # noqa: E402


def test_columns_follow_sequence_length() -> None:
    display = MidiTimeDisplay.for_range(ppqn=480, end_pulse=48000)
    assert display.pulse(0) == "    0"
    assert display.beat(0) == "  0:000"
    assert display.beat(2160) == "  4:240"
    assert display.format(1920) == "pulse  1920 / beat   4:000"


def test_small_ppqn_pads_pulse_part() -> None:
    display = MidiTimeDisplay.for_range(ppqn=96, end_pulse=200)
    assert display.beat(97) == "1:01"
    assert display.beat(5) == "0:05"
