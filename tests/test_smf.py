"""Tests for reading Standard MIDI Files through mido."""

import io
from pathlib import Path
import sys

import mido
import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from mly.errors import MalformedInput  # noqa: E402
from mly.smf import read_smf, read_smf_file  # noqa: E402
from mly.timeline import timeline_from_smf  # noqa: E402


def _smf_bytes(mid: mido.MidiFile) -> bytes:
    buf = io.BytesIO()
    mid.save(file=buf)
    return buf.getvalue()


def _two_track_file() -> mido.MidiFile:
    mid = mido.MidiFile(type=1, ticks_per_beat=96)
    mid.tracks.append(
        mido.MidiTrack([mido.MetaMessage("set_tempo", tempo=600000, time=0)])
    )
    mid.tracks.append(
        mido.MidiTrack(
            [
                mido.Message("note_on", channel=1, note=60, velocity=100, time=0),
                mido.Message("note_off", channel=1, note=60, time=96),
            ]
        )
    )
    return mid


def test_reads_tracks_with_absolute_times() -> None:
    sequence = read_smf(_smf_bytes(_two_track_file()))
    assert sequence.format == 1
    assert sequence.ticks_per_beat == 96
    assert len(sequence.tracks) == 2
    # mido appends End-of-Track to each track when saving.
    assert [e.type for e in sequence.tracks[1]] == ["note_on", "note_off", "end_of_track"]
    assert [e.time for e in sequence.tracks[1]] == [0, 96, 96]
    assert all(e.track == 1 for e in sequence.tracks[1])


def test_timeline_from_smf() -> None:
    timeline = timeline_from_smf(read_smf(_smf_bytes(_two_track_file())))
    assert [e.type for e in timeline] == ["set_tempo", "note_on", "note_off"]
    assert timeline.end_time == 96
    assert timeline.ticks_per_beat == 96


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"MThd",
        b"RIFF" + bytes(20),
        b"MThd\x00\x00\x00\x06\x00\x00\x00\x01\x01\xe0MTrk\x00\x00\x00\x10\x00\x90",
    ],
)
def test_malformed_input(data: bytes) -> None:
    with pytest.raises(MalformedInput):
        read_smf(data)


def test_smpte_division_is_rejected() -> None:
    header = b"MThd" + (6).to_bytes(4, "big") + bytes([0, 0, 0, 1, 0xE7, 0x28])
    track = b"MTrk" + (4).to_bytes(4, "big") + b"\x00\xff\x2f\x00"
    with pytest.raises(MalformedInput, match="SMPTE"):
        read_smf(header + track)


def test_malformed_input_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        read_smf(b"not a midi file at all")


def test_invalid_key_signature_mode_is_malformed() -> None:
    header = b"MThd" + (6).to_bytes(4, "big") + bytes([0, 0, 0, 1, 0x01, 0xE0])
    body = b"\x00\xff\x59\x02\x00\x76" + b"\x00\xff\x2f\x00"
    track = b"MTrk" + len(body).to_bytes(4, "big") + body
    with pytest.raises(MalformedInput, match="invalid SMF structure"):
        read_smf(header + track)


def test_read_smf_file(tmp_path: Path) -> None:
    path = tmp_path / "two.mid"
    path.write_bytes(_smf_bytes(_two_track_file()))
    sequence = read_smf_file(path)
    assert sequence.ticks_per_beat == 96
    assert len(sequence.tracks) == 2


def test_read_smf_file_missing(tmp_path: Path) -> None:
    with pytest.raises(MalformedInput, match="cannot read"):
        read_smf_file(tmp_path / "absent.mid")
