"""Standard MIDI File reading on top of mido.

Only the parse half of the SMF collaborator lives here: bytes in, per-track
event lists out.  Any structural problem mido reports is surfaced as
:class:`~mly.errors.MalformedInput`.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import List, Sequence

import mido
from mido.midifiles.meta import KeySignatureError

from .errors import MalformedInput
from .events import Event, event_from_message

logger = logging.getLogger(__name__)

SMF_MAGIC = b"MThd"
SMPTE_DIVISION_FLAG = 0x8000


@dataclass(frozen=True)
class SmfSequence:
    """A parsed file: header values plus one absolute-time event list per track."""

    format: int
    ticks_per_beat: int
    tracks: Sequence[Sequence[Event]]

    @property
    def event_count(self) -> int:
        return sum(len(track) for track in self.tracks)


def track_events(track: mido.MidiTrack, track_index: int) -> List[Event]:
    """Resolve the delta times of one mido track into absolute-time events."""

    events: List[Event] = []
    abs_tick = 0
    for order, msg in enumerate(track):
        abs_tick += msg.time
        events.append(
            event_from_message(msg, time=abs_tick, track=track_index, order=order)
        )
    return events


def read_smf(data: bytes) -> SmfSequence:
    if len(data) < 14:
        raise MalformedInput(f"file too short for an SMF header ({len(data)} bytes)")
    if data[:4] != SMF_MAGIC:
        raise MalformedInput(f"bad SMF magic: {data[:4].hex()}")

    try:
        mid = mido.MidiFile(file=io.BytesIO(data))
    except (
        OSError, EOFError, ValueError, KeyError, IndexError, KeySignatureError
    ) as exc:
        raise MalformedInput(f"invalid SMF structure: {exc}") from exc

    if mid.ticks_per_beat & SMPTE_DIVISION_FLAG:
        raise MalformedInput("SMPTE time division (ticks/second) is not supported")
    if mid.ticks_per_beat == 0:
        raise MalformedInput("time division of 0 pulses per quarter note")

    tracks = [track_events(track, idx) for idx, track in enumerate(mid.tracks)]
    sequence = SmfSequence(
        format=mid.type, ticks_per_beat=mid.ticks_per_beat, tracks=tracks
    )
    logger.debug(
        "read SMF type %d: %d tracks, %d events, %d PPQN",
        sequence.format,
        len(tracks),
        sequence.event_count,
        sequence.ticks_per_beat,
    )
    return sequence


def read_smf_file(path) -> SmfSequence:
    try:
        with open(path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise MalformedInput(f"cannot read {path}: {exc.strerror or exc}") from exc
    return read_smf(data)
