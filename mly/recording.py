"""Projection of a note-space loop into recording space (PCM samples).

A note-space loop may start on any event, but a loop in a rendered recording
should start where something is heard.  The projector walks forward through
the loop window to the first Note-On (velocity > 0) whose boundary pair still
has equal synthesizer state, then converts both boundaries from pulses to
samples through the tempo map of the governing track.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Tuple

import mido

from .errors import NoValidRecordingAnchor
from .loop_find import LoopSearch
from .state import DEFAULT_TEMPO
from .timeline import Timeline

logger = logging.getLogger(__name__)

DEFAULT_SAMPLERATE = 44100
GOVERNING_TRACK = 0


class TempoMap:
    """Piecewise-constant tempo, converting absolute pulses to seconds."""

    def __init__(self, changes: List[Tuple[int, int]], ticks_per_beat: int):
        self.ticks_per_beat = ticks_per_beat
        # (tick, tempo, seconds at tick); a tempo always applies from tick 0.
        self.segments: List[Tuple[int, int, float]] = [(0, DEFAULT_TEMPO, 0.0)]
        for tick, tempo in sorted(changes, key=lambda c: c[0]):
            last_tick, last_tempo, last_seconds = self.segments[-1]
            seconds = last_seconds + mido.tick2second(
                tick - last_tick, ticks_per_beat, last_tempo
            )
            if tick == last_tick:
                self.segments[-1] = (tick, tempo, last_seconds)
            else:
                self.segments.append((tick, tempo, seconds))
        self._ticks = [segment[0] for segment in self.segments]

    @classmethod
    def from_timeline(
        cls, timeline: Timeline, track: int = GOVERNING_TRACK
    ) -> "TempoMap":
        changes = [
            (event.time, event.get("tempo"))
            for event in timeline
            if event.track == track and event.type == "set_tempo"
        ]
        return cls(changes, timeline.ticks_per_beat)

    def seconds(self, tick: int) -> float:
        idx = bisect_right(self._ticks, tick) - 1
        seg_tick, tempo, seg_seconds = self.segments[idx]
        return seg_seconds + mido.tick2second(tick - seg_tick, self.ticks_per_beat, tempo)

    def samples(self, tick: int, samplerate: int) -> int:
        return round(self.seconds(tick) * samplerate)


@dataclass(frozen=True)
class RecordingSpaceLoop:
    start: int  # timeline index of the anchoring Note-On
    end: int  # timeline index of the matching end boundary
    start_sample: int
    end_sample: int
    samplerate: int
    shift: int


def find_recording_anchor(search: LoopSearch) -> int:
    """Earliest index in the loop window that can anchor a recording loop."""

    loop = search.loop
    timeline = search.timeline
    for pos in range(loop.start, loop.end):
        if pos + loop.length > len(timeline):
            break
        if not timeline[pos].is_note_on:
            continue
        if search.states.equivalent(pos, pos + loop.length):
            return pos
        logger.debug("Note-On at %d rejected: state differs at %d", pos, pos + loop.length)
    raise NoValidRecordingAnchor(
        f"no Note-On with matching channel state inside the loop "
        f"[{loop.start}, {loop.end}["
    )


def project_loop(
    search: LoopSearch,
    *,
    samplerate: int = DEFAULT_SAMPLERATE,
    shift: int = 0,
) -> RecordingSpaceLoop:
    if samplerate <= 0:
        raise ValueError(f"sample rate must be positive, got {samplerate}")

    timeline = search.timeline
    start = find_recording_anchor(search)
    end = start + search.loop.length
    tempo_map = TempoMap.from_timeline(timeline)

    recording = RecordingSpaceLoop(
        start=start,
        end=end,
        start_sample=tempo_map.samples(timeline.time_at(start), samplerate) + shift,
        end_sample=tempo_map.samples(timeline.time_at(end), samplerate) + shift,
        samplerate=samplerate,
        shift=shift,
    )
    logger.debug(
        "recording loop anchored at event %d: samples [%d, %d[",
        recording.start,
        recording.start_sample,
        recording.end_sample,
    )
    return recording
