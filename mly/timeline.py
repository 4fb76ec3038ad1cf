"""Merge per-track event lists into one absolute-time ordered timeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .events import Event, Symbol
from .smf import SmfSequence

logger = logging.getLogger(__name__)


def merge_key(event: Event) -> Tuple[int, int, int]:
    return (event.time, event.track, event.order)


@dataclass(frozen=True)
class Timeline:
    events: Tuple[Event, ...]
    ticks_per_beat: int
    end_time: int  # latest End-of-Track time over all tracks

    def __len__(self) -> int:
        return len(self.events)

    def __getitem__(self, index: int) -> Event:
        return self.events[index]

    def __iter__(self):
        return iter(self.events)

    def symbols(self) -> List[Symbol]:
        return [event.symbol for event in self.events]

    def time_at(self, index: int) -> int:
        """Absolute tick of boundary ``index``; ``len(self)`` maps to the end."""

        if index == len(self.events):
            return self.end_time
        return self.events[index].time


def build_timeline(
    tracks: Iterable[Sequence[Event]], ticks_per_beat: int
) -> Timeline:
    """Flatten ``tracks`` into a single stream.

    Simultaneous events keep the input track order, and events of one track
    keep their order.  End-of-Track metas only contribute to ``end_time``.
    """

    merged: List[Event] = []
    end_time = 0
    for track in tracks:
        for event in track:
            end_time = max(end_time, event.time)
            if event.is_end_of_track:
                continue
            merged.append(event)
    merged.sort(key=merge_key)

    timeline = Timeline(
        events=tuple(merged), ticks_per_beat=ticks_per_beat, end_time=end_time
    )
    logger.debug("timeline: %d events, end at pulse %d", len(timeline), end_time)
    return timeline


def timeline_from_smf(sequence: SmfSequence) -> Timeline:
    return build_timeline(sequence.tracks, sequence.ticks_per_beat)
