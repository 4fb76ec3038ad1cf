"""Per-channel synthesizer state tracking.

The timeline is replayed once.  ``StateTable.snapshots[i]`` is the state
after applying ``timeline[0:i]``, so there are ``len(timeline) + 1``
snapshots and both ends of any half-open range have one.

Snapshots are immutable and share every channel record that did not change,
and each distinct snapshot gets an integer id so that comparing two
positions is a single integer comparison.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, List, Tuple

from .events import Event, EventKind
from .timeline import Timeline

logger = logging.getLogger(__name__)

CHANNEL_COUNT = 16
DEFAULT_CONTROLLER_VALUE = 0
DEFAULT_PITCH_BEND = 0  # mido's signed representation; 0 is centered
DEFAULT_PROGRAM = 0
DEFAULT_TEMPO = 500000  # microseconds per quarter note (120 BPM)


@dataclass(frozen=True)
class ChannelState:
    notes: FrozenSet[Tuple[int, int]] = frozenset()  # (note, velocity)
    controllers: Tuple[Tuple[int, int], ...] = ()  # sorted, defaults omitted
    pitch_bend: int = DEFAULT_PITCH_BEND
    program: int = DEFAULT_PROGRAM

    def controller(self, number: int) -> int:
        for cc, value in self.controllers:
            if cc == number:
                return value
        return DEFAULT_CONTROLLER_VALUE

    def with_note_on(self, note: int, velocity: int) -> "ChannelState":
        notes = {pair for pair in self.notes if pair[0] != note}
        notes.add((note, velocity))
        return replace(self, notes=frozenset(notes))

    def with_note_off(self, note: int) -> "ChannelState":
        notes = frozenset(pair for pair in self.notes if pair[0] != note)
        if notes == self.notes:
            return self
        return replace(self, notes=notes)

    def with_controller(self, number: int, value: int) -> "ChannelState":
        values = dict(self.controllers)
        if value == DEFAULT_CONTROLLER_VALUE:
            values.pop(number, None)
        else:
            values[number] = value
        return replace(self, controllers=tuple(sorted(values.items())))


EMPTY_CHANNEL = ChannelState()


@dataclass(frozen=True)
class SynthState:
    channels: Tuple[ChannelState, ...] = (EMPTY_CHANNEL,) * CHANNEL_COUNT
    tempo: int = DEFAULT_TEMPO

    def apply(self, event: Event) -> "SynthState":
        """Return the state after ``event``; events without effect return self."""

        if event.kind is EventKind.META:
            if event.type == "set_tempo":
                return replace(self, tempo=event.get("tempo", DEFAULT_TEMPO))
            return self
        if event.channel is None:
            return self

        channel = self.channels[event.channel]
        if event.is_note_on:
            updated = channel.with_note_on(event.get("note"), event.get("velocity"))
        elif event.is_note_release:
            updated = channel.with_note_off(event.get("note"))
        elif event.kind is EventKind.CONTROLLER:
            updated = channel.with_controller(event.get("control"), event.get("value"))
        elif event.kind is EventKind.PITCH_BEND:
            updated = replace(channel, pitch_bend=event.get("pitch"))
        elif event.kind is EventKind.PROGRAM_CHANGE:
            updated = replace(channel, program=event.get("program"))
        else:
            return self

        if updated == channel:
            return self
        channels = list(self.channels)
        channels[event.channel] = updated
        return replace(self, channels=tuple(channels))


@dataclass(frozen=True)
class StateTable:
    snapshots: Tuple[SynthState, ...]
    ids: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.snapshots)

    def equivalent(self, a: int, b: int) -> bool:
        return self.ids[a] == self.ids[b]

    def positions_by_state(self) -> Dict[int, List[int]]:
        """Map each state id to the ascending positions that have it."""

        positions: Dict[int, List[int]] = {}
        for pos, state_id in enumerate(self.ids):
            positions.setdefault(state_id, []).append(pos)
        return positions


def track_states(timeline: Timeline) -> StateTable:
    interned: Dict[SynthState, int] = {}
    snapshots: List[SynthState] = []
    ids: List[int] = []

    def push(state: SynthState) -> None:
        snapshots.append(state)
        ids.append(interned.setdefault(state, len(interned)))

    state = SynthState()
    push(state)
    for event in timeline:
        state = state.apply(event)
        push(state)

    logger.debug(
        "tracked %d snapshots, %d distinct states", len(snapshots), len(interned)
    )
    return StateTable(snapshots=tuple(snapshots), ids=tuple(ids))
