"""Closed event model shared by every loop-find stage.

mido messages are mutable and carry their delta time, so each one is
converted once into an immutable :class:`Event` that knows its absolute
time and position in the source file.  The time-invariant part of an event
is its :attr:`Event.symbol`, which is what the repetition matcher compares.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

import mido


class EventKind(Enum):
    NOTE_ON = "note_on"
    NOTE_OFF = "note_off"
    CONTROLLER = "control_change"
    PITCH_BEND = "pitchwheel"
    PROGRAM_CHANGE = "program_change"
    META = "meta"
    OTHER = "other"


_KIND_BY_TYPE = {
    kind.value: kind
    for kind in EventKind
    if kind not in (EventKind.META, EventKind.OTHER)
}

# Fields that are stored in dedicated Event attributes instead of `data`.
_HOISTED_FIELDS = ("type", "time", "channel")


Symbol = Tuple[EventKind, str, Optional[int], Tuple[Tuple[str, Any], ...]]


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


@dataclass(frozen=True)
class Event:
    """One MIDI event placed on the absolute time axis."""

    time: int  # absolute ticks
    track: int  # 0-based source track index
    order: int  # index inside the source track
    kind: EventKind
    type: str  # mido message type name
    channel: Optional[int]  # 0-15 for channel messages
    data: Tuple[Tuple[str, Any], ...] = ()

    @property
    def symbol(self) -> Symbol:
        return (self.kind, self.type, self.channel, self.data)

    def get(self, name: str, default: Any = None) -> Any:
        for key, value in self.data:
            if key == name:
                return value
        return default

    @property
    def is_note_on(self) -> bool:
        """True for a Note-On that actually starts a note (velocity > 0)."""

        return self.kind is EventKind.NOTE_ON and self.get("velocity", 0) > 0

    @property
    def is_note_release(self) -> bool:
        if self.kind is EventKind.NOTE_OFF:
            return True
        return self.kind is EventKind.NOTE_ON and self.get("velocity", 0) == 0

    @property
    def is_end_of_track(self) -> bool:
        return self.kind is EventKind.META and self.type == "end_of_track"


def kind_of(msg: mido.Message | mido.MetaMessage) -> EventKind:
    if msg.is_meta:
        return EventKind.META
    return _KIND_BY_TYPE.get(msg.type, EventKind.OTHER)


def event_from_message(
    msg: mido.Message | mido.MetaMessage, *, time: int, track: int, order: int
) -> Event:
    """Convert a mido message at absolute tick ``time`` into an Event."""

    fields = msg.dict()
    data = tuple(
        sorted(
            (name, _freeze(value))
            for name, value in fields.items()
            if name not in _HOISTED_FIELDS
        )
    )
    return Event(
        time=time,
        track=track,
        order=order,
        kind=kind_of(msg),
        type=msg.type,
        channel=fields.get("channel"),
        data=data,
    )
