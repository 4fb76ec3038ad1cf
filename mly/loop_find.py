"""Loop detection.

``find_loop`` runs the whole note-space pipeline over a timeline: channel
state tracking, repetition indexing, then loop selection.  The best loop is
the longest repeated range whose synthesizer state matches at both ends;
among equally long candidates the one starting earliest wins.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from typing import Optional

from .errors import AmbiguousLoop, EmptySequence, NoLoopFound
from .repeats import RepeatIndex, find_repeats
from .state import StateTable, track_states
from .timeline import Timeline

logger = logging.getLogger(__name__)

SHOWN_PAIRS = 4  # ambiguous pairs listed in the error message


@dataclass(frozen=True)
class NoteSpaceLoop:
    start: int
    end: int
    partner: int  # start of the other occurrence of timeline[start:end]

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def partner_end(self) -> int:
        return self.partner + self.length


@dataclass(frozen=True)
class LoopSearch:
    """Everything the note-space search produced, for reporting and projection."""

    timeline: Timeline
    states: StateTable
    repeats: RepeatIndex
    loop: NoteSpaceLoop


def check_unique(repeats: RepeatIndex) -> None:
    if repeats.max_length == 0:
        raise NoLoopFound("no range of events occurs more than once")
    count = repeats.maximal_pair_count()
    if count > 1:
        pairs = repeats.maximal_pairs(limit=SHOWN_PAIRS)
        shown = ", ".join(f"({p.first}, {p.second})" for p in pairs)
        suffix = "" if count <= SHOWN_PAIRS else ", ..."
        raise AmbiguousLoop(
            f"{count} pairs of event positions repeat {repeats.max_length} "
            f"events each: {shown}{suffix}"
        )


def select_loop(repeats: RepeatIndex, states: StateTable) -> NoteSpaceLoop:
    """Pick the longest, then earliest, repeated range with equal end states.

    A range ``[start, start + l)`` is repeated for every ``l`` up to the
    extent of ``start``, so for each start only the farthest position with
    the same state inside that extent matters.
    """

    by_state = states.positions_by_state()
    best_start: Optional[int] = None
    best_length = 0

    for start in range(len(repeats)):
        extent = repeats.extent(start)
        if extent <= best_length:
            continue
        same = by_state[states.ids[start]]
        idx = bisect_right(same, start + extent) - 1
        end = same[idx]
        length = end - start
        if length > best_length:
            best_start, best_length = start, length
        elif length < extent:
            logger.debug(
                "start %d: repeat of %d events cut to %d by channel state",
                start,
                extent,
                length,
            )

    if best_start is None:
        raise NoLoopFound("no repeated range has matching channel state at both ends")

    partner = repeats.partner(best_start, best_length)
    assert partner is not None  # every length up to the extent repeats
    return NoteSpaceLoop(
        start=best_start, end=best_start + best_length, partner=partner
    )


def find_loop(timeline: Timeline) -> LoopSearch:
    if len(timeline) == 0:
        raise EmptySequence("the sequence contains no events")

    states = track_states(timeline)
    repeats = find_repeats(timeline.symbols())
    check_unique(repeats)
    loop = select_loop(repeats, states)
    logger.debug(
        "note-space loop [%d, %d[ (%d events), repeated at %d",
        loop.start,
        loop.end,
        loop.length,
        loop.partner,
    )
    return LoopSearch(timeline=timeline, states=states, repeats=repeats, loop=loop)
