"""Human-readable loop-find report."""

from __future__ import annotations

from typing import List, Optional

from .loop_find import LoopSearch
from .recording import RecordingSpaceLoop
from .timing import MidiTimeDisplay


def _boundary_lines(
    search: LoopSearch,
    display: MidiTimeDisplay,
    start: int,
    end: int,
    samples: Optional[tuple[int, int]] = None,
) -> List[str]:
    timeline = search.timeline
    event_width = len(str(len(timeline)))
    lines = []
    for label, index, sample in (
        ("Loop start", start, samples[0] if samples else None),
        ("  Loop end", end, samples[1] if samples else None),
    ):
        line = f"{label}: event {index:>{event_width}} / {display.format(timeline.time_at(index))}"
        if sample is not None:
            line += f" / sample {sample}"
        lines.append(line)
    return lines


def render_report(
    search: LoopSearch, recording: Optional[RecordingSpaceLoop] = None
) -> str:
    loop = search.loop
    timeline = search.timeline
    display = MidiTimeDisplay.for_range(timeline.ticks_per_beat, timeline.end_time)

    lines = [
        f"Best loop: {loop.length} events (between event "
        f"#[{loop.start}, {loop.end}[ and [{loop.partner}, {loop.partner_end}[)"
    ]
    lines.extend(_boundary_lines(search, display, loop.start, loop.end))

    if recording is not None:
        lines.append(
            f"Recording loop at {recording.samplerate} Hz "
            f"(shift {recording.shift:+d} samples):"
        )
        lines.extend(
            _boundary_lines(
                search,
                display,
                recording.start,
                recording.end,
                (recording.start_sample, recording.end_sample),
            )
        )
    return "\n".join(lines) + "\n"
