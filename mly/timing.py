"""Timekeeping display in pulses and quarter-note:pulse beats."""

from __future__ import annotations

from dataclasses import dataclass


def _digits(value: int) -> int:
    return len(str(max(value, 1)))


@dataclass(frozen=True)
class UnitWidths:
    pulse: int
    beat_qn: int
    beat_pulse: int


@dataclass(frozen=True)
class MidiTimeDisplay:
    """Formats pulse counts as columns sized for a whole sequence."""

    ppqn: int
    widths: UnitWidths

    @classmethod
    def for_range(cls, ppqn: int, end_pulse: int) -> "MidiTimeDisplay":
        return cls(
            ppqn=ppqn,
            widths=UnitWidths(
                pulse=_digits(end_pulse),
                beat_qn=_digits(end_pulse // ppqn),
                beat_pulse=_digits(ppqn),
            ),
        )

    def pulse(self, pulse: int) -> str:
        return f"{pulse:>{self.widths.pulse}}"

    def beat(self, pulse: int) -> str:
        qn, rest = divmod(pulse, self.ppqn)
        return f"{qn:>{self.widths.beat_qn}}:{rest:0>{self.widths.beat_pulse}}"

    def format(self, pulse: int) -> str:
        return f"pulse {self.pulse(pulse)} / beat {self.beat(pulse)}"
