"""Failure taxonomy for loop-find.

Every failure is terminal for an invocation. Each class carries the exit
code the command line reports it with.
"""

from __future__ import annotations


class MlyError(ValueError):
    """Base class for all loop-find failures."""

    exit_code = 1


class MalformedInput(MlyError):
    """The input is not a valid (supported) Standard MIDI File."""

    exit_code = 3


class EmptySequence(MlyError):
    """The sequence contains no events to process."""

    exit_code = 4


class NoLoopFound(MlyError):
    """No repeated range has matching channel state at both ends."""

    exit_code = 5


class AmbiguousLoop(MlyError):
    """Two or more pairs of starts tie at the longest repeated length."""

    exit_code = 6


class NoValidRecordingAnchor(MlyError):
    """No Note-On anchored, state-equivalent boundary exists inside the loop."""

    exit_code = 7
