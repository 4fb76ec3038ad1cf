"""Filters for Standard MIDI File event streams, centred on loop detection."""

from .errors import (  # noqa: F401
    AmbiguousLoop,
    EmptySequence,
    MalformedInput,
    MlyError,
    NoLoopFound,
    NoValidRecordingAnchor,
)
from .events import Event, EventKind, event_from_message  # noqa: F401
from .loop_find import LoopSearch, NoteSpaceLoop, find_loop, select_loop  # noqa: F401
from .recording import (  # noqa: F401
    DEFAULT_SAMPLERATE,
    RecordingSpaceLoop,
    TempoMap,
    project_loop,
)
from .repeats import RepeatIndex, RepeatPair, find_repeats  # noqa: F401
from .smf import SmfSequence, read_smf  # noqa: F401
from .state import ChannelState, StateTable, SynthState, track_states  # noqa: F401
from .timeline import Timeline, build_timeline, timeline_from_smf  # noqa: F401
