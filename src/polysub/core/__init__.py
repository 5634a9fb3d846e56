"""Core types shared by every subtitle format.

Conversion, detection and the format-agnostic file handle live in
``polysub.core.convert``, ``polysub.core.detection`` and
``polysub.core.files``; they depend on ``polysub.formats`` and are imported
from those modules directly.
"""

from polysub.core.constants import (
    DEFAULT_FRAMERATE,
    FORMAT_EXTENSIONS,
    SubStationEventKind,
    SubtitleFormat,
)
from polysub.core.errors import (
    FormatUnknownError,
    SubtitleError,
    SubtitleIOError,
    UnsupportedConversionError,
)
from polysub.core.events import (
    TextEvent,
    TimedEvent,
    event_duration,
    shift_event,
    shift_events,
    strip_event_formatting,
)
from polysub.core.plain import PlainEvent, PlainSubtitle
from polysub.core.timing import (
    Frame,
    Moment,
    TimeDelta,
    frame_to_moment,
    moment_to_frame,
    rescale_moment,
)

__all__ = [
    "DEFAULT_FRAMERATE",
    "FORMAT_EXTENSIONS",
    "FormatUnknownError",
    "Frame",
    "Moment",
    "PlainEvent",
    "PlainSubtitle",
    "SubStationEventKind",
    "SubtitleError",
    "SubtitleFormat",
    "SubtitleIOError",
    "TextEvent",
    "TimeDelta",
    "TimedEvent",
    "UnsupportedConversionError",
    "event_duration",
    "frame_to_moment",
    "moment_to_frame",
    "rescale_moment",
    "shift_event",
    "shift_events",
    "strip_event_formatting",
]
