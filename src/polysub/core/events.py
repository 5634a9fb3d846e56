"""Capability protocols and shared behaviour for subtitle events."""

from collections.abc import Iterable
from typing import Protocol

from polysub.core.timing import Moment, TimeDelta


class TimedEvent(Protocol):
    """Event with a start and end moment."""

    start: Moment
    end: Moment


class TextEvent(Protocol):
    """Event carrying text that may contain inline formatting."""

    text: str

    def unformatted_text(self) -> str: ...

    def as_plaintext(self) -> str: ...


def shift_event(event: TimedEvent, delta: TimeDelta) -> None:
    """Move an event in time, keeping its duration.

    Args:
        event: Event to modify in place
        delta: Offset added to both start and end
    """
    event.start = event.start + delta
    event.end = event.end + delta


def shift_events(events: Iterable[TimedEvent], delta: TimeDelta) -> None:
    """Shift every event by the same offset."""
    for event in events:
        shift_event(event, delta)


def event_duration(event: TimedEvent) -> TimeDelta:
    """Return the duration of an event (may be negative)."""
    return event.end - event.start


def strip_event_formatting(event: TextEvent) -> None:
    """Replace an event's text with its unformatted text."""
    event.text = event.unformatted_text()
