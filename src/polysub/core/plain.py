"""Format-neutral plain-text subtitles."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Protocol

from polysub.core.events import TextEvent, TimedEvent, shift_events
from polysub.core.timing import Moment, TimeDelta


@dataclass
class PlainEvent:
    """Timed text without any styling; lines are separated by ``\\n``."""

    start: Moment
    end: Moment
    text: str

    def unformatted_text(self) -> str:
        """Return the text unchanged."""
        return self.text

    def as_plaintext(self) -> str:
        """Return the text unchanged."""
        return self.text


class _TimedTextEvent(TimedEvent, TextEvent, Protocol):
    pass


class _TimedTextDocument(Protocol):
    @property
    def events(self) -> Iterable[_TimedTextEvent]: ...


@dataclass
class PlainSubtitle:
    """Sequence of plain events.

    A plain subtitle has no file format of its own. It is the common ground
    every timed format can be built from.
    """

    events: list[PlainEvent] = field(default_factory=list)

    @classmethod
    def from_subtitle(cls, subtitle: _TimedTextDocument) -> "PlainSubtitle":
        """Build a plain subtitle from any timed subtitle document.

        Args:
            subtitle: Document whose events have moments and text

        Returns:
            New PlainSubtitle with each event's text as plain text
        """
        return cls(
            events=[
                PlainEvent(start=event.start, end=event.end, text=event.as_plaintext())
                for event in subtitle.events
            ]
        )

    def shift(self, delta: TimeDelta) -> None:
        """Move every event by delta."""
        shift_events(self.events, delta)

    def __len__(self) -> int:
        """Return number of events."""
        return len(self.events)

    def __iter__(self) -> Iterator[PlainEvent]:
        """Iterate over events."""
        return iter(self.events)

    def __getitem__(self, index: int) -> PlainEvent:
        """Get event by index (0-based)."""
        return self.events[index]
