"""MicroDVD (.sub) format parser and serializer.

MicroDVD times events in video frames. ``MicroDvdSubtitle`` keeps the raw
frame numbers; ``TimedMicroDvdSubtitle`` resolves them to moments using a
frame rate and is the form that takes part in format conversion.
"""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from os import PathLike

import structlog

from polysub.core.constants import DEFAULT_FRAMERATE
from polysub.core.events import shift_events, strip_event_formatting
from polysub.core.timing import (
    Frame,
    Moment,
    TimeDelta,
    frame_to_moment,
    moment_to_frame,
    rescale_moment,
)
from polysub.formats.blocks import iter_lines
from polysub.utils.config import get_settings
from polysub.utils.encoding import read_text, write_text

logger = structlog.get_logger()

LINE = re.compile(r"\{([+-]?[0-9]+)\}\{([+-]?[0-9]+)\}(.*)")
"""One MicroDVD event: start frame, end frame, then text to end of line."""


@dataclass
class MicroDvdEvent:
    """MicroDVD event timed in frames."""

    start: Frame
    end: Frame
    text: str

    def unformatted_text(self) -> str:
        """Return the text, keeping ``|`` line separators."""
        return self.text

    def as_plaintext(self) -> str:
        """Return the text with ``|`` turned into newlines."""
        return self.text.replace("|", "\n")

    def render(self) -> str:
        """Serialize the event as a single line without newline."""
        return f"{{{self.start}}}{{{self.end}}}{self.text}"


@dataclass
class TimedMicroDvdEvent:
    """MicroDVD event whose frames have been resolved to moments."""

    start: Moment
    end: Moment
    text: str

    def unformatted_text(self) -> str:
        """Return the text, keeping ``|`` line separators."""
        return self.text

    def as_plaintext(self) -> str:
        """Return the text with ``|`` turned into newlines."""
        return self.text.replace("|", "\n")


@dataclass
class MicroDvdSubtitle:
    """MicroDVD subtitle timed in frames.

    This raw form does not take part in conversion to other formats; use
    :class:`TimedMicroDvdSubtitle` for that.
    """

    events: list[MicroDvdEvent] = field(default_factory=list)

    @classmethod
    def from_str(cls, content: str | Iterable[str]) -> "MicroDvdSubtitle":
        """Parse MicroDVD text (see :func:`parse_microdvd`)."""
        return parse_microdvd(content)

    @classmethod
    def load(
        cls, path: str | PathLike[str], encoding: str | None = None
    ) -> "MicroDvdSubtitle":
        """Read and parse a MicroDVD file, detecting its encoding if needed."""
        return parse_microdvd(read_text(path, encoding))

    @classmethod
    def from_timed(cls, timed: "TimedMicroDvdSubtitle") -> "MicroDvdSubtitle":
        """Convert moments back to frames using the timed subtitle's frame rate."""
        return cls(
            events=[
                MicroDvdEvent(
                    start=moment_to_frame(event.start, timed.framerate),
                    end=moment_to_frame(event.end, timed.framerate),
                    text=event.text,
                )
                for event in timed.events
            ]
        )

    def event(self, index: int) -> MicroDvdEvent | None:
        """Return the event at index, or None if out of range."""
        if 0 <= index < len(self.events):
            return self.events[index]
        return None

    def strip_formatting(self) -> None:
        """Replace every event's text with its unformatted text."""
        for event in self.events:
            strip_event_formatting(event)

    def render(self) -> str:
        """Serialize to MicroDVD text, one line per event."""
        return "".join(f"{event.render()}\n" for event in self.events)

    def export(self, path: str | PathLike[str]) -> None:
        """Write the subtitle to path as UTF-8."""
        write_text(path, self.render())

    def __str__(self) -> str:
        return self.render()

    def __len__(self) -> int:
        """Return number of events."""
        return len(self.events)

    def __iter__(self) -> Iterator[MicroDvdEvent]:
        """Iterate over events."""
        return iter(self.events)

    def __getitem__(self, index: int) -> MicroDvdEvent:
        """Get event by index (0-based)."""
        return self.events[index]


@dataclass
class TimedMicroDvdSubtitle:
    """MicroDVD subtitle with event times resolved through a frame rate.

    Attributes:
        events: Events timed in milliseconds
        framerate: Frames per second used to map frames to moments. Assigning
            it does not retime events; use :meth:`update_framerate` for that.
    """

    events: list[TimedMicroDvdEvent] = field(default_factory=list)
    framerate: float = DEFAULT_FRAMERATE

    @classmethod
    def from_raw(
        cls, raw: MicroDvdSubtitle, framerate: float | None = None
    ) -> "TimedMicroDvdSubtitle":
        """Resolve frames to moments.

        Args:
            raw: Frame-timed subtitle
            framerate: Frames per second; defaults to the configured
                ``default_framerate``

        Returns:
            New timed subtitle; the raw subtitle is not modified
        """
        if framerate is None:
            framerate = get_settings().default_framerate
        events = [
            TimedMicroDvdEvent(
                start=frame_to_moment(event.start, framerate),
                end=frame_to_moment(event.end, framerate),
                text=event.text,
            )
            for event in raw.events
        ]
        return cls(events=events, framerate=framerate)

    @classmethod
    def from_str(
        cls, content: str | Iterable[str], framerate: float | None = None
    ) -> "TimedMicroDvdSubtitle":
        """Parse MicroDVD text and time it with the given frame rate."""
        return cls.from_raw(parse_microdvd(content), framerate)

    @classmethod
    def load(
        cls,
        path: str | PathLike[str],
        encoding: str | None = None,
        framerate: float | None = None,
    ) -> "TimedMicroDvdSubtitle":
        """Read a MicroDVD file and time it with the given frame rate."""
        return cls.from_raw(parse_microdvd(read_text(path, encoding)), framerate)

    def update_framerate(self, framerate: float) -> None:
        """Switch to a new frame rate, retiming events so frames stay the same.

        Args:
            framerate: New frames per second

        Raises:
            ValueError: If framerate is not positive
        """
        if framerate <= 0:
            raise ValueError(f"Frame rate must be positive, got {framerate}")
        ratio = self.framerate / framerate
        for event in self.events:
            event.start = rescale_moment(event.start, ratio)
            event.end = rescale_moment(event.end, ratio)
        self.framerate = framerate

    def event(self, index: int) -> TimedMicroDvdEvent | None:
        """Return the event at index, or None if out of range."""
        if 0 <= index < len(self.events):
            return self.events[index]
        return None

    def shift(self, delta: TimeDelta) -> None:
        """Move every event by delta."""
        shift_events(self.events, delta)

    def strip_formatting(self) -> None:
        """Replace every event's text with its unformatted text."""
        for event in self.events:
            strip_event_formatting(event)

    def render(self) -> str:
        """Serialize to MicroDVD text using the current frame rate."""
        return MicroDvdSubtitle.from_timed(self).render()

    def export(self, path: str | PathLike[str]) -> None:
        """Write the subtitle to path as UTF-8."""
        write_text(path, self.render())

    def __str__(self) -> str:
        return self.render()

    def __len__(self) -> int:
        """Return number of events."""
        return len(self.events)

    def __iter__(self) -> Iterator[TimedMicroDvdEvent]:
        """Iterate over events."""
        return iter(self.events)

    def __getitem__(self, index: int) -> TimedMicroDvdEvent:
        """Get event by index (0-based)."""
        return self.events[index]


def parse_microdvd(content: str | Iterable[str]) -> MicroDvdSubtitle:
    """Parse MicroDVD content into a frame-timed subtitle.

    Each line is parsed on its own; lines that do not match
    ``{start}{end}text`` are skipped.

    Args:
        content: Decoded MicroDVD text, or an iterable of its lines

    Returns:
        MicroDvdSubtitle with the events found (possibly none)
    """
    events: list[MicroDvdEvent] = []
    skipped = 0
    for line in iter_lines(content):
        match = LINE.match(line)
        if match is None:
            skipped += 1
            continue
        events.append(
            MicroDvdEvent(
                start=Frame(int(match.group(1))),
                end=Frame(int(match.group(2))),
                text=match.group(3),
            )
        )

    logger.debug("microdvd_parsed", events=len(events), skipped_lines=skipped)
    return MicroDvdSubtitle(events=events)
