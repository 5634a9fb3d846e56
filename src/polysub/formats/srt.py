"""SubRip (.srt) format parser, serializer and tag converters."""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from os import PathLike

import structlog

from polysub.core.events import shift_events, strip_event_formatting
from polysub.core.timing import Moment, TimeDelta
from polysub.formats.blocks import iter_blocks, parse_separated, take_until_end_of_block
from polysub.formats.tags import (
    discard_bracket_tag,
    discard_html_tag,
    html_color_to_substation,
    keep_tags,
    replace_tags,
    scan,
    strip_html_and_bracket_tags,
)
from polysub.utils.encoding import read_text, write_text

logger = structlog.get_logger()

_TIMESTAMP = r"[ \t]*([+-]?[0-9]+):([+-]?[0-9]+):([+-]?[0-9]+),([+-]?[0-9]+)[ \t]*"

RECORD_HEADER = re.compile(
    r"[ \t\r\n]*([0-9]+)\n" + _TIMESTAMP + "-->" + _TIMESTAMP + r"([^\n]*)\n"
)
"""Line number and timing line opening a SubRip record."""

_HTML_TAGS = ("<b>", "</b>", "<i>", "</i>", "<u>", "</u>")

_SSA_TAGS = {
    "<b>": "{\\b1}",
    "</b>": "{\\b0}",
    "{b}": "{\\b1}",
    "{/b}": "{\\b0}",
    "<i>": "{\\i1}",
    "</i>": "{\\i0}",
    "{i}": "{\\i1}",
    "{/i}": "{\\i0}",
}

_ASS_TAGS = {
    **_SSA_TAGS,
    "<u>": "{\\u1}",
    "</u>": "{\\u0}",
    "{u}": "{\\u1}",
    "{/u}": "{\\u0}",
}

_VTT_TAGS = {
    "{b}": "<b>",
    "{/b}": "</b>",
    "{i}": "<i>",
    "{/i}": "</i>",
    "{u}": "<u>",
    "{/u}": "</u>",
}


def to_ass_formatting(text: str) -> str:
    """Convert SubRip markup to ASS override codes.

    Bold, italic, underline and ``#RRGGBB`` font colours are converted; every
    other tag is dropped.
    """
    return scan(
        text,
        [
            replace_tags(_ASS_TAGS),
            html_color_to_substation,
            discard_html_tag,
            discard_bracket_tag,
        ],
        "<{",
    )


def to_ssa_formatting(text: str) -> str:
    """Convert SubRip markup to SSA override codes (no underline in SSA)."""
    return scan(
        text,
        [
            replace_tags(_SSA_TAGS),
            html_color_to_substation,
            discard_html_tag,
            discard_bracket_tag,
        ],
        "<{",
    )


def to_vtt_formatting(text: str) -> str:
    """Convert SubRip markup to WebVTT tags.

    Bracket tags for bold, italic and underline become HTML tags, the HTML
    versions are kept, and everything else is dropped.
    """
    return scan(
        text,
        [
            replace_tags(_VTT_TAGS),
            keep_tags(_HTML_TAGS),
            discard_html_tag,
            discard_bracket_tag,
        ],
        "<{",
    )


def strip_srt_formatting(text: str) -> str:
    """Remove every HTML and bracket tag from SubRip text."""
    return strip_html_and_bracket_tags(text)


@dataclass
class SubRipEvent:
    """Single SubRip record.

    Line numbers are kept as found in the source; they need not be unique
    or sequential.
    """

    line_number: int
    start: Moment
    end: Moment
    text: str
    coordinates: str | None = None

    def unformatted_text(self) -> str:
        """Return the text with all formatting tags removed."""
        return strip_srt_formatting(self.text)

    def as_plaintext(self) -> str:
        """Return the text as plain text."""
        return self.unformatted_text()

    def render(self) -> str:
        """Serialize the record without a trailing newline."""
        coordinates = f" {self.coordinates}" if self.coordinates else ""
        return (
            f"{self.line_number}\n"
            f"{self.start.as_srt_timestamp()} --> {self.end.as_srt_timestamp()}"
            f"{coordinates}\n{self.text}"
        )

    def __str__(self) -> str:
        return self.render()


@dataclass
class SubRipSubtitle:
    """SubRip subtitle: an ordered list of records."""

    events: list[SubRipEvent] = field(default_factory=list)

    @classmethod
    def from_str(cls, content: str | Iterable[str]) -> "SubRipSubtitle":
        """Parse SubRip text (see :func:`parse_srt`)."""
        return parse_srt(content)

    @classmethod
    def load(
        cls, path: str | PathLike[str], encoding: str | None = None
    ) -> "SubRipSubtitle":
        """Read and parse a SubRip file, detecting its encoding if needed."""
        return parse_srt(read_text(path, encoding))

    def event(self, index: int) -> SubRipEvent | None:
        """Return the event at index, or None if out of range."""
        if 0 <= index < len(self.events):
            return self.events[index]
        return None

    def renumber(self) -> None:
        """Rewrite line numbers as 1..N in storage order."""
        for number, event in enumerate(self.events, start=1):
            event.line_number = number

    def shift(self, delta: TimeDelta) -> None:
        """Move every event by delta."""
        shift_events(self.events, delta)

    def strip_formatting(self) -> None:
        """Remove formatting tags from every event."""
        for event in self.events:
            strip_event_formatting(event)

    def render(self) -> str:
        """Serialize to SubRip text."""
        return serialize_srt(self)

    def export(self, path: str | PathLike[str]) -> None:
        """Write the subtitle to path as UTF-8."""
        write_text(path, self.render())

    def __str__(self) -> str:
        return self.render()

    def __len__(self) -> int:
        """Return number of events."""
        return len(self.events)

    def __iter__(self) -> Iterator[SubRipEvent]:
        """Iterate over events."""
        return iter(self.events)

    def __getitem__(self, index: int) -> SubRipEvent:
        """Get event by index (0-based)."""
        return self.events[index]


def _parse_record(text: str, pos: int) -> tuple[SubRipEvent, int] | None:
    match = RECORD_HEADER.match(text, pos)
    if match is None:
        return None
    groups = [int(g) for g in match.groups()[:9]]
    body, end = take_until_end_of_block(text, match.end())
    coordinates = match.group(10).strip() or None
    event = SubRipEvent(
        line_number=groups[0],
        start=Moment.from_timestamp(*groups[1:5]),
        end=Moment.from_timestamp(*groups[5:9]),
        text=body,
        coordinates=coordinates,
    )
    return event, end


def _parse_continuation(text: str, pos: int) -> tuple[str, int] | None:
    while text.startswith("\n", pos):
        pos += 1
    body, end = take_until_end_of_block(text, pos)
    if not body:
        return None
    return body, end


def _parse_block(text: str, pos: int) -> tuple[SubRipEvent | str, int] | None:
    return _parse_record(text, pos) or _parse_continuation(text, pos)


def _parse_blocks(text: str) -> tuple[list[SubRipEvent | str], str] | None:
    return parse_separated(text, _parse_block)


def parse_srt(content: str | Iterable[str]) -> SubRipSubtitle:
    """Parse SubRip content into a SubRipSubtitle.

    Parsing never fails: malformed leading content is ignored, and a block
    without a number and timing line is appended to the previous record's
    text, separated by a blank line.

    Args:
        content: Decoded SubRip text, or an iterable of its lines

    Returns:
        SubRipSubtitle with the records found (possibly none)
    """
    events: list[SubRipEvent] = []
    skipped = 0
    for block in iter_blocks(content, _parse_blocks):
        if isinstance(block, SubRipEvent):
            events.append(block)
        elif events:
            events[-1].text += "\n\n" + block
        else:
            skipped += 1

    logger.debug("srt_parsed", events=len(events), skipped_blocks=skipped)
    return SubRipSubtitle(events=events)


def serialize_srt(subtitle: SubRipSubtitle) -> str:
    """Serialize a SubRipSubtitle to SubRip text.

    Args:
        subtitle: Subtitle to serialize

    Returns:
        Records separated by a blank line, each terminated by a newline
    """
    return "\n".join(f"{event.render()}\n" for event in subtitle.events)
