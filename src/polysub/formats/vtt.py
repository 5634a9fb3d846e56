"""WebVTT (.vtt) format parser, serializer and tag converters."""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from os import PathLike
from typing import NamedTuple

import structlog

from polysub.core.events import shift_events, strip_event_formatting
from polysub.core.timing import Moment, TimeDelta
from polysub.formats.blocks import (
    iter_blocks,
    iter_lines,
    parse_separated,
    take_until_end_of_block,
)
from polysub.formats.tags import (
    discard_html_tag,
    keep_tags,
    replace_tags,
    scan,
    strip_html_tags,
)
from polysub.utils.encoding import read_text, write_text

logger = structlog.get_logger()

HEADER = re.compile(r"\ufeff?WEBVTT[ \t]*-?[ \t]*(.*)", re.IGNORECASE)
"""First line of a WebVTT file, capturing the free text after the signature."""

_TIMESTAMP = (
    r"[ \t]*([+-]?[0-9]+):([+-]?[0-9]+)(?::([+-]?[0-9]+))?\.([+-]?[0-9]+)[ \t]*"
)
_TIMING = re.compile(_TIMESTAMP + "-->" + _TIMESTAMP + r"([^\n]*)\n")
_IDENTIFIER = re.compile(r"([^\n]*)\n")
_LEADING_WHITESPACE = re.compile(r"[ \t\r\n]*")
_NOTE_START = re.compile(r"NOTE[ \t\n]")

_HTML_TAGS = ("<b>", "</b>", "<i>", "</i>", "<u>", "</u>")

_SSA_TAGS = {
    "<b>": "{\\b1}",
    "</b>": "{\\b0}",
    "<i>": "{\\i1}",
    "</i>": "{\\i0}",
}

_ASS_TAGS = {
    **_SSA_TAGS,
    "<u>": "{\\u1}",
    "</u>": "{\\u0}",
}


def to_ass_formatting(text: str) -> str:
    """Convert WebVTT bold, italic and underline tags to ASS overrides."""
    return scan(text, [replace_tags(_ASS_TAGS), discard_html_tag], "<")


def to_ssa_formatting(text: str) -> str:
    """Convert WebVTT bold and italic tags to SSA overrides."""
    return scan(text, [replace_tags(_SSA_TAGS), discard_html_tag], "<")


def to_srt_formatting(text: str) -> str:
    """Keep bold, italic and underline tags; drop classes, voices and the rest."""
    return scan(text, [keep_tags(_HTML_TAGS), discard_html_tag], "<")


def strip_vtt_formatting(text: str) -> str:
    """Remove every HTML tag from WebVTT text."""
    return strip_html_tags(text)


@dataclass
class WebVttCue:
    """Single WebVTT cue."""

    start: Moment
    end: Moment
    text: str
    identifier: str | None = None
    settings: str | None = None

    def unformatted_text(self) -> str:
        """Return the text with all tags removed."""
        return strip_vtt_formatting(self.text)

    def as_plaintext(self) -> str:
        """Return the text as plain text."""
        return self.unformatted_text()

    def render(self) -> str:
        """Serialize the cue without a trailing newline."""
        identifier = f"{self.identifier}\n" if self.identifier else ""
        settings = f" {self.settings}" if self.settings else ""
        return (
            f"{identifier}{self.start.as_vtt_timestamp()} --> "
            f"{self.end.as_vtt_timestamp()}{settings}\n{self.text}"
        )

    def __str__(self) -> str:
        return self.render()


@dataclass
class WebVttSubtitle:
    """WebVTT subtitle with its cues, style blocks and region blocks.

    Attributes:
        cues: Cues in file order
        header: Free text following ``WEBVTT`` on the first line
        styles: Raw content of each STYLE block
        regions: Raw content of each REGION block
    """

    cues: list[WebVttCue] = field(default_factory=list)
    header: str | None = None
    styles: list[str] = field(default_factory=list)
    regions: list[str] = field(default_factory=list)

    @property
    def events(self) -> list[WebVttCue]:
        """Cues of the subtitle."""
        return self.cues

    @classmethod
    def from_str(cls, content: str | Iterable[str]) -> "WebVttSubtitle":
        """Parse WebVTT text (see :func:`parse_vtt`)."""
        return parse_vtt(content)

    @classmethod
    def load(
        cls, path: str | PathLike[str], encoding: str | None = None
    ) -> "WebVttSubtitle":
        """Read and parse a WebVTT file, detecting its encoding if needed."""
        return parse_vtt(read_text(path, encoding))

    def event(self, index: int) -> WebVttCue | None:
        """Return the cue at index, or None if out of range."""
        if 0 <= index < len(self.cues):
            return self.cues[index]
        return None

    def shift(self, delta: TimeDelta) -> None:
        """Move every cue by delta."""
        shift_events(self.cues, delta)

    def strip_formatting(self) -> None:
        """Remove formatting tags from every cue."""
        for cue in self.cues:
            strip_event_formatting(cue)

    def render(self) -> str:
        """Serialize to WebVTT text."""
        return serialize_vtt(self)

    def export(self, path: str | PathLike[str]) -> None:
        """Write the subtitle to path as UTF-8."""
        write_text(path, self.render())

    def __str__(self) -> str:
        return self.render()

    def __len__(self) -> int:
        """Return number of cues."""
        return len(self.cues)

    def __iter__(self) -> Iterator[WebVttCue]:
        """Iterate over cues."""
        return iter(self.cues)

    def __getitem__(self, index: int) -> WebVttCue:
        """Get cue by index (0-based)."""
        return self.cues[index]


class _Block(NamedTuple):
    kind: str
    content: str | WebVttCue


def _moment(groups: tuple[str | None, ...]) -> Moment:
    first, second, third, millis = groups
    if third is None:
        # MM:SS.mmm
        return Moment.from_timestamp(0, int(first), int(second), int(millis))
    return Moment.from_timestamp(int(first), int(second), int(third), int(millis))


def _parse_timing(
    text: str, pos: int
) -> tuple[Moment, Moment, str | None, int] | None:
    match = _TIMING.match(text, pos)
    if match is None:
        return None
    groups = match.groups()
    settings = groups[8].strip() or None
    return _moment(groups[0:4]), _moment(groups[4:8]), settings, match.end()


def _parse_cue(text: str, pos: int) -> tuple[_Block, int] | None:
    identifier = None
    timing = None
    match = _IDENTIFIER.match(text, pos)
    if match is not None:
        timing = _parse_timing(text, match.end())
        identifier = match.group(1).strip() or None
    if timing is None:
        identifier = None
        timing = _parse_timing(text, pos)
    if timing is None:
        return None
    start, end, settings, body_start = timing
    body, next_pos = take_until_end_of_block(text, body_start)
    cue = WebVttCue(
        start=start, end=end, text=body, identifier=identifier, settings=settings
    )
    return _Block("cue", cue), next_pos


def _parse_keyword_block(
    text: str, pos: int, keyword: str, kind: str
) -> tuple[_Block, int] | None:
    if not text.startswith(keyword + "\n", pos):
        return None
    body, next_pos = take_until_end_of_block(text, pos + len(keyword) + 1)
    return _Block(kind, body), next_pos


def _parse_note(text: str, pos: int) -> tuple[_Block, int] | None:
    match = _NOTE_START.match(text, pos)
    if match is None:
        return None
    body, next_pos = take_until_end_of_block(text, match.end())
    return _Block("note", body), next_pos


def _parse_invalid(text: str, pos: int) -> tuple[_Block, int]:
    end = text.find("\n\n", pos)
    if end == -1:
        end = len(text)
    return _Block("invalid", text[pos:end]), end


def _parse_block(text: str, pos: int) -> tuple[_Block, int]:
    pos = _LEADING_WHITESPACE.match(text, pos).end()
    return (
        _parse_cue(text, pos)
        or _parse_keyword_block(text, pos, "STYLE", "style")
        or _parse_note(text, pos)
        or _parse_keyword_block(text, pos, "REGION", "region")
        or _parse_invalid(text, pos)
    )


def _parse_blocks(text: str) -> tuple[list[_Block], str] | None:
    return parse_separated(text, _parse_block)


def parse_vtt(content: str | Iterable[str]) -> WebVttSubtitle:
    """Parse WebVTT content into a WebVttSubtitle.

    Parsing never fails. NOTE blocks and unrecognised blocks are dropped. When
    the first line is not a ``WEBVTT`` signature it is parsed as content.

    Args:
        content: Decoded WebVTT text, or an iterable of its lines

    Returns:
        WebVttSubtitle with the cues, styles and regions found
    """
    lines = iter_lines(content)
    subtitle = WebVttSubtitle()

    first_line = next(lines, None)
    remaining: Iterable[str] = lines
    if first_line is not None:
        match = HEADER.match(first_line)
        if match is not None:
            subtitle.header = match.group(1).strip() or None
        else:
            remaining = _prepend(first_line, lines)

    skipped = 0
    for block in iter_blocks(remaining, _parse_blocks):
        if block.kind == "cue":
            subtitle.cues.append(block.content)
        elif block.kind == "style":
            subtitle.styles.append(block.content)
        elif block.kind == "region":
            subtitle.regions.append(block.content)
        elif block.kind == "invalid" and block.content:
            skipped += 1

    logger.debug(
        "vtt_parsed",
        cues=len(subtitle.cues),
        styles=len(subtitle.styles),
        regions=len(subtitle.regions),
        skipped_blocks=skipped,
    )
    return subtitle


def _prepend(first: str, rest: Iterator[str]) -> Iterator[str]:
    yield first
    yield from rest


def serialize_vtt(subtitle: WebVttSubtitle) -> str:
    """Serialize a WebVttSubtitle to WebVTT text.

    Args:
        subtitle: Subtitle to serialize

    Returns:
        Signature line, then STYLE, REGION and cue blocks separated by blank lines
    """
    parts = ["WEBVTT"]
    if subtitle.header:
        parts.append(f" - {subtitle.header}")
    parts.append("\n")
    for style in subtitle.styles:
        parts.append(f"\nSTYLE\n{style}\n")
    for region in subtitle.regions:
        parts.append(f"\nREGION\n{region}\n")
    for cue in subtitle.cues:
        parts.append(f"\n{cue.render()}\n")
    return "".join(parts)
