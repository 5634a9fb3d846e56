"""SubStation Alpha (.ssa) format parser, serializer and tag converters."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import ClassVar

from polysub.core.constants import SubStationEventKind
from polysub.core.timing import Moment
from polysub.formats.substation import (
    EventFields,
    ScriptInfo,
    SubStationSubtitle,
    compile_event_line,
    format_event_line,
    format_reversed_bool,
    parse_event_line,
    parse_number,
    parse_reversed_bool,
    parse_style_fields,
)
from polysub.formats.tags import (
    discard_bracket_tag,
    replace_tags,
    scan,
    strip_bracket_tags,
    substation_color_to_html,
)

STYLE_FORMAT = (
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, "
    "TertiaryColour, BackColour, Bold, Italic, BorderStyle, Outline, Shadow, "
    "Alignment, MarginL, MarginR, MarginV, AlphaLevel, Encoding"
)
EVENT_FORMAT = (
    "Format: Marked, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text"
)

_EVENT_LINE = compile_event_line(r"(?i:marked)[ \t]*=[ \t]*([0-9]+)")

_HTML_TAGS = {
    "{\\b1}": "<b>",
    "{\\b0}": "</b>",
    "{\\i1}": "<i>",
    "{\\i0}": "</i>",
}


def to_srt_formatting(text: str) -> str:
    """Convert split SSA overrides (bold, italic, colour) to SubRip tags."""
    return scan(
        text,
        [replace_tags(_HTML_TAGS), substation_color_to_html, discard_bracket_tag],
        "{",
    )


def to_vtt_formatting(text: str) -> str:
    """Convert split SSA overrides to WebVTT bold and italic tags."""
    return scan(text, [replace_tags(_HTML_TAGS), discard_bracket_tag], "{")


def to_ass_formatting(text: str) -> str:
    """SSA override codes are a subset of ASS ones, so text is kept as is."""
    return text


def strip_ssa_formatting(text: str) -> str:
    """Remove every override block, keeping ``\\N``."""
    return strip_bracket_tags(text)


@dataclass
class SsaScriptInfo(ScriptInfo):
    """``[Script Info]`` of an SSA file."""

    DEFAULT_SCRIPT_TYPE: ClassVar[str | None] = "v4.00"


@dataclass
class SsaStyle:
    """Style definition from the ``[V4 Styles]`` section."""

    name: str
    fontname: str
    fontsize: int | float
    primary_colour: str
    secondary_colour: str
    tertiary_colour: str
    back_colour: str
    bold: bool
    italic: bool
    border_style: int
    outline: int | float
    shadow: int | float
    alignment: int
    margin_l: int
    margin_r: int
    margin_v: int
    alpha_level: int
    encoding: int

    FIELD_COUNT: ClassVar[int] = 18

    @classmethod
    def parse(cls, line: str) -> "SsaStyle | None":
        """Parse a ``Style:`` line, returning None if it is malformed."""
        fields = parse_style_fields(line, cls.FIELD_COUNT)
        if fields is None:
            return None
        try:
            return cls(
                name=fields[0],
                fontname=fields[1],
                fontsize=parse_number(fields[2]),
                primary_colour=fields[3].strip(),
                secondary_colour=fields[4].strip(),
                tertiary_colour=fields[5].strip(),
                back_colour=fields[6].strip(),
                bold=parse_reversed_bool(fields[7]),
                italic=parse_reversed_bool(fields[8]),
                border_style=int(fields[9]),
                outline=parse_number(fields[10]),
                shadow=parse_number(fields[11]),
                alignment=int(fields[12]),
                margin_l=int(fields[13]),
                margin_r=int(fields[14]),
                margin_v=int(fields[15]),
                alpha_level=int(fields[16]),
                encoding=int(fields[17]),
            )
        except ValueError:
            return None

    def render(self) -> str:
        """Serialize as a ``Style:`` line."""
        values = [
            self.name,
            self.fontname,
            self.fontsize,
            self.primary_colour,
            self.secondary_colour,
            self.tertiary_colour,
            self.back_colour,
            format_reversed_bool(self.bold),
            format_reversed_bool(self.italic),
            self.border_style,
            self.outline,
            self.shadow,
            self.alignment,
            self.margin_l,
            self.margin_r,
            self.margin_v,
            self.alpha_level,
            self.encoding,
        ]
        return "Style: " + ",".join(str(value) for value in values)


@dataclass
class SsaEvent:
    """Line from the ``[Events]`` section of an SSA file."""

    start: Moment
    end: Moment
    text: str
    kind: SubStationEventKind = SubStationEventKind.DIALOGUE
    marked: bool = False
    style: str | None = None
    name: str | None = None
    margin_l: int = 0
    margin_r: int = 0
    margin_v: int = 0
    effect: str | None = None

    def unformatted_text(self) -> str:
        """Return the text without override blocks, keeping ``\\N``."""
        return strip_ssa_formatting(self.text)

    def as_plaintext(self) -> str:
        """Return the unformatted text with ``\\N`` turned into newlines."""
        return self.unformatted_text().replace("\\N", "\n")

    def render(self) -> str:
        """Serialize as an ``[Events]`` line."""
        return format_event_line(
            EventFields(
                kind=self.kind,
                first=f"Marked={int(self.marked)}",
                start=self.start,
                end=self.end,
                style=self.style,
                name=self.name,
                margin_l=self.margin_l,
                margin_r=self.margin_r,
                margin_v=self.margin_v,
                effect=self.effect,
                text=self.text,
            )
        )


@dataclass
class SsaSubtitle(SubStationSubtitle[SsaEvent, SsaStyle]):
    """SubStation Alpha subtitle."""

    script_info: SsaScriptInfo = field(default_factory=SsaScriptInfo.default)

    SCRIPT_INFO = SsaScriptInfo
    STYLES_HEADER = "[V4 Styles]"
    STYLE_FORMAT = STYLE_FORMAT
    EVENT_FORMAT = EVENT_FORMAT
    PARSED_LOG_EVENT = "ssa_parsed"

    @classmethod
    def parse_event(cls, line: str) -> SsaEvent | None:
        """Parse an event line whose first field is ``Marked=0`` or ``Marked=1``."""
        fields = parse_event_line(line, _EVENT_LINE)
        if fields is None:
            return None
        return SsaEvent(
            kind=fields.kind,
            marked=fields.first != "0",
            start=fields.start,
            end=fields.end,
            style=fields.style,
            name=fields.name,
            margin_l=fields.margin_l,
            margin_r=fields.margin_r,
            margin_v=fields.margin_v,
            effect=fields.effect,
            text=fields.text,
        )

    @classmethod
    def parse_style(cls, line: str) -> SsaStyle | None:
        return SsaStyle.parse(line)


def parse_ssa(content: str | Iterable[str]) -> SsaSubtitle:
    """Parse SSA content into an SsaSubtitle.

    Parsing never fails: lines that do not match their section's syntax
    are skipped.

    Args:
        content: Decoded SSA text, or an iterable of its lines

    Returns:
        SsaSubtitle with the sections found
    """
    return SsaSubtitle.from_str(content)


def serialize_ssa(subtitle: SsaSubtitle) -> str:
    """Serialize an SsaSubtitle to SSA text."""
    return subtitle.render()
