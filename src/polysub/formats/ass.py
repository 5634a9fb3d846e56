"""Advanced SubStation Alpha (.ass) format parser, serializer and tag converters."""

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
    split_override_tags,
    strip_drawing_and_bracket_tags,
    substation_color_to_html,
)

STYLE_FORMAT = (
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, "
    "OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, "
    "ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, "
    "MarginR, MarginV, Encoding"
)
EVENT_FORMAT = (
    "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text"
)

_EVENT_LINE = compile_event_line(r"([+-]?[0-9]+)")

_HTML_TAGS = {
    "{\\b1}": "<b>",
    "{\\b0}": "</b>",
    "{\\i1}": "<i>",
    "{\\i0}": "</i>",
    "{\\u1}": "<u>",
    "{\\u0}": "</u>",
}
_UNDERLINE_TAGS = {"{\\u1}": "", "{\\u0}": ""}


def to_srt_formatting(text: str) -> str:
    """Convert ASS overrides to SubRip tags.

    Override groups must already be split (one code per ``{}``). Bold,
    italic, underline and primary colour are converted; other codes are
    dropped.
    """
    return scan(
        text,
        [replace_tags(_HTML_TAGS), substation_color_to_html, discard_bracket_tag],
        "{",
    )


def to_vtt_formatting(text: str) -> str:
    """Convert split ASS overrides to WebVTT bold, italic and underline tags."""
    return scan(text, [replace_tags(_HTML_TAGS), discard_bracket_tag], "{")


def to_ssa_formatting(text: str) -> str:
    """Split override groups and drop the underline codes SSA does not have."""
    return scan(split_override_tags(text), [replace_tags(_UNDERLINE_TAGS)], "{")


def strip_ass_formatting(text: str) -> str:
    """Remove drawing spans and every override block, keeping ``\\N``."""
    return strip_drawing_and_bracket_tags(text)


@dataclass
class AssScriptInfo(ScriptInfo):
    """``[Script Info]`` of an ASS file, which adds WrapStyle."""

    wrap_style: str | None = None

    KEYS: ClassVar[tuple[tuple[str, str], ...]] = (
        *ScriptInfo.KEYS,
        ("wrap_style", "WrapStyle"),
    )
    DEFAULT_SCRIPT_TYPE: ClassVar[str | None] = "v4.00+"


@dataclass
class AssStyle:
    """Style definition from the ``[V4+ Styles]`` section."""

    name: str
    fontname: str
    fontsize: int | float
    primary_colour: str
    secondary_colour: str
    outline_colour: str
    back_colour: str
    bold: bool
    italic: bool
    underline: bool
    strike_out: bool
    scale_x: int | float
    scale_y: int | float
    spacing: int | float
    angle: int | float
    border_style: int
    outline: int | float
    shadow: int | float
    alignment: int
    margin_l: int
    margin_r: int
    margin_v: int
    encoding: int

    FIELD_COUNT: ClassVar[int] = 23

    @classmethod
    def parse(cls, line: str) -> "AssStyle | None":
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
                outline_colour=fields[5].strip(),
                back_colour=fields[6].strip(),
                bold=parse_reversed_bool(fields[7]),
                italic=parse_reversed_bool(fields[8]),
                underline=parse_reversed_bool(fields[9]),
                strike_out=parse_reversed_bool(fields[10]),
                scale_x=parse_number(fields[11]),
                scale_y=parse_number(fields[12]),
                spacing=parse_number(fields[13]),
                angle=parse_number(fields[14]),
                border_style=int(fields[15]),
                outline=parse_number(fields[16]),
                shadow=parse_number(fields[17]),
                alignment=int(fields[18]),
                margin_l=int(fields[19]),
                margin_r=int(fields[20]),
                margin_v=int(fields[21]),
                encoding=int(fields[22]),
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
            self.outline_colour,
            self.back_colour,
            format_reversed_bool(self.bold),
            format_reversed_bool(self.italic),
            format_reversed_bool(self.underline),
            format_reversed_bool(self.strike_out),
            self.scale_x,
            self.scale_y,
            self.spacing,
            self.angle,
            self.border_style,
            self.outline,
            self.shadow,
            self.alignment,
            self.margin_l,
            self.margin_r,
            self.margin_v,
            self.encoding,
        ]
        return "Style: " + ",".join(str(value) for value in values)


@dataclass
class AssEvent:
    """Line from the ``[Events]`` section of an ASS file."""

    start: Moment
    end: Moment
    text: str
    kind: SubStationEventKind = SubStationEventKind.DIALOGUE
    layer: int = 0
    style: str | None = None
    name: str | None = None
    margin_l: int = 0
    margin_r: int = 0
    margin_v: int = 0
    effect: str | None = None

    def unformatted_text(self) -> str:
        """Return the text without overrides or drawings, keeping ``\\N``."""
        return strip_ass_formatting(self.text)

    def as_plaintext(self) -> str:
        """Return the unformatted text with ``\\N`` turned into newlines."""
        return self.unformatted_text().replace("\\N", "\n")

    def render(self) -> str:
        """Serialize as an ``[Events]`` line."""
        return format_event_line(
            EventFields(
                kind=self.kind,
                first=str(self.layer),
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
class AssSubtitle(SubStationSubtitle[AssEvent, AssStyle]):
    """Advanced SubStation Alpha subtitle."""

    script_info: AssScriptInfo = field(default_factory=AssScriptInfo.default)

    SCRIPT_INFO = AssScriptInfo
    STYLES_HEADER = "[V4+ Styles]"
    STYLE_FORMAT = STYLE_FORMAT
    EVENT_FORMAT = EVENT_FORMAT
    PARSED_LOG_EVENT = "ass_parsed"

    @classmethod
    def parse_event(cls, line: str) -> AssEvent | None:
        """Parse an event line whose first field is the layer."""
        fields = parse_event_line(line, _EVENT_LINE)
        if fields is None:
            return None
        return AssEvent(
            kind=fields.kind,
            layer=int(fields.first),
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
    def parse_style(cls, line: str) -> AssStyle | None:
        return AssStyle.parse(line)


def parse_ass(content: str | Iterable[str]) -> AssSubtitle:
    """Parse ASS content into an AssSubtitle.

    Parsing never fails: lines that do not match their section's syntax
    (comments, ``Format:`` lines, malformed styles or events) are skipped.

    Args:
        content: Decoded ASS text, or an iterable of its lines

    Returns:
        AssSubtitle with the sections found
    """
    return AssSubtitle.from_str(content)


def serialize_ass(subtitle: AssSubtitle) -> str:
    """Serialize an AssSubtitle to ASS text.

    Args:
        subtitle: Subtitle to serialize

    Returns:
        Complete file text; dialogue is written before the other event kinds
    """
    return subtitle.render()
