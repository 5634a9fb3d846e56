"""Pieces shared by the Advanced SubStation Alpha and SubStation Alpha formats.

Both formats are INI-like files with ``[Script Info]``, styles, ``[Events]``,
``[Fonts]`` and ``[Graphics]`` sections. This module splits a file into its
sections, parses the parts whose syntax is identical in both formats and
holds the document class both formats share. The format modules interpret
style and event fields.
"""

import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from os import PathLike
from typing import ClassVar, Generic, NamedTuple, Protocol, Self, TypeVar

import structlog

from polysub.core.constants import SubStationEventKind, SubtitleFormat
from polysub.core.events import (
    TextEvent,
    TimedEvent,
    shift_events,
    strip_event_formatting,
)
from polysub.core.timing import Moment, TimeDelta
from polysub.formats.blocks import iter_lines
from polysub.utils.encoding import read_text, write_text

logger = structlog.get_logger()

SCRIPT_INFO_HEADING = re.compile(
    r"\ufeff?[ \t\r\n]*\[script info\]", re.IGNORECASE
)
SCRIPT_TYPE = re.compile(r"ScriptType[ \t]*:[ \t]*(v4\.00\+|v4\.00)", re.IGNORECASE)

_SECTION_HEADER = re.compile(
    r"\s*\[(script info|v4\+? styles|events|fonts|graphics)\]\s*$", re.IGNORECASE
)
_OTHER_HEADER = re.compile(r"\s*\[[^\]]+\]\s*$")

_TIMESTAMP = r"[ \t]*([+-]?[0-9]+):([+-]?[0-9]+):([+-]?[0-9]+)\.([+-]?[0-9]+)[ \t]*"
_FIELD = r"([^,]*),[ \t]*"
_MARGIN = r"([+-]?[0-9]+),[ \t]*"
_EVENT_KIND = r"(?i:(dialogue|picture|sound|movie|command))[ \t]*:[ \t]*"
_STYLE_PREFIX = re.compile(r"Style[ \t]*:[ \t]*", re.IGNORECASE)
_NON_EVENT_LINE = re.compile(r"[ \t]*(;|(format|comment)[ \t]*:)", re.IGNORECASE)

FONT_MARKER = "fontname:"
GRAPHIC_MARKER = "filename:"


class Section(StrEnum):
    """Sections of a SubStation file."""

    SCRIPT_INFO = "script info"
    STYLES = "styles"
    EVENTS = "events"
    FONTS = "fonts"
    GRAPHICS = "graphics"
    UNKNOWN = "unknown"


def parse_section_header(line: str) -> Section | None:
    """Return the section a header line opens, or None for other lines.

    Headers for sections this library does not handle (e.g. ``[Aegisub
    Project Garbage]``) map to ``Section.UNKNOWN`` so their content is ignored.
    """
    match = _SECTION_HEADER.match(line)
    if match is not None:
        name = match.group(1).lower()
        if name.endswith("styles"):
            return Section.STYLES
        return Section(name)
    if _OTHER_HEADER.match(line):
        return Section.UNKNOWN
    return None


def detect_script_type(text: str) -> SubtitleFormat | None:
    """Return ASS or SSA according to the first ScriptType entry in text."""
    match = SCRIPT_TYPE.search(text)
    if match is None:
        return None
    if match.group(1).lower() == "v4.00+":
        return SubtitleFormat.ASS
    return SubtitleFormat.SSA


def timestamp_to_moment(
    hours: str, minutes: str, seconds: str, centis: str
) -> Moment:
    """Build a Moment from SubStation timestamp fields (centiseconds)."""
    return Moment.from_timestamp(
        int(hours), int(minutes), int(seconds), int(centis) * 10
    )


def parse_reversed_bool(value: str) -> bool:
    """Parse a SubStation boolean, where -1 means true and 0 means false.

    Raises:
        ValueError: If value is not a recognised boolean
    """
    value = value.strip()
    if value in ("-1", "1"):
        return True
    if value == "0":
        return False
    raise ValueError(f"Invalid SubStation boolean '{value}'")


def format_reversed_bool(value: bool) -> str:
    """Format a boolean the SubStation way."""
    return "-1" if value else "0"


def parse_number(value: str) -> int | float:
    """Parse a numeric style field, keeping integers as int.

    Raises:
        ValueError: If value is not a number
    """
    value = value.strip()
    try:
        return int(value)
    except ValueError:
        return float(value)


def parse_style_fields(line: str, count: int) -> list[str] | None:
    """Split a ``Style:`` line into its first ``count`` fields.

    Returns:
        Field values with leading whitespace removed, or None if the line is
        not a style line or has too few fields
    """
    match = _STYLE_PREFIX.match(line)
    if match is None:
        return None
    fields = [value.lstrip() for value in line[match.end() :].split(",")]
    if len(fields) < count:
        return None
    return fields[:count]


class EventFields(NamedTuple):
    """Fields of an ``[Events]`` line, before format-specific interpretation."""

    kind: SubStationEventKind
    first: str
    start: Moment
    end: Moment
    style: str | None
    name: str | None
    margin_l: int
    margin_r: int
    margin_v: int
    effect: str | None
    text: str


def compile_event_line(first_field: str) -> re.Pattern[str]:
    """Build the event line pattern given the pattern of the first field.

    The first field is the layer for ASS and ``Marked=`` for SSA.
    """
    return re.compile(
        _EVENT_KIND
        + first_field
        + r",[ \t]*"
        + _TIMESTAMP
        + r",[ \t]*"
        + _TIMESTAMP
        + r",[ \t]*"
        + _FIELD
        + _FIELD
        + _MARGIN * 3
        + _FIELD
        + r"(.*)"
    )


def parse_event_line(line: str, pattern: re.Pattern[str]) -> EventFields | None:
    """Parse an event line with a pattern from :func:`compile_event_line`."""
    match = pattern.match(line)
    if match is None:
        return None
    g = match.groups()
    return EventFields(
        kind=SubStationEventKind(g[0].capitalize()),
        first=g[1],
        start=timestamp_to_moment(*g[2:6]),
        end=timestamp_to_moment(*g[6:10]),
        style=g[10] or None,
        name=g[11] or None,
        margin_l=int(g[12]),
        margin_r=int(g[13]),
        margin_v=int(g[14]),
        effect=g[15] or None,
        text=g[16],
    )


def format_event_line(fields: EventFields) -> str:
    """Serialize event fields to an ``[Events]`` line."""
    return (
        f"{fields.kind}: {fields.first},"
        f"{fields.start.as_substation_timestamp()},"
        f"{fields.end.as_substation_timestamp()},"
        f"{fields.style or ''},{fields.name or ''},"
        f"{fields.margin_l},{fields.margin_r},{fields.margin_v},"
        f"{fields.effect or ''},{fields.text}"
    )


@dataclass
class EmbeddedFile:
    """Font or graphic embedded in a SubStation file (UUE-encoded lines)."""

    name: str
    data: str

    def render(self, marker: str) -> str:
        """Serialize as the marker line followed by the data lines."""
        return f"{marker} {self.name}\n{self.data}"


def parse_embedded_files(lines: Iterable[str], marker: str) -> list[EmbeddedFile]:
    """Group ``[Fonts]``/``[Graphics]`` lines into named files.

    Each file starts with a marker line (``fontname:`` or ``filename:``) and
    runs until a blank line or the next marker. Lines outside a file are
    ignored.
    """
    entries: list[tuple[str, list[str]]] = []
    current: list[str] | None = None
    for line in lines:
        stripped = line.strip()
        if stripped.startswith(marker):
            current = []
            entries.append((stripped[len(marker) :].strip(), current))
        elif not stripped:
            current = None
        elif current is not None:
            current.append(stripped)
    return [EmbeddedFile(name=name, data="\n".join(data)) for name, data in entries]


@dataclass
class ScriptInfo:
    """``[Script Info]`` fields shared by ASS and SSA.

    Keys without a named attribute are kept in ``extra`` in file order.
    """

    title: str | None = None
    original_script: str | None = None
    original_translation: str | None = None
    original_editing: str | None = None
    original_timing: str | None = None
    synch_point: str | None = None
    script_updated_by: str | None = None
    update_details: str | None = None
    script_type: str | None = None
    collisions: str | None = None
    play_res_y: str | None = None
    play_res_x: str | None = None
    play_depth: str | None = None
    timer: str | None = None
    extra: dict[str, str] = field(default_factory=dict)

    KEYS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("title", "Title"),
        ("original_script", "Original Script"),
        ("original_translation", "Original Translation"),
        ("original_editing", "Original Editing"),
        ("original_timing", "Original Timing"),
        ("synch_point", "Synch Point"),
        ("script_updated_by", "Script Updated By"),
        ("update_details", "Update Details"),
        ("script_type", "ScriptType"),
        ("collisions", "Collisions"),
        ("play_res_y", "PlayResY"),
        ("play_res_x", "PlayResX"),
        ("play_depth", "PlayDepth"),
        ("timer", "Timer"),
    )
    DEFAULT_SCRIPT_TYPE: ClassVar[str | None] = None

    @classmethod
    def default(cls, title: str | None = None) -> Self:
        """Script info written for converted documents."""
        return cls(title=title, script_type=cls.DEFAULT_SCRIPT_TYPE)

    @classmethod
    def from_mapping(cls, data: Mapping[str, str]) -> Self:
        """Project raw ``Key: value`` pairs onto named attributes."""
        known_keys = {key for _, key in cls.KEYS}
        named = {attr: data[key] for attr, key in cls.KEYS if key in data}
        extra = {key: value for key, value in data.items() if key not in known_keys}
        return cls(**named, extra=extra)

    def render(self) -> str:
        """Serialize as the ``[Script Info]`` section (no trailing newline)."""
        lines = ["[Script Info]"]
        for attr, key in self.KEYS:
            value = getattr(self, attr)
            if value is not None:
                lines.append(f"{key}: {value}")
        lines.extend(f"{key}: {value}" for key, value in self.extra.items())
        return "\n".join(lines)


def parse_script_info_line(line: str) -> tuple[str, str] | None:
    """Split a ``Key: value`` line; comments and lines without a colon give None."""
    if line.lstrip().startswith(";") or ":" not in line:
        return None
    key, value = line.split(":", 1)
    key = key.strip()
    if not key:
        return None
    return key, value.strip()


@dataclass
class RawSections:
    """Lines of a SubStation file grouped by section."""

    script_info: dict[str, str] = field(default_factory=dict)
    styles: list[str] = field(default_factory=list)
    events: list[str] = field(default_factory=list)
    fonts: list[EmbeddedFile] = field(default_factory=list)
    graphics: list[EmbeddedFile] = field(default_factory=list)


def split_sections(content: str | Iterable[str]) -> RawSections:
    """Walk the file line by line, routing each line to its section.

    Lines before the first header and lines in unknown sections are dropped.

    Args:
        content: Decoded file text, or an iterable of its lines

    Returns:
        Script info pairs, raw style and event lines, and embedded files
    """
    sections = RawSections()
    font_lines: list[str] = []
    graphic_lines: list[str] = []
    state: Section | None = None

    for line in iter_lines(content):
        header = parse_section_header(line)
        if header is not None:
            if state is Section.FONTS:
                font_lines.append("")
            elif state is Section.GRAPHICS:
                graphic_lines.append("")
            state = header
            continue

        if state is Section.SCRIPT_INFO:
            pair = parse_script_info_line(line)
            if pair is not None:
                sections.script_info[pair[0]] = pair[1]
        elif state is Section.STYLES:
            sections.styles.append(line)
        elif state is Section.EVENTS:
            sections.events.append(line)
        elif state is Section.FONTS:
            font_lines.append(line)
        elif state is Section.GRAPHICS:
            graphic_lines.append(line)

    sections.fonts = parse_embedded_files(font_lines, FONT_MARKER)
    sections.graphics = parse_embedded_files(graphic_lines, GRAPHIC_MARKER)
    return sections


def render_document(
    script_info: ScriptInfo,
    styles_header: str,
    style_format: str,
    style_lines: Sequence[str],
    fonts: Sequence[EmbeddedFile],
    graphics: Sequence[EmbeddedFile],
    event_format: str,
    event_lines: Sequence[str],
) -> str:
    """Assemble a complete SubStation file from rendered parts.

    Sections are separated by a blank line; styles, fonts and graphics are
    omitted when empty, ``[Events]`` is always written.
    """
    sections = [script_info.render()]
    if style_lines:
        sections.append("\n".join([styles_header, style_format, *style_lines]))
    if fonts:
        sections.append(
            "\n".join(["[Fonts]", *(font.render(FONT_MARKER) for font in fonts)])
        )
    if graphics:
        sections.append(
            "\n".join(
                ["[Graphics]", *(g.render(GRAPHIC_MARKER) for g in graphics)]
            )
        )
    sections.append("\n".join(["[Events]", event_format, *event_lines]))
    return "\n\n".join(sections) + "\n"


class SubStationEvent(TimedEvent, TextEvent, Protocol):
    """Line from an ``[Events]`` section."""

    kind: SubStationEventKind

    def render(self) -> str: ...


class SubStationStyle(Protocol):
    """Line from a styles section."""

    def render(self) -> str: ...


EventT = TypeVar("EventT", bound=SubStationEvent)
StyleT = TypeVar("StyleT", bound=SubStationStyle)


@dataclass
class SubStationSubtitle(Generic[EventT, StyleT]):
    """SubStation document.

    Dialogue lines are the subtitle's events; picture, sound, movie and
    command lines are kept in their own lists. Subclasses name their script
    info type, section headers and ``Format:`` lines, and parse single style
    and event lines.
    """

    script_info: ScriptInfo = field(default_factory=ScriptInfo.default)
    dialogue: list[EventT] = field(default_factory=list)
    pictures: list[EventT] = field(default_factory=list)
    sounds: list[EventT] = field(default_factory=list)
    movies: list[EventT] = field(default_factory=list)
    commands: list[EventT] = field(default_factory=list)
    styles: list[StyleT] = field(default_factory=list)
    fonts: list[EmbeddedFile] = field(default_factory=list)
    graphics: list[EmbeddedFile] = field(default_factory=list)

    SCRIPT_INFO: ClassVar[type[ScriptInfo]] = ScriptInfo
    STYLES_HEADER: ClassVar[str] = "[V4+ Styles]"
    STYLE_FORMAT: ClassVar[str] = ""
    EVENT_FORMAT: ClassVar[str] = ""
    PARSED_LOG_EVENT: ClassVar[str] = "substation_parsed"

    @classmethod
    def parse_event(cls, line: str) -> EventT | None:
        """Parse an ``[Events]`` line, returning None if it is malformed."""
        raise NotImplementedError

    @classmethod
    def parse_style(cls, line: str) -> StyleT | None:
        """Parse a ``Style:`` line, returning None if it is malformed."""
        raise NotImplementedError

    @property
    def events(self) -> list[EventT]:
        """Dialogue events."""
        return self.dialogue

    @classmethod
    def from_str(cls, content: str | Iterable[str]) -> Self:
        """Parse SubStation content.

        Parsing never fails: lines that do not match their section's syntax
        (malformed styles or events) are skipped. ``Format:`` lines, comments
        and ``Comment:`` events are ignored without being counted as skipped.

        Args:
            content: Decoded file text, or an iterable of its lines

        Returns:
            Subtitle with the sections found
        """
        sections = split_sections(content)
        subtitle = cls(
            script_info=cls.SCRIPT_INFO.from_mapping(sections.script_info),
            fonts=sections.fonts,
            graphics=sections.graphics,
        )

        buckets = {
            SubStationEventKind.DIALOGUE: subtitle.dialogue,
            SubStationEventKind.PICTURE: subtitle.pictures,
            SubStationEventKind.SOUND: subtitle.sounds,
            SubStationEventKind.MOVIE: subtitle.movies,
            SubStationEventKind.COMMAND: subtitle.commands,
        }
        skipped = 0
        for line in sections.events:
            event = cls.parse_event(line)
            if event is not None:
                buckets[event.kind].append(event)
            elif line.strip() and not _NON_EVENT_LINE.match(line):
                skipped += 1

        for line in sections.styles:
            style = cls.parse_style(line)
            if style is not None:
                subtitle.styles.append(style)

        logger.debug(
            cls.PARSED_LOG_EVENT,
            dialogue=len(subtitle.dialogue),
            styles=len(subtitle.styles),
            fonts=len(subtitle.fonts),
            graphics=len(subtitle.graphics),
            skipped_event_lines=skipped,
        )
        return subtitle

    @classmethod
    def load(cls, path: str | PathLike[str], encoding: str | None = None) -> Self:
        """Read and parse a file, detecting its encoding if needed."""
        return cls.from_str(read_text(path, encoding))

    def event(self, index: int) -> EventT | None:
        """Return the dialogue event at index, or None if out of range."""
        if 0 <= index < len(self.dialogue):
            return self.dialogue[index]
        return None

    def shift(self, delta: TimeDelta) -> None:
        """Move every dialogue event by delta."""
        shift_events(self.dialogue, delta)

    def strip_formatting(self) -> None:
        """Remove overrides from every dialogue event and drop all styles."""
        for event in self.dialogue:
            strip_event_formatting(event)
        self.styles.clear()

    def render(self) -> str:
        """Serialize the document; dialogue is written before other event kinds."""
        event_lines = [
            event.render()
            for group in (
                self.dialogue,
                self.pictures,
                self.sounds,
                self.movies,
                self.commands,
            )
            for event in group
        ]
        return render_document(
            script_info=self.script_info,
            styles_header=self.STYLES_HEADER,
            style_format=self.STYLE_FORMAT,
            style_lines=[style.render() for style in self.styles],
            fonts=self.fonts,
            graphics=self.graphics,
            event_format=self.EVENT_FORMAT,
            event_lines=event_lines,
        )

    def export(self, path: str | PathLike[str]) -> None:
        """Write the subtitle to path as UTF-8."""
        write_text(path, self.render())

    def __str__(self) -> str:
        return self.render()

    def __len__(self) -> int:
        """Return number of dialogue events."""
        return len(self.dialogue)

    def __iter__(self) -> Iterator[EventT]:
        """Iterate over dialogue events."""
        return iter(self.dialogue)

    def __getitem__(self, index: int) -> EventT:
        """Get dialogue event by index (0-based)."""
        return self.dialogue[index]
