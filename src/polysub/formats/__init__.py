"""Subtitle format parsers, serializers and tag converters."""

from polysub.formats.ass import (
    AssEvent,
    AssScriptInfo,
    AssStyle,
    AssSubtitle,
    parse_ass,
    serialize_ass,
)
from polysub.formats.microdvd import (
    MicroDvdEvent,
    MicroDvdSubtitle,
    TimedMicroDvdEvent,
    TimedMicroDvdSubtitle,
    parse_microdvd,
)
from polysub.formats.srt import SubRipEvent, SubRipSubtitle, parse_srt, serialize_srt
from polysub.formats.ssa import (
    SsaEvent,
    SsaScriptInfo,
    SsaStyle,
    SsaSubtitle,
    parse_ssa,
    serialize_ssa,
)
from polysub.formats.substation import EmbeddedFile
from polysub.formats.vtt import WebVttCue, WebVttSubtitle, parse_vtt, serialize_vtt

__all__ = [
    "AssEvent",
    "AssScriptInfo",
    "AssStyle",
    "AssSubtitle",
    "EmbeddedFile",
    "MicroDvdEvent",
    "MicroDvdSubtitle",
    "SsaEvent",
    "SsaScriptInfo",
    "SsaStyle",
    "SsaSubtitle",
    "SubRipEvent",
    "SubRipSubtitle",
    "TimedMicroDvdEvent",
    "TimedMicroDvdSubtitle",
    "WebVttCue",
    "WebVttSubtitle",
    "parse_ass",
    "parse_microdvd",
    "parse_srt",
    "parse_ssa",
    "parse_vtt",
    "serialize_ass",
    "serialize_srt",
    "serialize_ssa",
    "serialize_vtt",
]
