"""Conversion between subtitle formats.

Each ordered pair of timed formats has its own conversion function. Every
conversion builds fresh event objects, so the source document can be
modified afterwards without affecting the result.
"""

import copy
from collections.abc import Callable
from typing import Any

import structlog

from polysub.core.constants import SubtitleFormat
from polysub.core.errors import UnsupportedConversionError
from polysub.core.plain import PlainSubtitle
from polysub.formats import ass, srt, ssa, vtt
from polysub.formats.ass import AssEvent, AssScriptInfo, AssStyle, AssSubtitle
from polysub.formats.microdvd import (
    MicroDvdSubtitle,
    TimedMicroDvdEvent,
    TimedMicroDvdSubtitle,
)
from polysub.formats.srt import SubRipEvent, SubRipSubtitle
from polysub.formats.ssa import SsaEvent, SsaScriptInfo, SsaStyle, SsaSubtitle
from polysub.formats.tags import split_override_tags
from polysub.formats.vtt import WebVttCue, WebVttSubtitle
from polysub.utils.config import get_settings

logger = structlog.get_logger()

TimedSubtitle = (
    SubRipSubtitle | WebVttSubtitle | AssSubtitle | SsaSubtitle | TimedMicroDvdSubtitle
)


def _to_substation_lines(text: str) -> str:
    return text.replace("\n", "\\N")


def _from_substation_lines(text: str) -> str:
    return text.replace("\\N", "\n")


def _to_microdvd_lines(text: str) -> str:
    return text.replace("\n", "|")


def _from_microdvd_lines(text: str) -> str:
    return text.replace("|", "\n")


def _microdvd(events: list[TimedMicroDvdEvent]) -> TimedMicroDvdSubtitle:
    return TimedMicroDvdSubtitle(
        events=events, framerate=get_settings().default_framerate
    )


def _to_timed_microdvd(subtitle: Any) -> TimedMicroDvdSubtitle:
    return _microdvd(
        [
            TimedMicroDvdEvent(
                start=event.start,
                end=event.end,
                text=_to_microdvd_lines(event.as_plaintext()),
            )
            for event in subtitle.events
        ]
    )


def _cue_line_number(cue: WebVttCue, position: int) -> int:
    if cue.identifier and cue.identifier.isdecimal():
        return int(cue.identifier)
    return position


# SubRip


def srt_to_vtt(subtitle: SubRipSubtitle) -> WebVttSubtitle:
    """Convert SubRip to WebVTT, using line numbers as cue identifiers.

    Bracket tags such as ``{b}`` become HTML tags; only ``<b>``, ``<i>`` and
    ``<u>`` are kept.
    """
    return WebVttSubtitle(
        cues=[
            WebVttCue(
                start=event.start,
                end=event.end,
                text=srt.to_vtt_formatting(event.text),
                identifier=str(event.line_number),
            )
            for event in subtitle.events
        ]
    )


def srt_to_ass(subtitle: SubRipSubtitle) -> AssSubtitle:
    """Convert SubRip to ASS, turning HTML markup into override codes."""
    return AssSubtitle(
        dialogue=[
            AssEvent(
                start=event.start,
                end=event.end,
                text=srt.to_ass_formatting(_to_substation_lines(event.text)),
            )
            for event in subtitle.events
        ]
    )


def srt_to_ssa(subtitle: SubRipSubtitle) -> SsaSubtitle:
    """Convert SubRip to SSA, turning HTML markup into override codes."""
    return SsaSubtitle(
        dialogue=[
            SsaEvent(
                start=event.start,
                end=event.end,
                text=srt.to_ssa_formatting(_to_substation_lines(event.text)),
            )
            for event in subtitle.events
        ]
    )


def srt_to_microdvd(subtitle: SubRipSubtitle) -> TimedMicroDvdSubtitle:
    """Convert SubRip to timed MicroDVD, dropping all formatting."""
    return _to_timed_microdvd(subtitle)


# WebVTT


def vtt_to_srt(subtitle: WebVttSubtitle) -> SubRipSubtitle:
    """Convert WebVTT to SubRip.

    Numeric cue identifiers become line numbers; other cues are numbered by
    their position (1-based).
    """
    return SubRipSubtitle(
        events=[
            SubRipEvent(
                line_number=_cue_line_number(cue, position),
                start=cue.start,
                end=cue.end,
                text=vtt.to_srt_formatting(cue.text),
            )
            for position, cue in enumerate(subtitle.cues, start=1)
        ]
    )


def vtt_to_ass(subtitle: WebVttSubtitle) -> AssSubtitle:
    """Convert WebVTT to ASS; the header becomes the script title."""
    return AssSubtitle(
        script_info=AssScriptInfo.default(title=subtitle.header),
        dialogue=[
            AssEvent(
                start=cue.start,
                end=cue.end,
                text=vtt.to_ass_formatting(_to_substation_lines(cue.text)),
            )
            for cue in subtitle.cues
        ],
    )


def vtt_to_ssa(subtitle: WebVttSubtitle) -> SsaSubtitle:
    """Convert WebVTT to SSA; the header becomes the script title."""
    return SsaSubtitle(
        script_info=SsaScriptInfo.default(title=subtitle.header),
        dialogue=[
            SsaEvent(
                start=cue.start,
                end=cue.end,
                text=vtt.to_ssa_formatting(_to_substation_lines(cue.text)),
            )
            for cue in subtitle.cues
        ],
    )


def vtt_to_microdvd(subtitle: WebVttSubtitle) -> TimedMicroDvdSubtitle:
    """Convert WebVTT to timed MicroDVD, dropping all formatting."""
    return _to_timed_microdvd(subtitle)


# ASS


def ass_to_srt(subtitle: AssSubtitle) -> SubRipSubtitle:
    """Convert ASS dialogue to SubRip, numbering events 1..N.

    Bold, italic, underline and primary colour overrides are converted;
    every other override is dropped.
    """
    return SubRipSubtitle(
        events=[
            SubRipEvent(
                line_number=position,
                start=event.start,
                end=event.end,
                text=ass.to_srt_formatting(
                    split_override_tags(_from_substation_lines(event.text))
                ),
            )
            for position, event in enumerate(subtitle.dialogue, start=1)
        ]
    )


def ass_to_vtt(subtitle: AssSubtitle) -> WebVttSubtitle:
    """Convert ASS dialogue to WebVTT; the script title becomes the header."""
    return WebVttSubtitle(
        header=subtitle.script_info.title,
        cues=[
            WebVttCue(
                start=event.start,
                end=event.end,
                text=ass.to_vtt_formatting(
                    split_override_tags(_from_substation_lines(event.text))
                ),
            )
            for event in subtitle.dialogue
        ],
    )


def _ass_style_to_ssa(style: AssStyle) -> SsaStyle:
    return SsaStyle(
        name=style.name,
        fontname=style.fontname,
        fontsize=style.fontsize,
        primary_colour=style.primary_colour,
        secondary_colour=style.secondary_colour,
        tertiary_colour=style.outline_colour,
        back_colour=style.back_colour,
        bold=style.bold,
        italic=style.italic,
        border_style=style.border_style,
        outline=style.outline,
        shadow=style.shadow,
        alignment=style.alignment,
        margin_l=style.margin_l,
        margin_r=style.margin_r,
        margin_v=style.margin_v,
        alpha_level=0,
        encoding=style.encoding,
    )


def ass_to_ssa(subtitle: AssSubtitle) -> SsaSubtitle:
    """Convert ASS to SSA.

    Dialogue keeps its style, name, margins and effect; layers are dropped
    and events are unmarked. Override groups are split and underline codes
    removed. Styles lose the fields SSA has no room for.
    """
    return SsaSubtitle(
        script_info=SsaScriptInfo.default(title=subtitle.script_info.title),
        dialogue=[
            SsaEvent(
                start=event.start,
                end=event.end,
                text=ass.to_ssa_formatting(event.text),
                style=event.style,
                name=event.name,
                margin_l=event.margin_l,
                margin_r=event.margin_r,
                margin_v=event.margin_v,
                effect=event.effect,
            )
            for event in subtitle.dialogue
        ],
        styles=[_ass_style_to_ssa(style) for style in subtitle.styles],
        fonts=copy.deepcopy(subtitle.fonts),
        graphics=copy.deepcopy(subtitle.graphics),
    )


def ass_to_microdvd(subtitle: AssSubtitle) -> TimedMicroDvdSubtitle:
    """Convert ASS dialogue to timed MicroDVD, dropping overrides and drawings."""
    return _to_timed_microdvd(subtitle)


# SSA


def ssa_to_srt(subtitle: SsaSubtitle) -> SubRipSubtitle:
    """Convert SSA dialogue to SubRip, numbering events 1..N."""
    return SubRipSubtitle(
        events=[
            SubRipEvent(
                line_number=position,
                start=event.start,
                end=event.end,
                text=ssa.to_srt_formatting(
                    split_override_tags(_from_substation_lines(event.text))
                ),
            )
            for position, event in enumerate(subtitle.dialogue, start=1)
        ]
    )


def ssa_to_vtt(subtitle: SsaSubtitle) -> WebVttSubtitle:
    """Convert SSA dialogue to WebVTT; the script title becomes the header."""
    return WebVttSubtitle(
        header=subtitle.script_info.title,
        cues=[
            WebVttCue(
                start=event.start,
                end=event.end,
                text=ssa.to_vtt_formatting(
                    split_override_tags(_from_substation_lines(event.text))
                ),
            )
            for event in subtitle.dialogue
        ],
    )


def _ssa_style_to_ass(style: SsaStyle) -> AssStyle:
    return AssStyle(
        name=style.name,
        fontname=style.fontname,
        fontsize=style.fontsize,
        primary_colour=style.primary_colour,
        secondary_colour=style.secondary_colour,
        outline_colour=style.tertiary_colour,
        back_colour=style.back_colour,
        bold=style.bold,
        italic=style.italic,
        underline=False,
        strike_out=False,
        scale_x=100,
        scale_y=100,
        spacing=0,
        angle=0,
        border_style=style.border_style,
        outline=style.outline,
        shadow=style.shadow,
        alignment=style.alignment,
        margin_l=style.margin_l,
        margin_r=style.margin_r,
        margin_v=style.margin_v,
        encoding=style.encoding,
    )


def ssa_to_ass(subtitle: SsaSubtitle) -> AssSubtitle:
    """Convert SSA to ASS.

    Every SSA override is valid ASS, so text is copied unchanged. Events
    are placed on layer 0.
    """
    return AssSubtitle(
        script_info=AssScriptInfo.default(title=subtitle.script_info.title),
        dialogue=[
            AssEvent(
                start=event.start,
                end=event.end,
                text=ssa.to_ass_formatting(event.text),
                style=event.style,
                name=event.name,
                margin_l=event.margin_l,
                margin_r=event.margin_r,
                margin_v=event.margin_v,
                effect=event.effect,
            )
            for event in subtitle.dialogue
        ],
        styles=[_ssa_style_to_ass(style) for style in subtitle.styles],
        fonts=copy.deepcopy(subtitle.fonts),
        graphics=copy.deepcopy(subtitle.graphics),
    )


def ssa_to_microdvd(subtitle: SsaSubtitle) -> TimedMicroDvdSubtitle:
    """Convert SSA dialogue to timed MicroDVD, dropping overrides."""
    return _to_timed_microdvd(subtitle)


# MicroDVD


def microdvd_to_srt(subtitle: TimedMicroDvdSubtitle) -> SubRipSubtitle:
    """Convert timed MicroDVD to SubRip, numbering events 1..N."""
    return SubRipSubtitle(
        events=[
            SubRipEvent(
                line_number=position,
                start=event.start,
                end=event.end,
                text=_from_microdvd_lines(event.text),
            )
            for position, event in enumerate(subtitle.events, start=1)
        ]
    )


def microdvd_to_vtt(subtitle: TimedMicroDvdSubtitle) -> WebVttSubtitle:
    """Convert timed MicroDVD to WebVTT."""
    return WebVttSubtitle(
        cues=[
            WebVttCue(
                start=event.start,
                end=event.end,
                text=_from_microdvd_lines(event.text),
            )
            for event in subtitle.events
        ]
    )


def microdvd_to_ass(subtitle: TimedMicroDvdSubtitle) -> AssSubtitle:
    """Convert timed MicroDVD to ASS."""
    return AssSubtitle(
        dialogue=[
            AssEvent(
                start=event.start,
                end=event.end,
                text=event.text.replace("|", "\\N"),
            )
            for event in subtitle.events
        ]
    )


def microdvd_to_ssa(subtitle: TimedMicroDvdSubtitle) -> SsaSubtitle:
    """Convert timed MicroDVD to SSA."""
    return SsaSubtitle(
        dialogue=[
            SsaEvent(
                start=event.start,
                end=event.end,
                text=event.text.replace("|", "\\N"),
            )
            for event in subtitle.events
        ]
    )


# Plain


def plain_to_srt(subtitle: PlainSubtitle) -> SubRipSubtitle:
    """Build a SubRip subtitle numbered 1..N from plain events."""
    return SubRipSubtitle(
        events=[
            SubRipEvent(
                line_number=position,
                start=event.start,
                end=event.end,
                text=event.text,
            )
            for position, event in enumerate(subtitle.events, start=1)
        ]
    )


def plain_to_vtt(subtitle: PlainSubtitle) -> WebVttSubtitle:
    """Build a WebVTT subtitle from plain events."""
    return WebVttSubtitle(
        cues=[
            WebVttCue(start=event.start, end=event.end, text=event.text)
            for event in subtitle.events
        ]
    )


def plain_to_ass(subtitle: PlainSubtitle) -> AssSubtitle:
    """Build an ASS subtitle from plain events."""
    return AssSubtitle(
        dialogue=[
            AssEvent(
                start=event.start,
                end=event.end,
                text=_to_substation_lines(event.text),
            )
            for event in subtitle.events
        ]
    )


def plain_to_ssa(subtitle: PlainSubtitle) -> SsaSubtitle:
    """Build an SSA subtitle from plain events."""
    return SsaSubtitle(
        dialogue=[
            SsaEvent(
                start=event.start,
                end=event.end,
                text=_to_substation_lines(event.text),
            )
            for event in subtitle.events
        ]
    )


def plain_to_microdvd(subtitle: PlainSubtitle) -> TimedMicroDvdSubtitle:
    """Build a timed MicroDVD subtitle from plain events."""
    return _microdvd(
        [
            TimedMicroDvdEvent(
                start=event.start,
                end=event.end,
                text=_to_microdvd_lines(event.text),
            )
            for event in subtitle.events
        ]
    )


_SOURCE_FORMATS: dict[type, SubtitleFormat] = {
    SubRipSubtitle: SubtitleFormat.SUBRIP,
    WebVttSubtitle: SubtitleFormat.WEBVTT,
    AssSubtitle: SubtitleFormat.ASS,
    SsaSubtitle: SubtitleFormat.SSA,
    TimedMicroDvdSubtitle: SubtitleFormat.MICRODVD,
}

_CONVERTERS: dict[tuple[type, SubtitleFormat], Callable[[Any], TimedSubtitle]] = {
    (SubRipSubtitle, SubtitleFormat.WEBVTT): srt_to_vtt,
    (SubRipSubtitle, SubtitleFormat.ASS): srt_to_ass,
    (SubRipSubtitle, SubtitleFormat.SSA): srt_to_ssa,
    (SubRipSubtitle, SubtitleFormat.MICRODVD): srt_to_microdvd,
    (WebVttSubtitle, SubtitleFormat.SUBRIP): vtt_to_srt,
    (WebVttSubtitle, SubtitleFormat.ASS): vtt_to_ass,
    (WebVttSubtitle, SubtitleFormat.SSA): vtt_to_ssa,
    (WebVttSubtitle, SubtitleFormat.MICRODVD): vtt_to_microdvd,
    (AssSubtitle, SubtitleFormat.SUBRIP): ass_to_srt,
    (AssSubtitle, SubtitleFormat.WEBVTT): ass_to_vtt,
    (AssSubtitle, SubtitleFormat.SSA): ass_to_ssa,
    (AssSubtitle, SubtitleFormat.MICRODVD): ass_to_microdvd,
    (SsaSubtitle, SubtitleFormat.SUBRIP): ssa_to_srt,
    (SsaSubtitle, SubtitleFormat.WEBVTT): ssa_to_vtt,
    (SsaSubtitle, SubtitleFormat.ASS): ssa_to_ass,
    (SsaSubtitle, SubtitleFormat.MICRODVD): ssa_to_microdvd,
    (TimedMicroDvdSubtitle, SubtitleFormat.SUBRIP): microdvd_to_srt,
    (TimedMicroDvdSubtitle, SubtitleFormat.WEBVTT): microdvd_to_vtt,
    (TimedMicroDvdSubtitle, SubtitleFormat.ASS): microdvd_to_ass,
    (TimedMicroDvdSubtitle, SubtitleFormat.SSA): microdvd_to_ssa,
    (PlainSubtitle, SubtitleFormat.SUBRIP): plain_to_srt,
    (PlainSubtitle, SubtitleFormat.WEBVTT): plain_to_vtt,
    (PlainSubtitle, SubtitleFormat.ASS): plain_to_ass,
    (PlainSubtitle, SubtitleFormat.SSA): plain_to_ssa,
    (PlainSubtitle, SubtitleFormat.MICRODVD): plain_to_microdvd,
}


def source_format(subtitle: object) -> SubtitleFormat | None:
    """Return the file format of a timed subtitle document.

    Raw MicroDVD and plain subtitles have no convertible file format and
    yield None.
    """
    return _SOURCE_FORMATS.get(type(subtitle))


def convert(
    subtitle: TimedSubtitle | PlainSubtitle, target: SubtitleFormat | str
) -> TimedSubtitle:
    """Convert a subtitle document to another format.

    Args:
        subtitle: Timed subtitle document or plain subtitle
        target: Format to convert to

    Returns:
        New document in the target format. Converting to the document's own
        format returns a deep copy.

    Raises:
        UnsupportedConversionError: If the source is a raw (frame-timed)
            MicroDVD subtitle or another unsupported type, or the target is
            not a known format
    """
    source_name = type(subtitle).__name__
    try:
        target = SubtitleFormat(target)
    except ValueError as e:
        raise UnsupportedConversionError(source_name, str(target)) from e

    if isinstance(subtitle, MicroDvdSubtitle):
        raise UnsupportedConversionError("raw MicroDVD", target)

    if source_format(subtitle) == target:
        return copy.deepcopy(subtitle)

    converter = _CONVERTERS.get((type(subtitle), target))
    if converter is None:
        raise UnsupportedConversionError(source_name, target)

    result = converter(subtitle)
    logger.debug(
        "subtitle_converted",
        source=source_name,
        target=str(target),
        events=len(result),
    )
    return result
