"""Unit tests for WebVTT parser, serializer and tag converters."""

from polysub.core.timing import Moment, TimeDelta
from polysub.formats.vtt import (
    WebVttCue,
    WebVttSubtitle,
    parse_vtt,
    serialize_vtt,
    to_ass_formatting,
    to_srt_formatting,
    to_ssa_formatting,
)


class TestParseVTT:
    """Test cases for WebVTT parsing."""

    def test_parse_header_styles_and_cues(self, sample_vtt_content):
        """Test parsing a complete file."""
        result = parse_vtt(sample_vtt_content)

        assert result.header == "Sample"
        assert result.styles == ["::cue { color: yellow }"]
        assert len(result) == 2

    def test_short_timestamps_imply_zero_hours(self, sample_vtt_content):
        """Test that MM:SS.mmm timestamps are accepted."""
        cue = parse_vtt(sample_vtt_content)[0]

        assert cue.start == Moment(1000)
        assert cue.end == Moment(4000)
        assert cue.identifier is None
        assert cue.settings is None
        assert cue.text == "Hello, <b>this</b> is a test."

    def test_identifier_and_settings(self, sample_vtt_content):
        """Test that the identifier line and cue settings are kept."""
        cue = parse_vtt(sample_vtt_content)[1]

        assert cue.identifier == "intro"
        assert cue.settings == "align:start"
        assert cue.start == Moment(5000)

    def test_header_is_case_insensitive_and_optional_text(self):
        """Test a lower-case signature without free text."""
        result = parse_vtt("webvtt\n\n00:00.000 --> 00:01.000\nHi\n")

        assert result.header is None
        assert result[0].text == "Hi"

    def test_missing_header_is_parsed_as_content(self):
        """Test that a file without signature still yields its cues."""
        result = parse_vtt("00:00:01.000 --> 00:00:02.000\nNo header\n")

        assert result.header is None
        assert result[0].text == "No header"

    def test_notes_and_regions(self):
        """Test that NOTE blocks are dropped and REGION blocks kept."""
        content = """WEBVTT

NOTE This is a comment
spanning lines

REGION
id:fred width:40%

00:00:00.000 --> 00:00:01.000
Text
"""
        result = parse_vtt(content)

        assert result.regions == ["id:fred width:40%"]
        assert [cue.text for cue in result] == ["Text"]

    def test_invalid_blocks_are_skipped(self):
        """Test that unrecognised blocks do not stop parsing."""
        content = """WEBVTT

this is not a cue

00:00:00.000 --> 00:00:01.000
Kept
"""
        result = parse_vtt(content)

        assert [cue.text for cue in result] == ["Kept"]

    def test_multiline_cue(self):
        """Test that cue text runs to the next blank line."""
        result = parse_vtt("WEBVTT\n\n00:00.000 --> 00:01.000\nOne\nTwo\n")

        assert result[0].text == "One\nTwo"

    def test_empty_file(self):
        """Test that an empty file gives an empty subtitle."""
        result = parse_vtt("")

        assert len(result) == 0
        assert result.header is None


class TestSerializeVTT:
    """Test cases for WebVTT serialization."""

    def test_serialize_canonical_form(self, sample_vtt_content):
        """Test that timestamps are written in full form."""
        result = serialize_vtt(parse_vtt(sample_vtt_content))

        assert result == """WEBVTT - Sample

STYLE
::cue { color: yellow }

00:00:01.000 --> 00:00:04.000
Hello, <b>this</b> is a test.

intro
00:00:05.000 --> 00:00:08.000 align:start
This is the second subtitle.
"""

    def test_serialize_round_trip_of_canonical_output(self, sample_vtt_content):
        """Test that rendering is stable once canonical."""
        once = serialize_vtt(parse_vtt(sample_vtt_content))

        assert serialize_vtt(parse_vtt(once)) == once

    def test_serialize_without_header(self):
        """Test a bare signature line."""
        subtitle = WebVttSubtitle([WebVttCue(Moment(0), Moment(1000), "Hi")])

        assert subtitle.render() == "WEBVTT\n\n00:00:00.000 --> 00:00:01.000\nHi\n"


class TestWebVttSubtitle:
    """Test cases for WebVTT document operations."""

    def test_strip_formatting(self, sample_vtt_content):
        """Test removing tags from every cue."""
        subtitle = WebVttSubtitle.from_str(sample_vtt_content)

        subtitle.strip_formatting()

        assert subtitle[0].text == "Hello, this is a test."

    def test_shift_and_events(self, sample_vtt_content):
        """Test that events are the cues and shifting moves them."""
        subtitle = WebVttSubtitle.from_str(sample_vtt_content)

        subtitle.shift(TimeDelta(1000))

        assert subtitle.events is subtitle.cues
        assert subtitle.event(1).start == Moment(6000)
        assert subtitle.event(2) is None


class TestWebVttConverters:
    """Test cases for WebVTT tag converters."""

    def test_to_ass_formatting(self):
        """Test bold, italic and underline become ASS overrides."""
        text = "<b>B</b><i>I</i><u>U</u><c.yellow>C</c>"

        assert to_ass_formatting(text) == (
            "{\\b1}B{\\b0}{\\i1}I{\\i0}{\\u1}U{\\u0}C"
        )

    def test_to_ssa_formatting_drops_underline(self):
        """Test that SSA output has no underline codes."""
        assert to_ssa_formatting("<u>U</u><b>B</b>") == "U{\\b1}B{\\b0}"

    def test_to_srt_formatting_keeps_basic_tags(self):
        """Test that voices and classes are removed."""
        text = "<v Roger><b>Hi</b> <c.loud>there</c></v>"

        assert to_srt_formatting(text) == "<b>Hi</b> there"
