"""Unit tests for SSA parser, serializer and tag converters."""

from structlog.testing import capture_logs

from polysub.core.timing import Moment
from polysub.formats.ssa import (
    SsaEvent,
    SsaScriptInfo,
    SsaStyle,
    SsaSubtitle,
    parse_ssa,
    serialize_ssa,
    to_ass_formatting,
    to_srt_formatting,
    to_vtt_formatting,
)


class TestParseSSA:
    """Test cases for SSA parsing."""

    def test_parse_script_info(self, sample_ssa_content):
        """Test the script type of an SSA file."""
        result = parse_ssa(sample_ssa_content)

        assert result.script_info.title == "Sample"
        assert result.script_info.script_type == "v4.00"

    def test_parse_style(self, sample_ssa_content):
        """Test that the eighteen style fields are typed."""
        style = parse_ssa(sample_ssa_content).styles[0]

        assert style.name == "Default"
        assert style.fontname == "Tahoma"
        assert style.fontsize == 24
        assert style.tertiary_colour == "65535"
        assert style.back_colour == "-2147483640"
        assert style.bold is True
        assert style.italic is False
        assert style.margin_l == 30
        assert style.alpha_level == 0

    def test_parse_marked_dialogue(self, sample_ssa_content):
        """Test that the Marked field becomes a flag."""
        result = parse_ssa(sample_ssa_content)

        assert len(result) == 2
        assert result[0].marked is False
        assert result[1].marked is True
        assert result[1].end == Moment(8500)
        assert result[0].text == "Hello, {\\b1}world{\\b0}!"

    def test_parse_zero_padded_margins(self, sample_ssa_content):
        """Test that margins written as 0000 are read as numbers."""
        event = parse_ssa(sample_ssa_content)[0]

        assert event.margin_l == 0
        assert event.margin_v == 0

    def test_layer_lines_are_not_ssa_events(self):
        """Test that ASS style event lines are skipped."""
        content = """[Events]
Dialogue: 0,0:00:00.00,0:00:01.00,,,0,0,0,,Layered
Dialogue: Marked=0,0:00:00.00,0:00:01.00,,,0,0,0,,Marked
"""
        result = parse_ssa(content)

        assert [event.text for event in result] == ["Marked"]

    def test_format_line_is_not_a_skipped_line(self, sample_ssa_content):
        """Test that a clean file logs no skipped event lines."""
        with capture_logs() as logs:
            parse_ssa(sample_ssa_content)

        parsed = [entry for entry in logs if entry["event"] == "ssa_parsed"]
        assert parsed[0]["skipped_event_lines"] == 0
        assert parsed[0]["dialogue"] == 2


class TestSerializeSSA:
    """Test cases for SSA serialization."""

    def test_serialize_layout(self, sample_ssa_content):
        """Test that the V4 styles header and Marked field are written."""
        result = serialize_ssa(parse_ssa(sample_ssa_content))

        assert "\n\n[V4 Styles]\n" in result
        assert result.endswith(
            "Dialogue: Marked=0,0:00:01.00,0:00:04.00,Default,,0,0,0,,"
            "Hello, {\\b1}world{\\b0}!\n"
            "Dialogue: Marked=1,0:00:05.00,0:00:08.50,Default,,0,0,0,,"
            "Second\\Nline\n"
        )

    def test_style_line_round_trip(self):
        """Test that a parsed style renders back to the same line."""
        line = (
            "Style: Default,Tahoma,24,16777215,65535,65535,-2147483640,"
            "-1,0,1,1,2,2,30,30,10,0,0"
        )

        assert SsaStyle.parse(line).render() == line

    def test_rendering_is_stable(self, sample_ssa_content):
        """Test that parsing rendered output gives the same text."""
        once = serialize_ssa(parse_ssa(sample_ssa_content))

        assert serialize_ssa(parse_ssa(once)) == once

    def test_serialize_empty_document(self):
        """Test the default script type of a new document."""
        result = SsaSubtitle().render()

        assert result.startswith("[Script Info]\nScriptType: v4.00\n\n[Events]\n")


class TestSsaSubtitle:
    """Test cases for SSA document operations."""

    def test_default_script_info(self):
        """Test the script info written for new documents."""
        assert SsaScriptInfo.default().script_type == "v4.00"

    def test_strip_formatting(self, sample_ssa_content):
        """Test that stripping removes overrides and styles."""
        subtitle = SsaSubtitle.from_str(sample_ssa_content)

        subtitle.strip_formatting()

        assert subtitle[0].text == "Hello, world!"
        assert subtitle.styles == []

    def test_as_plaintext(self):
        """Test that hard line breaks become newlines."""
        event = SsaEvent(Moment(0), Moment(1000), "{\\b1}One{\\b0}\\NTwo")

        assert event.unformatted_text() == "One\\NTwo"
        assert event.as_plaintext() == "One\nTwo"


class TestSsaConverters:
    """Test cases for SSA tag converters."""

    def test_to_srt_formatting(self):
        """Test bold, italic and colour become HTML tags."""
        text = "{\\b1}B{\\b0}{\\c&H0000FF&}R{\\fs20}"

        assert to_srt_formatting(text) == '<b>B</b><font color="#FF0000">R'

    def test_to_vtt_formatting(self):
        """Test that only bold and italic survive."""
        assert to_vtt_formatting("{\\i1}I{\\i0}{\\c&H0000FF&}R") == "<i>I</i>R"

    def test_to_ass_formatting_is_identity(self):
        """Test that SSA overrides are valid ASS."""
        assert to_ass_formatting("{\\b1}x{\\b0}") == "{\\b1}x{\\b0}"
