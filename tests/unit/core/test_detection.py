"""Unit tests for subtitle format detection."""

import pytest

from polysub.core.constants import SubtitleFormat
from polysub.core.detection import (
    detect_format,
    detect_format_by_content,
    detect_format_by_extension,
    detect_format_from_str,
)
from polysub.core.errors import FormatUnknownError, SubtitleIOError


class TestDetectFormatFromStr:
    """Test cases for content based detection."""

    def test_webvtt_signature(self):
        """Test that a WEBVTT first line is WebVTT."""
        assert detect_format_from_str("WEBVTT") == SubtitleFormat.WEBVTT
        bom_text = "\ufeffWEBVTT - Title\n"

        assert detect_format_from_str(bom_text) == SubtitleFormat.WEBVTT

    def test_subrip_record(self, sample_srt_content):
        """Test that a numbered record is SubRip."""
        assert detect_format_from_str(sample_srt_content) == SubtitleFormat.SUBRIP

    def test_subrip_record_with_crlf_line_endings(self):
        """Test that Windows line endings do not hide a SubRip record."""
        text = "1\r\n00:00:01,000 --> 00:00:02,000\r\nHi\r\n"

        assert detect_format_from_str(text) == SubtitleFormat.SUBRIP

    def test_script_info_with_ass_script_type(self):
        """Test that ScriptType v4.00+ means ASS."""
        text = "[Script Info]\nScriptType: v4.00+"

        assert detect_format_from_str(text) == SubtitleFormat.ASS

    def test_script_info_with_ssa_script_type(self):
        """Test that ScriptType v4.00 means SSA."""
        text = "[Script Info]\nScriptType: v4.00 "

        assert detect_format_from_str(text) == SubtitleFormat.SSA

    def test_script_info_without_script_type_is_ass(self):
        """Test the default for SubStation files without a ScriptType."""
        assert detect_format_from_str("[Script Info]\nTitle: x") == SubtitleFormat.ASS

    def test_microdvd_line(self):
        """Test that a frame pair line is MicroDVD."""
        assert detect_format_from_str("{0}{120}Help|me") == SubtitleFormat.MICRODVD

    def test_unknown_content(self):
        """Test that unrecognised text raises FormatUnknownError."""
        with pytest.raises(FormatUnknownError, match="Unable to detect"):
            detect_format_from_str("Just some prose.")


class TestDetectFormatByExtension:
    """Test cases for extension based detection."""

    def test_known_extensions(self):
        """Test every supported extension."""
        assert detect_format_by_extension("a.srt") == SubtitleFormat.SUBRIP
        assert detect_format_by_extension("a.vtt") == SubtitleFormat.WEBVTT
        assert detect_format_by_extension("a.ass") == SubtitleFormat.ASS
        assert detect_format_by_extension("a.ssa") == SubtitleFormat.SSA
        assert detect_format_by_extension("a.sub") == SubtitleFormat.MICRODVD

    def test_extension_is_case_insensitive(self):
        """Test upper case extensions."""
        assert detect_format_by_extension("MOVIE.SRT") == SubtitleFormat.SUBRIP

    def test_unknown_extension(self):
        """Test that other extensions raise with the path in the message."""
        with pytest.raises(FormatUnknownError, match="notes.txt"):
            detect_format_by_extension("notes.txt")


class TestDetectFormatByContent:
    """Test cases for detection from file content."""

    def test_detect_from_file(self, tmp_path, sample_vtt_content):
        """Test sniffing a file whose extension says nothing."""
        path = tmp_path / "captions.txt"
        path.write_text(sample_vtt_content, encoding="utf-8")

        assert detect_format_by_content(path) == SubtitleFormat.WEBVTT

    def test_unknown_content_names_the_file(self, tmp_path):
        """Test that the error carries the path."""
        path = tmp_path / "prose.txt"
        path.write_text("Nothing to see here.\n", encoding="utf-8")

        with pytest.raises(FormatUnknownError) as exc_info:
            detect_format_by_content(path)

        assert exc_info.value.source == path

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises SubtitleIOError."""
        with pytest.raises(SubtitleIOError):
            detect_format_by_content(tmp_path / "missing.txt")


class TestDetectFormat:
    """Test cases for the combined detection."""

    def test_extension_wins_over_content(self, tmp_path, sample_vtt_content):
        """Test that the content is not read when the extension is known."""
        path = tmp_path / "mislabelled.srt"
        path.write_text(sample_vtt_content, encoding="utf-8")

        assert detect_format(path) == SubtitleFormat.SUBRIP

    def test_falls_back_to_content(self, tmp_path, sample_ass_content):
        """Test that unknown extensions trigger content sniffing."""
        path = tmp_path / "script.txt"
        path.write_text(sample_ass_content, encoding="utf-8")

        assert detect_format(path) == SubtitleFormat.ASS
