"""Integration tests for load -> convert -> export across formats."""

import pytest

from polysub.core.constants import SubtitleFormat
from polysub.core.convert import convert
from polysub.core.files import TimedSubtitleFile
from polysub.core.plain import PlainSubtitle
from polysub.core.timing import Moment
from polysub.formats.microdvd import TimedMicroDvdSubtitle

pytestmark = pytest.mark.integration


class TestRoundTrips:
    """Documents converted through other formats keep timing and text."""

    def test_srt_through_ass_and_back(self, tmp_path, sample_subrip_3_entries):
        """SubRip -> ASS file -> SubRip keeps every record."""
        ass_path = tmp_path / "movie.ass"
        TimedSubtitleFile(sample_subrip_3_entries).to_ass().export(ass_path)

        result = TimedSubtitleFile.load(ass_path).to_subrip()

        assert result == sample_subrip_3_entries

    def test_srt_through_every_format(self, tmp_path, sample_subrip_3_entries):
        """SubRip -> WebVTT -> SSA -> ASS -> SubRip keeps text and times."""
        current = sample_subrip_3_entries
        for subtitle_format, name in (
            (SubtitleFormat.WEBVTT, "step.vtt"),
            (SubtitleFormat.SSA, "step.ssa"),
            (SubtitleFormat.ASS, "step.ass"),
        ):
            path = tmp_path / name
            convert(current, subtitle_format).export(path)
            current = TimedSubtitleFile.load(path).subtitle

        result = convert(current, SubtitleFormat.SUBRIP)

        assert [event.text for event in result] == [
            event.text for event in sample_subrip_3_entries
        ]
        assert [event.end for event in result] == [
            Moment(4000),
            Moment(8000),
            Moment(12000),
        ]

    def test_ass_to_vtt_file(self, tmp_path, sample_ass_content):
        """ASS formatting reaches a WebVTT file as HTML tags."""
        source = tmp_path / "input.ass"
        source.write_text(sample_ass_content, encoding="utf-8")
        target = tmp_path / "output.vtt"

        TimedSubtitleFile.load(source).to_webvtt().export(target)
        result = TimedSubtitleFile.load(target)

        assert result.format == SubtitleFormat.WEBVTT
        assert result.subtitle.header == "Sample"
        assert result.subtitle[0].text == "Hello, <i>world</i>!"
        assert result.subtitle[1].text == "Second\nline"

    def test_microdvd_with_configured_framerate(
        self, tmp_path, monkeypatch, no_env_file
    ):
        """MicroDVD frames are timed with the configured frame rate."""
        monkeypatch.setenv("POLYSUB_DEFAULT_FRAMERATE", "25")
        source = tmp_path / "movie.sub"
        source.write_text("{25}{50}One|Two\n", encoding="utf-8")

        result = TimedSubtitleFile.load(source).to_subrip()

        assert result[0].start == Moment(1000)
        assert result[0].end == Moment(2000)
        assert result.render() == "1\n00:00:01,000 --> 00:00:02,000\nOne\nTwo\n"

    def test_microdvd_retimed_before_export(self, tmp_path):
        """Updating the frame rate keeps frame numbers in the written file."""
        source = tmp_path / "movie.sub"
        source.write_text("{1}{450}One\n", encoding="utf-8")
        subtitle = TimedMicroDvdSubtitle.load(source, framerate=24.0)

        subtitle.update_framerate(25.0)
        subtitle.export(tmp_path / "retimed.sub")

        assert subtitle[0].start == Moment(40)
        assert subtitle[0].end == Moment(18000)
        assert (tmp_path / "retimed.sub").read_text(encoding="utf-8") == (
            "{1}{450}One\n"
        )

    def test_plain_text_from_loaded_file(self, tmp_path, sample_ass_content):
        """Plain events extracted from ASS build a clean SubRip file."""
        source = tmp_path / "input.ass"
        source.write_text(sample_ass_content, encoding="utf-8")

        plain = PlainSubtitle.from_subtitle(TimedSubtitleFile.load(source).subtitle)
        result = convert(plain, SubtitleFormat.SUBRIP)

        assert [event.text for event in result] == ["Hello, world!", "Second\nline"]

    def test_legacy_encoded_file(self, tmp_path, chinese_srt_file):
        """A Big5 file is decoded and re-exported as UTF-8."""
        target = tmp_path / "chinese.vtt"

        TimedSubtitleFile.load(chinese_srt_file).to_webvtt().export(target)
        result = TimedSubtitleFile.load(target, encoding="utf-8")

        assert len(result.subtitle) == 30
        assert result.subtitle[0].text == "你好，這是一個測試。"
        assert result.subtitle[0].identifier == "1"
