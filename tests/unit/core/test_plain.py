"""Unit tests for plain subtitles."""

from polysub.core.plain import PlainEvent, PlainSubtitle
from polysub.core.timing import Moment, TimeDelta
from polysub.formats.ass import AssEvent, AssSubtitle
from polysub.formats.microdvd import TimedMicroDvdEvent, TimedMicroDvdSubtitle
from polysub.formats.srt import SubRipEvent, SubRipSubtitle


class TestPlainSubtitle:
    """Test cases for building plain subtitles."""

    def test_from_subrip_strips_tags(self):
        """Test that SubRip markup is removed."""
        subtitle = SubRipSubtitle(
            [SubRipEvent(4, Moment(0), Moment(1000), "<i>Hello</i>\nthere")]
        )

        plain = PlainSubtitle.from_subtitle(subtitle)

        assert plain.events == [PlainEvent(Moment(0), Moment(1000), "Hello\nthere")]

    def test_from_ass_translates_line_breaks_and_drawings(self):
        """Test that \\N becomes a newline and drawings disappear."""
        subtitle = AssSubtitle(
            dialogue=[
                AssEvent(Moment(0), Moment(1000), "{\\b1}One\\NTwo{\\p1}m 0 0{\\p0}")
            ]
        )

        plain = PlainSubtitle.from_subtitle(subtitle)

        assert plain[0].text == "One\nTwo"

    def test_from_timed_microdvd_translates_pipes(self):
        """Test that MicroDVD line separators become newlines."""
        subtitle = TimedMicroDvdSubtitle(
            [TimedMicroDvdEvent(Moment(42), Moment(18750), "One|Two")]
        )

        plain = PlainSubtitle.from_subtitle(subtitle)

        assert plain[0].text == "One\nTwo"
        assert plain[0].start == Moment(42)

    def test_plain_events_do_not_alias_source(self):
        """Test that editing the plain subtitle leaves the source intact."""
        subtitle = SubRipSubtitle([SubRipEvent(1, Moment(0), Moment(1000), "A")])
        plain = PlainSubtitle.from_subtitle(subtitle)

        plain.shift(TimeDelta(500))

        assert subtitle[0].start == Moment(0)
        assert plain[0].start == Moment(500)
        assert len(plain) == 1
        assert list(plain) == plain.events
