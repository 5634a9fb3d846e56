"""Format-agnostic handle on a timed subtitle document."""

from collections.abc import Callable
from dataclasses import dataclass
from os import PathLike

import structlog

from polysub.core.constants import SubtitleFormat
from polysub.core.convert import TimedSubtitle, convert, source_format
from polysub.core.detection import detect_format_by_extension, detect_format_from_str
from polysub.core.errors import FormatUnknownError
from polysub.formats.ass import AssSubtitle
from polysub.formats.microdvd import TimedMicroDvdSubtitle
from polysub.formats.srt import SubRipSubtitle
from polysub.formats.ssa import SsaSubtitle
from polysub.formats.vtt import WebVttSubtitle
from polysub.utils.config import get_settings
from polysub.utils.encoding import read_text

logger = structlog.get_logger()

_PARSERS: dict[SubtitleFormat, Callable[[str], TimedSubtitle]] = {
    SubtitleFormat.ASS: AssSubtitle.from_str,
    SubtitleFormat.MICRODVD: TimedMicroDvdSubtitle.from_str,
    SubtitleFormat.SSA: SsaSubtitle.from_str,
    SubtitleFormat.SUBRIP: SubRipSubtitle.from_str,
    SubtitleFormat.WEBVTT: WebVttSubtitle.from_str,
}


def _sample(text: str) -> str:
    limit = get_settings().detection_sample_lines + 1
    return "\n".join(text.splitlines()[:limit])


@dataclass
class TimedSubtitleFile:
    """One timed subtitle document of any supported format.

    MicroDVD files are loaded as :class:`TimedMicroDvdSubtitle` using the
    configured default frame rate.
    """

    subtitle: TimedSubtitle

    @property
    def format(self) -> SubtitleFormat:
        """Format of the wrapped document."""
        subtitle_format = source_format(self.subtitle)
        if subtitle_format is None:
            raise TypeError(
                f"Unsupported document type: {type(self.subtitle).__name__}"
            )
        return subtitle_format

    @classmethod
    def from_str(
        cls, text: str, subtitle_format: SubtitleFormat | str | None = None
    ) -> "TimedSubtitleFile":
        """Parse subtitle text, detecting its format when none is given.

        Args:
            text: Decoded subtitle content
            subtitle_format: Format of the content, or None to detect it

        Returns:
            TimedSubtitleFile wrapping the parsed document

        Raises:
            FormatUnknownError: If the format has to be detected and cannot be
        """
        if subtitle_format is None:
            subtitle_format = detect_format_from_str(_sample(text))
        return cls(_PARSERS[SubtitleFormat(subtitle_format)](text))

    @classmethod
    def load(
        cls, path: str | PathLike[str], encoding: str | None = None
    ) -> "TimedSubtitleFile":
        """Read a subtitle file, detecting its format.

        The extension is checked first; the content is inspected only when
        the extension is not a known subtitle extension.

        Args:
            path: File to read
            encoding: File encoding, or None to detect it

        Returns:
            TimedSubtitleFile wrapping the parsed document

        Raises:
            SubtitleIOError: If the file cannot be read
            FormatUnknownError: If the format cannot be determined
        """
        text = read_text(path, encoding)
        try:
            subtitle_format = detect_format_by_extension(path)
        except FormatUnknownError:
            try:
                subtitle_format = detect_format_from_str(_sample(text))
            except FormatUnknownError as e:
                raise FormatUnknownError(path) from e

        subtitle = cls.from_str(text, subtitle_format)
        logger.info(
            "subtitle_loaded",
            path=str(path),
            format=str(subtitle_format),
            events=len(subtitle.subtitle),
        )
        return subtitle

    @classmethod
    def with_format(
        cls,
        path: str | PathLike[str],
        subtitle_format: SubtitleFormat | str,
        encoding: str | None = None,
    ) -> "TimedSubtitleFile":
        """Read a subtitle file as the given format, skipping detection."""
        return cls.from_str(read_text(path, encoding), subtitle_format)

    def as_format(self, subtitle_format: SubtitleFormat | str) -> TimedSubtitle:
        """Return the document converted to another format (a copy if unchanged)."""
        return convert(self.subtitle, subtitle_format)

    def to_subrip(self) -> SubRipSubtitle:
        """Return the document as SubRip."""
        return convert(self.subtitle, SubtitleFormat.SUBRIP)

    def to_webvtt(self) -> WebVttSubtitle:
        """Return the document as WebVTT."""
        return convert(self.subtitle, SubtitleFormat.WEBVTT)

    def to_ass(self) -> AssSubtitle:
        """Return the document as ASS."""
        return convert(self.subtitle, SubtitleFormat.ASS)

    def to_ssa(self) -> SsaSubtitle:
        """Return the document as SSA."""
        return convert(self.subtitle, SubtitleFormat.SSA)

    def to_microdvd(self) -> TimedMicroDvdSubtitle:
        """Return the document as timed MicroDVD."""
        return convert(self.subtitle, SubtitleFormat.MICRODVD)

    def render(self) -> str:
        """Serialize the wrapped document in its own format."""
        return self.subtitle.render()

    def export(self, path: str | PathLike[str]) -> None:
        """Write the wrapped document to path as UTF-8."""
        self.subtitle.export(path)

    def __str__(self) -> str:
        return self.render()
