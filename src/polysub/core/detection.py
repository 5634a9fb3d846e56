"""Subtitle format detection from file names and content."""

from os import PathLike
from pathlib import Path

import structlog

from polysub.core.constants import FORMAT_EXTENSIONS, SubtitleFormat
from polysub.core.errors import FormatUnknownError
from polysub.formats.microdvd import LINE as MICRODVD_LINE
from polysub.formats.srt import RECORD_HEADER as SUBRIP_RECORD_HEADER
from polysub.formats.substation import SCRIPT_INFO_HEADING, detect_script_type
from polysub.formats.vtt import HEADER as WEBVTT_HEADER
from polysub.utils.config import get_settings
from polysub.utils.encoding import read_lines

logger = structlog.get_logger()


def detect_format_from_str(text: str) -> SubtitleFormat:
    """Detect the format from the first lines of a subtitle.

    Checks run in a fixed order: WebVTT signature, SubRip record header,
    SubStation ``[Script Info]`` heading (SSA when a ``ScriptType: v4.00``
    entry is present, ASS otherwise), then a MicroDVD line. CRLF line
    endings are accepted.

    Args:
        text: Start of the subtitle content

    Returns:
        Detected format

    Raises:
        FormatUnknownError: If no check matches
    """
    text = text.replace("\r\n", "\n")
    if WEBVTT_HEADER.match(text):
        return SubtitleFormat.WEBVTT
    if SUBRIP_RECORD_HEADER.match(text):
        return SubtitleFormat.SUBRIP
    if SCRIPT_INFO_HEADING.match(text):
        return detect_script_type(text) or SubtitleFormat.ASS
    if MICRODVD_LINE.match(text):
        return SubtitleFormat.MICRODVD
    raise FormatUnknownError()


def detect_format_by_extension(path: str | PathLike[str]) -> SubtitleFormat:
    """Detect the format from a file extension (case-insensitive).

    Raises:
        FormatUnknownError: If the extension is not a known subtitle extension
    """
    suffix = Path(path).suffix.lower()
    try:
        return FORMAT_EXTENSIONS[suffix]
    except KeyError as e:
        raise FormatUnknownError(path) from e


def detect_format_by_content(
    path: str | PathLike[str], encoding: str | None = None
) -> SubtitleFormat:
    """Detect the format by reading the first lines of a file.

    Args:
        path: File to inspect
        encoding: Encoding of the file; detected when None

    Returns:
        Detected format

    Raises:
        SubtitleIOError: If the file cannot be read
        FormatUnknownError: If the content matches no known format
    """
    limit = get_settings().detection_sample_lines + 1
    sample = "\n".join(read_lines(path, limit, encoding))
    try:
        return detect_format_from_str(sample)
    except FormatUnknownError as e:
        raise FormatUnknownError(path) from e


def detect_format(
    path: str | PathLike[str], encoding: str | None = None
) -> SubtitleFormat:
    """Detect the format of a file, by extension first and content second.

    Args:
        path: File to inspect
        encoding: Encoding used if the content has to be read

    Returns:
        Detected format

    Raises:
        SubtitleIOError: If the file has to be read and cannot be
        FormatUnknownError: If neither the extension nor the content is
            recognised
    """
    try:
        subtitle_format = detect_format_by_extension(path)
        method = "extension"
    except FormatUnknownError:
        subtitle_format = detect_format_by_content(path, encoding)
        method = "content"

    logger.info(
        "format_detected", path=str(path), format=str(subtitle_format), method=method
    )
    return subtitle_format
