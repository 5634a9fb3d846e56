"""Decoded-text source: encoding sniffing and reading of subtitle files."""

import codecs
from os import PathLike
from pathlib import Path

import chardet
import structlog

from polysub.core.errors import SubtitleIOError
from polysub.utils.config import get_settings

logger = structlog.get_logger()


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise SubtitleIOError(path, f"cannot read file ({e.strerror or e})") from e


def _guess_encoding(data: bytes, line_limit: int | None) -> str | None:
    """Feed lines to chardet, stopping early once it is confident."""
    detector = chardet.UniversalDetector()
    for count, line in enumerate(data.splitlines(keepends=True), start=1):
        detector.feed(line)
        if detector.done or (line_limit is not None and count >= line_limit):
            break
    detector.close()
    return detector.result.get("encoding")


def _normalize_encoding(encoding: str, data: bytes) -> str:
    """Map chardet answers onto codecs that decode BOM-prefixed data cleanly."""
    name = codecs.lookup(encoding).name
    if name == "ascii":
        return "utf-8"
    if name == "utf-8" and data.startswith(codecs.BOM_UTF8):
        return "utf-8-sig"
    return name


def _decode(data: bytes, encoding: str) -> str | None:
    try:
        return data.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        return None


def detect_file_encoding(
    path: str | PathLike[str], line_limit: int | None = None
) -> str | None:
    """Guess the character encoding of a file.

    Args:
        path: File to inspect
        line_limit: Maximum number of lines fed to the detector, or None to
            use the whole file

    Returns:
        Codec name, or None if chardet has no answer

    Raises:
        SubtitleIOError: If the file cannot be read
    """
    path = Path(path)
    data = _read_bytes(path)
    encoding = _guess_encoding(data, line_limit)
    if encoding is None:
        return None
    try:
        return _normalize_encoding(encoding, data)
    except LookupError:
        return None


def read_text(path: str | PathLike[str], encoding: str | None = None) -> str:
    """Read a subtitle file into a string.

    When no encoding is given, a quick guess over the first lines is tried
    first, then a guess over the whole file, then the configured fallback
    encoding with undecodable bytes replaced. A leading byte order mark is
    removed.

    Args:
        path: File to read
        encoding: Explicit encoding, skipping detection

    Returns:
        Decoded file content

    Raises:
        SubtitleIOError: If the file cannot be read or the explicit encoding
            cannot decode it
    """
    path = Path(path)
    data = _read_bytes(path)

    if encoding is not None:
        try:
            text = data.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise SubtitleIOError(path, f"cannot decode as {encoding} ({e})") from e
        return text.removeprefix("\ufeff")

    settings = get_settings()
    for line_limit in (settings.encoding_sample_lines, None):
        guess = _guess_encoding(data, line_limit)
        if guess is None:
            continue
        try:
            guess = _normalize_encoding(guess, data)
        except LookupError:
            continue
        text = _decode(data, guess)
        if text is not None:
            logger.debug("encoding_detected", path=str(path), encoding=guess)
            return text.removeprefix("\ufeff")

    logger.warning(
        "encoding_fallback", path=str(path), encoding=settings.fallback_encoding
    )
    text = data.decode(settings.fallback_encoding, errors="replace")
    return text.removeprefix("\ufeff")


def read_lines(
    path: str | PathLike[str], limit: int, encoding: str | None = None
) -> list[str]:
    """Read at most ``limit`` decoded lines from the start of a file."""
    return read_text(path, encoding).splitlines()[:limit]


def write_text(path: str | PathLike[str], text: str) -> None:
    """Write rendered subtitle text as UTF-8.

    Raises:
        SubtitleIOError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.write_text(text, encoding="utf-8", newline="")
    except OSError as e:
        raise SubtitleIOError(path, f"cannot write file ({e.strerror or e})") from e
    logger.info("subtitle_exported", path=str(path), size=len(text))
