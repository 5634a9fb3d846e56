"""Error hierarchy for subtitle handling."""

from os import PathLike


class SubtitleError(Exception):
    """Base error for everything raised by polysub."""


class FormatUnknownError(SubtitleError):
    """Raised when the format of a subtitle source cannot be determined."""

    def __init__(self, source: str | PathLike[str] | None = None) -> None:
        self.source = source
        if source is None:
            message = "Unable to detect subtitle format"
        else:
            message = f"Unable to detect subtitle format of {source}"
        super().__init__(message)


class SubtitleIOError(SubtitleError):
    """Raised when reading or writing a subtitle file fails."""

    def __init__(self, path: str | PathLike[str], message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class UnsupportedConversionError(SubtitleError, ValueError):
    """Raised when a document cannot be converted to the requested format."""

    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target
        super().__init__(f"Cannot convert {source} subtitles to {target}")
