"""Constants and enums shared across subtitle formats."""

from enum import StrEnum


class SubtitleFormat(StrEnum):
    """Subtitle file formats understood by the library."""

    ASS = "ass"
    MICRODVD = "microdvd"
    SSA = "ssa"
    SUBRIP = "subrip"
    WEBVTT = "webvtt"


class SubStationEventKind(StrEnum):
    """Kinds of lines found in the [Events] section of ASS/SSA files."""

    DIALOGUE = "Dialogue"
    PICTURE = "Picture"
    SOUND = "Sound"
    MOVIE = "Movie"
    COMMAND = "Command"


FORMAT_EXTENSIONS: dict[str, SubtitleFormat] = {
    ".ass": SubtitleFormat.ASS,
    ".ssa": SubtitleFormat.SSA,
    ".srt": SubtitleFormat.SUBRIP,
    ".sub": SubtitleFormat.MICRODVD,
    ".vtt": SubtitleFormat.WEBVTT,
}

DEFAULT_FRAMERATE = 24.0
