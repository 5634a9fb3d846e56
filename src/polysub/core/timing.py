"""Millisecond timing primitives shared by every subtitle format."""

from __future__ import annotations

import math
from dataclasses import dataclass

_MS_PER_HOUR = 3_600_000
_MS_PER_MINUTE = 60_000
_MS_PER_SECOND = 1000


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def _trunc_mod(a: int, b: int) -> int:
    """Remainder matching _trunc_div (sign follows the dividend)."""
    return a - b * _trunc_div(a, b)


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


@dataclass(frozen=True, order=True)
class Moment:
    """Instant in milliseconds, relative to the start of the media."""

    millis: int = 0

    @classmethod
    def from_timestamp(cls, hours: int, minutes: int, seconds: int, millis: int) -> Moment:
        """Combine timestamp fields into a Moment.

        Fields are not validated: out-of-range or negative values are folded
        in arithmetically.

        Args:
            hours: Hour field
            minutes: Minute field
            seconds: Second field
            millis: Sub-second field already expressed in milliseconds

        Returns:
            Moment for the combined timestamp
        """
        return cls(
            hours * _MS_PER_HOUR
            + minutes * _MS_PER_MINUTE
            + seconds * _MS_PER_SECOND
            + millis
        )

    @property
    def hours(self) -> int:
        """Hour field when expressed as a timestamp (unbounded)."""
        return _trunc_div(self.millis, _MS_PER_HOUR)

    @property
    def minutes(self) -> int:
        """Minute field when expressed as a timestamp."""
        return _trunc_mod(_trunc_div(self.millis, _MS_PER_MINUTE), 60)

    @property
    def seconds(self) -> int:
        """Second field when expressed as a timestamp."""
        return _trunc_mod(_trunc_div(self.millis, _MS_PER_SECOND), 60)

    @property
    def milliseconds(self) -> int:
        """Millisecond field when expressed as a timestamp."""
        return _trunc_mod(self.millis, _MS_PER_SECOND)

    @property
    def centiseconds(self) -> int:
        """Centisecond field when expressed as a timestamp."""
        return _trunc_mod(_trunc_div(self.millis, 10), 100)

    def as_srt_timestamp(self) -> str:
        """Format as a SubRip timestamp (HH:MM:SS,mmm)."""
        return (
            f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d},"
            f"{self.milliseconds:03d}"
        )

    def as_vtt_timestamp(self) -> str:
        """Format as a WebVTT timestamp (HH:MM:SS.mmm)."""
        return (
            f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}."
            f"{self.milliseconds:03d}"
        )

    def as_substation_timestamp(self) -> str:
        """Format as a SubStation timestamp (H:MM:SS.cc)."""
        return (
            f"{self.hours:d}:{self.minutes:02d}:{self.seconds:02d}."
            f"{self.centiseconds:02d}"
        )

    def __int__(self) -> int:
        return self.millis

    def __add__(self, other: object) -> Moment:
        if isinstance(other, TimeDelta):
            return Moment(self.millis + other.millis)
        return NotImplemented

    def __sub__(self, other: object) -> Moment | TimeDelta:
        if isinstance(other, Moment):
            return TimeDelta(self.millis - other.millis)
        if isinstance(other, TimeDelta):
            return Moment(self.millis - other.millis)
        return NotImplemented

    def __mul__(self, other: object) -> Moment:
        if isinstance(other, int):
            return Moment(self.millis * other)
        return NotImplemented

    def __floordiv__(self, other: object) -> Moment:
        if isinstance(other, int):
            return Moment(_trunc_div(self.millis, other))
        return NotImplemented


@dataclass(frozen=True, order=True)
class TimeDelta:
    """Signed difference between two moments, in milliseconds."""

    millis: int = 0

    def __int__(self) -> int:
        return self.millis

    def __neg__(self) -> TimeDelta:
        return TimeDelta(-self.millis)

    def __add__(self, other: object) -> TimeDelta | Moment:
        if isinstance(other, TimeDelta):
            return TimeDelta(self.millis + other.millis)
        if isinstance(other, Moment):
            return Moment(self.millis + other.millis)
        return NotImplemented

    def __sub__(self, other: object) -> TimeDelta:
        if isinstance(other, TimeDelta):
            return TimeDelta(self.millis - other.millis)
        return NotImplemented

    def __mul__(self, other: object) -> TimeDelta:
        if isinstance(other, int):
            return TimeDelta(self.millis * other)
        return NotImplemented

    __rmul__ = __mul__

    def __floordiv__(self, other: object) -> TimeDelta:
        if isinstance(other, int):
            return TimeDelta(_trunc_div(self.millis, other))
        return NotImplemented


@dataclass(frozen=True, order=True)
class Frame:
    """Frame index of a video, used by MicroDVD subtitles."""

    index: int = 0

    def __int__(self) -> int:
        return self.index

    def __str__(self) -> str:
        return str(self.index)


def moment_to_frame(moment: Moment, framerate: float) -> Frame:
    """Convert a moment to the nearest frame at the given framerate."""
    return Frame(_round_half_away(moment.millis * framerate / 1000.0))


def frame_to_moment(frame: Frame, framerate: float) -> Moment:
    """Convert a frame index to the nearest millisecond at the given framerate."""
    return Moment(_round_half_away(frame.index * 1000 / framerate))


def rescale_moment(moment: Moment, ratio: float) -> Moment:
    """Scale a moment by a ratio, rounding to the nearest millisecond."""
    return Moment(_round_half_away(moment.millis * ratio))
