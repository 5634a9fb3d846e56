"""Pytest configuration and shared fixtures."""

from collections.abc import Generator
from pathlib import Path

import pytest

from polysub.utils.config import get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the get_settings LRU cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def temp_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    yield tmp_path


@pytest.fixture
def sample_srt_content() -> str:
    """Return sample SRT content for testing."""
    return """1
00:00:01,000 --> 00:00:04,000
Hello, this is a test.

2
00:00:05,000 --> 00:00:08,000
This is the second subtitle.

3
00:00:09,000 --> 00:00:12,000
And this is the third one.
"""


@pytest.fixture
def sample_vtt_content() -> str:
    """Return sample WebVTT content with a style block and an identifier."""
    return """WEBVTT - Sample

STYLE
::cue { color: yellow }

00:01.000 --> 00:04.000
Hello, <b>this</b> is a test.

intro
00:00:05.000 --> 00:00:08.000 align:start
This is the second subtitle.
"""


@pytest.fixture
def sample_ass_content() -> str:
    """Return sample ASS content with styles, fonts and dialogue."""
    return """[Script Info]
; Script generated by hand
Title: Sample
ScriptType: v4.00+
WrapStyle: 0
PlayResX: 384

[V4+ Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding
Style: Default,Arial,20,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,-1,0,0,0,100,100,0,0,1,2,2,2,10,10,10,1

[Fonts]
fontname: chaucer.ttf
!3IJ

[Events]
Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
Dialogue: 0,0:00:01.00,0:00:04.00,Default,,0,0,0,,Hello, {\\i1}world{\\i0}!
Dialogue: 1,0:00:05.00,0:00:08.50,Default,Narrator,0,0,0,,Second\\Nline
Comment: 0,0:00:09.00,0:00:10.00,Default,,0,0,0,,not an event
"""


@pytest.fixture
def sample_ssa_content() -> str:
    """Return sample SSA content with a style and dialogue."""
    return """[Script Info]
Title: Sample
ScriptType: v4.00

[V4 Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, TertiaryColour, BackColour, Bold, Italic, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, AlphaLevel, Encoding
Style: Default,Tahoma,24,16777215,65535,65535,-2147483640,-1,0,1,1,2,2,30,30,10,0,0

[Events]
Format: Marked, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
Dialogue: Marked=0,0:00:01.00,0:00:04.00,Default,,0000,0000,0000,,Hello, {\\b1}world{\\b0}!
Dialogue: Marked=1,0:00:05.00,0:00:08.50,Default,,0000,0000,0000,,Second\\Nline
"""


@pytest.fixture
def sample_microdvd_content() -> str:
    """Return sample MicroDVD content."""
    return "{1}{450}One\n{460}{510}Two|lines\n"
