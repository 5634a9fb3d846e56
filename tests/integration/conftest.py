"""Pytest configuration and shared fixtures for integration tests."""

from pathlib import Path

import pytest

from polysub.core.timing import Moment
from polysub.formats.srt import SubRipEvent, SubRipSubtitle

# ---------------------------------------------------------------------------
# Environment fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def no_env_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Switch to a temporary directory with no .env file."""
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Subtitle fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_subrip_3_entries() -> SubRipSubtitle:
    """Return a SubRipSubtitle with 3 entries matching sample_srt_content."""
    return SubRipSubtitle(
        events=[
            SubRipEvent(
                line_number=1,
                start=Moment(1000),
                end=Moment(4000),
                text="Hello, this is a test.",
            ),
            SubRipEvent(
                line_number=2,
                start=Moment(5000),
                end=Moment(8000),
                text="This is the second subtitle.",
            ),
            SubRipEvent(
                line_number=3,
                start=Moment(9000),
                end=Moment(12000),
                text="And this is the third one.",
            ),
        ]
    )


@pytest.fixture
def chinese_srt_file(tmp_path: Path) -> Path:
    """Write a Traditional Chinese SubRip file encoded as Big5."""
    lines = [
        "你好，這是一個測試。",
        "這是第二個字幕。",
        "這是第三個。",
    ]
    records = [
        f"{n}\n00:00:0{2 * n},000 --> 00:00:0{2 * n + 1},000\n{text}\n"
        for n, text in enumerate(lines, start=1)
    ]
    path = tmp_path / "chinese.srt"
    path.write_bytes(("\n".join(records * 10)).encode("big5"))
    return path
