"""Utility modules."""

from polysub.utils.config import Settings, get_settings
from polysub.utils.encoding import (
    detect_file_encoding,
    read_lines,
    read_text,
    write_text,
)
from polysub.utils.logging import setup_logging

__all__ = [
    "Settings",
    "detect_file_encoding",
    "get_settings",
    "read_lines",
    "read_text",
    "setup_logging",
    "write_text",
]
