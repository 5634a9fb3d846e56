"""Library configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from polysub.core.constants import DEFAULT_FRAMERATE


class Settings(BaseSettings):
    """Library settings loaded from environment variables.

    Attributes:
        default_framerate: Frame rate used to time MicroDVD subtitles
        detection_sample_lines: Lines read from a file when sniffing its format
        encoding_sample_lines: Lines fed to the encoding detector on the quick pass
        fallback_encoding: Encoding used when detection gives no usable answer
        log_level: Minimum level emitted once logging is configured
    """

    default_framerate: float = Field(default=DEFAULT_FRAMERATE, gt=0)
    detection_sample_lines: int = Field(default=30, ge=1)
    encoding_sample_lines: int = Field(default=30, ge=1)
    fallback_encoding: str = "utf-8"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="POLYSUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached library settings.

    Returns:
        Settings instance loaded from environment

    Note:
        Settings are cached for performance. Use get_settings.cache_clear()
        to reload settings in tests.
    """
    return Settings()
