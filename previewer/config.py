import os
from dataclasses import dataclass

from .exceptions import ConfigurationError

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class AppConfig:
    # Text previews
    TEXT_MAX_LINES: int = 100
    TEXT_ENCODING: str = "utf-8-sig"

    # Image decoding
    IMAGE_WORKERS: int = 2
    DECODE_POLL_SECONDS: float = 0.05
    DECODE_TIMEOUT_SECONDS: float = 0.0  # 0 disables the timeout

    # Logging / misc
    VLOG: bool = False
    LOG_LEVEL: str = "INFO"

    def __post_init__(self):
        if self.TEXT_MAX_LINES < 1:
            raise ConfigurationError(f"TEXT_MAX_LINES must be positive, got {self.TEXT_MAX_LINES}")
        if self.IMAGE_WORKERS < 1:
            raise ConfigurationError(f"IMAGE_WORKERS must be positive, got {self.IMAGE_WORKERS}")
        if self.DECODE_POLL_SECONDS <= 0:
            raise ConfigurationError(f"DECODE_POLL_SECONDS must be positive, got {self.DECODE_POLL_SECONDS}")
        if self.DECODE_TIMEOUT_SECONDS < 0:
            raise ConfigurationError(f"DECODE_TIMEOUT_SECONDS cannot be negative, got {self.DECODE_TIMEOUT_SECONDS}")
        self.LOG_LEVEL = (self.LOG_LEVEL or "INFO").upper()
        if self.LOG_LEVEL not in _LOG_LEVELS:
            raise ConfigurationError(f"Unknown LOG_LEVEL: {self.LOG_LEVEL}")

    @property
    def effective_log_level(self) -> str:
        """Level handed to stdlib logging; VLOG and TRACE both mean DEBUG."""
        if self.VLOG or self.LOG_LEVEL == "TRACE":
            return "DEBUG"
        return self.LOG_LEVEL

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Create configuration from environment variables"""
        return cls(
            TEXT_MAX_LINES=int(os.getenv("TEXT_MAX_LINES", "100")),
            TEXT_ENCODING=os.getenv("TEXT_ENCODING", "utf-8-sig"),
            IMAGE_WORKERS=int(os.getenv("IMAGE_WORKERS", "2")),
            DECODE_POLL_SECONDS=float(os.getenv("DECODE_POLL_SECONDS", "0.05")),
            DECODE_TIMEOUT_SECONDS=float(os.getenv("DECODE_TIMEOUT_SECONDS", "0")),
            VLOG=os.getenv("VLOG", "").lower() in ("1", "true", "yes", "on"),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

# Global config instance
config = AppConfig.from_env()
