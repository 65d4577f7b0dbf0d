"""
Configuration - Environment settings and logging setup.

Environment:
    STRATEGO_ENV         deployment name (default: development)
    STRATEGO_LOG_LEVEL   root log level (default: INFO)
    ALLOWED_ORIGINS      comma-separated CORS origins (default: *)
    STRATEGO_HOST        bind address for `stratego serve`
    STRATEGO_PORT        bind port for `stratego serve`
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    log_level: str = "INFO"
    allowed_origins: tuple[str, ...] = ("*",)
    host: str = "127.0.0.1"
    port: int = 8080


def load_settings() -> Settings:
    """Read settings from the environment."""
    return Settings(
        env=os.getenv("STRATEGO_ENV", "development"),
        log_level=os.getenv("STRATEGO_LOG_LEVEL", "INFO").upper(),
        allowed_origins=tuple(
            origin.strip()
            for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
            if origin.strip()
        ),
        host=os.getenv("STRATEGO_HOST", "127.0.0.1"),
        port=int(os.getenv("STRATEGO_PORT", "8080")),
    )


def configure_logging(level: str | int = "INFO"):
    logging.basicConfig(level=level, format=LOG_FORMAT)
