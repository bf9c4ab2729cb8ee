"""Configuration settings for the media resolver."""
import os
from typing import Literal


EnvironmentType = Literal["development", "staging", "production"]

DEFAULT_BASE_URL = "https://api.tikhub.io"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    LOG_LEVEL: str = "INFO"

    # Upstream provider
    TIKHUB_API_KEY: str = ""
    TIKHUB_BASE_URL: str = DEFAULT_BASE_URL

    # Network policy
    ENDPOINT_TIMEOUT_SECONDS: float = 15.0
    SHORTLINK_TIMEOUT_SECONDS: float = 10.0
    SHORTLINK_MAX_REDIRECTS: int = 10

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Upstream provider
        self.TIKHUB_API_KEY = os.getenv("TIKHUB_API_KEY", "")
        self.TIKHUB_BASE_URL = os.getenv("TIKHUB_BASE_URL", DEFAULT_BASE_URL).rstrip("/")

        # Network policy
        self.ENDPOINT_TIMEOUT_SECONDS = _float_env("ENDPOINT_TIMEOUT_SECONDS", 15.0)
        self.SHORTLINK_TIMEOUT_SECONDS = _float_env("SHORTLINK_TIMEOUT_SECONDS", 10.0)
        self.SHORTLINK_MAX_REDIRECTS = _int_env("SHORTLINK_MAX_REDIRECTS", 10)


settings = Settings()
