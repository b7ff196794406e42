import logging
import os
from dotenv import load_dotenv

load_dotenv()

MAX_TIMEOUT_SECONDS: float = 10.0


def _timeout_seconds(raw: str | None) -> float:
    try:
        value = float(raw) if raw else MAX_TIMEOUT_SECONDS
    except ValueError:
        return MAX_TIMEOUT_SECONDS
    if value <= 0:
        return MAX_TIMEOUT_SECONDS
    return min(value, MAX_TIMEOUT_SECONDS)


def _log_level(raw: str | None) -> str:
    level = (raw or "WARNING").strip().upper()
    # getLevelName maps known names to their numeric level
    if isinstance(logging.getLevelName(level), int):
        return level
    return "WARNING"


class Settings:
    TIMEOUT_SECONDS: float = _timeout_seconds(os.getenv("STATUSCHECK_TIMEOUT_SECONDS"))
    LOG_LEVEL: str = _log_level(os.getenv("STATUSCHECK_LOG_LEVEL"))
    LOG_FILE: str | None = os.getenv("STATUSCHECK_LOG_FILE") or None


settings = Settings()
