"""
Single place to:
- Load env vars from .env if present (dev convenience)
- Turn them into a Settings object the console and API share

Command-line flags in the console override what comes from here.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

_TRUTHY = ("1", "true", "yes", "on")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUTHY


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}.")


@dataclass(frozen=True)
class Settings:
    app_env: str = "local"
    use_random_org: bool = True
    random_timeout: float = 3.0
    # pause between turns so the next player does not see the last feedback
    turn_pause: float = 5.0
    require_final_guess: bool = False
    log_level: str = "WARNING"


def load_settings() -> Settings:
    return Settings(
        app_env=os.getenv("APP_ENV", "local"),
        use_random_org=_env_bool("CODEGUESS_USE_RANDOM_ORG", True),
        random_timeout=_env_float("CODEGUESS_RANDOM_TIMEOUT", 3.0),
        turn_pause=_env_float("CODEGUESS_TURN_PAUSE", 5.0),
        require_final_guess=_env_bool("CODEGUESS_REQUIRE_FINAL_GUESS", False),
        log_level=os.getenv("CODEGUESS_LOG_LEVEL", "WARNING").upper(),
    )
