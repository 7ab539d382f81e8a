"""
Process-wide settings.

Settings are read from the environment once at startup by `load_settings()`
and handed to the app (`app.state.settings`). Code that needs a value gets the
`Settings` object injected instead of reading `os.environ` itself.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_JWT_SECRET = "dev-change-this-secret"


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    database_url: str = ""
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 120
    bcrypt_rounds: int = 10
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = field(
        default=("http://localhost:5173", "http://127.0.0.1:5173"),
    )


def load_settings() -> Settings:
    defaults = Settings()
    return Settings(
        database_url=os.environ.get("DATABASE_URL", "").strip(),
        jwt_secret=_env_str("JWT_SECRET", defaults.jwt_secret),
        jwt_algorithm=_env_str("JWT_ALG", defaults.jwt_algorithm),
        access_token_expire_minutes=_env_int(
            "ACCESS_TOKEN_EXPIRE_MIN", defaults.access_token_expire_minutes
        ),
        bcrypt_rounds=_env_int("BCRYPT_ROUNDS", defaults.bcrypt_rounds),
        log_level=_env_str("LOG_LEVEL", defaults.log_level).upper(),
        cors_origins=_env_list("CORS_ORIGINS", defaults.cors_origins),
    )
