# quizwheel/config/settings.py
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./quizwheel.db"

DEFAULT_ALLOWED_ORIGINS = (
    "http://localhost:5500",
    "http://127.0.0.1:5500",
    "http://localhost:8000",
)


def _to_int(value: str, key_name: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise RuntimeError(f"Invalid integer for {key_name}: {value!r}") from e


def _positive_int(env: dict[str, str], key: str, default: int) -> int:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    value = _to_int(raw, key)
    if value <= 0:
        raise RuntimeError(f"{key} must be positive, got {value}")
    return value


def _to_bool(raw: str | None, key_name: str, default: bool = False) -> bool:
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"Invalid boolean for {key_name}: {raw!r}")


def _parse_str_list(raw: str | None) -> list[str]:
    """
    Parses comma/space/newline separated strings.
    Accepts:
      "http://a.example"
      "http://a.example,http://b.example"
      "http://a.example http://b.example"
      "[http://a.example, http://b.example]"  (brackets ignored)
    """
    if not raw:
        return []

    cleaned = raw.strip().strip("[](){}").strip()
    if not cleaned:
        return []

    out: list[str] = []
    for p in re.split(r"[,\s]+", cleaned):
        p2 = p.strip().strip("'\"").rstrip("/")
        if p2:
            out.append(p2)
    return out


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL

    # --- http ---
    host: str = "0.0.0.0"
    port: int = 3000
    allowed_origins: tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS

    # --- throttling ---
    rate_limit_window_seconds: int = 60
    rate_limit_max_requests: int = 20
    # only honour X-Forwarded-For behind a trusted reverse proxy
    trust_proxy: bool = False

    # --- wheel ---
    # win iff a uniform draw over [0, odds) lands on 0
    wheel_win_odds: int = 50

    # --- export guard (None = open) ---
    export_token: Optional[str] = None

    # --- calendar ---
    timezone: str = "UTC"

    # --- environment ---
    environment: str = "production"  # production | development

    @property
    def is_dev(self) -> bool:
        return self.environment.lower() in {"dev", "development", "local"}

    @classmethod
    def load(cls) -> "Settings":
        """
        Loads from process env (and .env if present).
        Fails fast on malformed values.
        """
        load_dotenv()
        env = os.environ

        database_url = (env.get("DATABASE_URL") or DEFAULT_DATABASE_URL).strip()

        host = (env.get("HOST") or "0.0.0.0").strip() or "0.0.0.0"
        port = _positive_int(env, "PORT", 3000)

        origins = tuple(_parse_str_list(env.get("ALLOWED_ORIGINS"))) or DEFAULT_ALLOWED_ORIGINS

        timezone = (env.get("TIMEZONE") or "UTC").strip() or "UTC"
        try:
            ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise RuntimeError(f"Unknown TIMEZONE: {timezone!r}") from e

        export_token = (env.get("EXPORT_TOKEN") or "").strip() or None
        environment = (env.get("ENVIRONMENT") or "production").strip() or "production"

        return cls(
            database_url=database_url,
            host=host,
            port=port,
            allowed_origins=origins,
            rate_limit_window_seconds=_positive_int(env, "RATE_LIMIT_WINDOW_SECONDS", 60),
            rate_limit_max_requests=_positive_int(env, "RATE_LIMIT_MAX_REQUESTS", 20),
            trust_proxy=_to_bool(env.get("TRUST_PROXY"), "TRUST_PROXY"),
            wheel_win_odds=_positive_int(env, "WHEEL_WIN_ODDS", 50),
            export_token=export_token,
            timezone=timezone,
            environment=environment,
        )
