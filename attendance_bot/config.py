from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .messages import Messages, load_messages

DEFAULT_DB_PATH = "attendance.db"


@dataclass(frozen=True, slots=True)
class Config:
    discord_token: str
    guild_id: int | None = None
    attendance_channel_id: int | None = None
    db_path: Path = Path(DEFAULT_DB_PATH)
    list_delay_seconds: float = 1.0
    messages: Messages = field(default_factory=Messages)


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if not value or not value.strip():
        raise ValueError(f"Missing required environment variable: {name}")
    return value.strip()


def _optional_int_env(name: str) -> int | None:
    value = os.getenv(name, "").strip()
    if not value:
        return None
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer") from exc

    if parsed <= 0:
        raise ValueError(f"Environment variable {name} must be positive")
    return parsed


def _delay_from_env(name: str, default: str) -> float:
    raw = os.getenv(name, default).strip()
    try:
        delay = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc

    if delay < 0:
        raise ValueError(f"{name} must not be negative")
    return delay


def _messages_from_env(name: str) -> Messages:
    path = os.getenv(name, "").strip()
    if not path:
        return Messages()
    try:
        return load_messages(path)
    except OSError as exc:
        raise ValueError(f"Cannot read message templates from {name}={path}") from exc


def load_config() -> Config:
    return Config(
        discord_token=_required_env("DISCORD_TOKEN"),
        guild_id=_optional_int_env("GUILD_ID"),
        attendance_channel_id=_optional_int_env("ATTENDANCE_CHANNEL_ID"),
        db_path=Path(os.getenv("ATTENDANCE_DB_PATH", DEFAULT_DB_PATH).strip() or DEFAULT_DB_PATH),
        list_delay_seconds=_delay_from_env("LIST_DELAY_SECONDS", "1"),
        messages=_messages_from_env("MESSAGES_PATH"),
    )
