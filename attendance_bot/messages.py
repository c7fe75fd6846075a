from __future__ import annotations

import json
import random
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path

_PLACEHOLDER = re.compile(r"%\{(\w+)\}")


@dataclass(frozen=True, slots=True)
class Messages:
    """Reply templates; each field holds one or more variants picked at random."""

    future: tuple[str, ...] = ("Sure. %{user} will arrive at %{from}.",)
    hi: tuple[str, ...] = ("Good morning! %{user} started working at %{from}-%{to} on %{date}.",)
    bye: tuple[str, ...] = ("Good bye! %{user} finished working at %{from}-%{to} on %{date}.",)
    delete: tuple[str, ...] = ("OK. %{user}'s working time on %{date} was deleted.",)
    before_list: tuple[str, ...] = ("OK. There is %{user}'s working time list on %{month}.",)
    before_csv: tuple[str, ...] = ("OK. There is %{user}'s working time list on %{month} with CSV format.",)
    after_list: tuple[str, ...] = ("%{list}",)
    none_list: tuple[str, ...] = ("The list of %{month} is nothing.",)
    error: tuple[str, ...] = ("Error occurred: %{message}",)


def render_template(template: str, **values: object) -> str:
    """Substitute ``%{name}`` placeholders; unknown names are left as-is."""

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in values:
            return match.group(0)
        value = values[name]
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(_substitute, template)


def pick(variants: tuple[str, ...], rng: random.Random | None = None) -> str:
    if not variants:
        raise ValueError("No template variants configured")
    return (rng or random).choice(variants)


def load_messages(path: str | Path) -> Messages:
    """Build templates from a JSON object overriding the defaults by field name."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Message file {path} must contain a JSON object")

    known = {item.name for item in fields(Messages)}
    overrides: dict[str, tuple[str, ...]] = {}
    for name, value in raw.items():
        if name not in known:
            raise ValueError(f"Unknown message template: {name}")
        variants = (value,) if isinstance(value, str) else tuple(value)
        if not variants or not all(isinstance(item, str) for item in variants):
            raise ValueError(f"Message template {name} must be a string or a list of strings")
        overrides[name] = variants

    return replace(Messages(), **overrides)
