from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from .models import Direction


@dataclass(frozen=True, slots=True)
class CommandRequest:
    direction: Direction
    user: str | None = None
    date_text: str | None = None
    from_text: str | None = None
    to_text: str | None = None
    month_text: str | None = None


@dataclass(frozen=True, slots=True)
class Rule:
    pattern: re.Pattern[str]
    extract: Callable[[re.Match[str]], CommandRequest]


def _user(match: re.Match[str]) -> str | None:
    raw = match.group("user")
    if not raw:
        return None
    return raw.removeprefix("@") or None


def _clock(direction: Direction) -> Callable[[re.Match[str]], CommandRequest]:
    def extract(match: re.Match[str]) -> CommandRequest:
        return CommandRequest(
            direction=direction,
            user=_user(match),
            date_text=match.group("date"),
            from_text=match.group("from"),
            to_text=match.group("to"),
        )

    return extract


def _listing(direction: Direction) -> Callable[[re.Match[str]], CommandRequest]:
    def extract(match: re.Match[str]) -> CommandRequest:
        return CommandRequest(direction=direction, user=_user(match), month_text=match.group("month"))

    return extract


def _delete(match: re.Match[str]) -> CommandRequest:
    return CommandRequest(direction=Direction.DELETE, user=_user(match), date_text=match.group("date"))


_USER = r"(?: -u (?P<user>\S+))?"
_TAIL = r" *$"

RULES: tuple[Rule, ...] = (
    Rule(
        re.compile(r"^list" + _USER + r"(?: (?P<month>[\d/]+))?" + _TAIL, re.IGNORECASE),
        _listing(Direction.LIST),
    ),
    Rule(
        re.compile(r"^csvlist" + _USER + r"(?: (?P<month>[\d/]+))?" + _TAIL, re.IGNORECASE),
        _listing(Direction.LIST_CSV),
    ),
    Rule(
        re.compile(r"^mdlist" + _USER + r"(?: (?P<month>[\d/]+))?" + _TAIL, re.IGNORECASE),
        _listing(Direction.LIST_MARKDOWN),
    ),
    # hi [-u user] [[date] from[-to]]
    Rule(
        re.compile(
            r"^(?:hi|hello|おは\S*)" + _USER
            + r"(?:(?: (?P<date>[\d/]+))? (?P<from>[\d:]+)-?(?:-(?P<to>[\d:]+))?)?" + _TAIL,
            re.IGNORECASE,
        ),
        _clock(Direction.CLOCK_IN),
    ),
    # bye [-u user] [[date] [from-]to]
    Rule(
        re.compile(
            r"^(?:bye|おつ\S*|お疲れ\S*|乙|さよ\S*)" + _USER
            + r"(?:(?: (?P<date>[\d/]+))? (?:(?P<from>[\d:]+)-)?-?(?P<to>[\d:]+))?" + _TAIL,
            re.IGNORECASE,
        ),
        _clock(Direction.CLOCK_OUT),
    ),
    Rule(
        re.compile(r"^(?:delete|del)" + _USER + r" (?P<date>[\d/]+)" + _TAIL, re.IGNORECASE),
        _delete,
    ),
)


def parse_command(text: str, rules: tuple[Rule, ...] = RULES) -> CommandRequest | None:
    """Match chat text against the ordered rules; the first hit wins."""
    for rule in rules:
        match = rule.pattern.match(text)
        if match is not None:
            return rule.extract(match)
    return None
