from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum


def format_day(day: date) -> str:
    """Render a date as YYYY/MM/DD, the form used in keys and messages."""
    return f"{day.year:04}/{day.month:02}/{day.day:02}"


class Direction(str, Enum):
    CLOCK_IN = "hi"
    CLOCK_OUT = "bye"
    DELETE = "delete"
    LIST = "list"
    LIST_CSV = "csvlist"
    LIST_MARKDOWN = "mdlist"


class ReportFormat(str, Enum):
    TABLE = "table"
    CSV = "csv"
    MARKDOWN = "markdown"


class DayState(str, Enum):
    EMPTY = "empty"
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True, order=True)
class RecordKey:
    user: str
    day: date

    @property
    def storage_day(self) -> str:
        return format_day(self.day)


@dataclass(frozen=True, slots=True)
class WorkInterval:
    from_time: str | None = None
    to_time: str | None = None

    @property
    def is_open(self) -> bool:
        return self.to_time is None

    def to_dict(self) -> dict[str, str | None]:
        return {"from": self.from_time, "to": self.to_time}

    @classmethod
    def from_dict(cls, raw: dict[str, str | None]) -> WorkInterval:
        return cls(from_time=raw.get("from") or None, to_time=raw.get("to") or None)


def day_state(intervals: list[WorkInterval]) -> DayState:
    if not intervals:
        return DayState.EMPTY
    if intervals[-1].is_open:
        return DayState.OPEN
    return DayState.CLOSED


@dataclass(frozen=True, slots=True)
class ClockResult:
    direction: Direction
    user: str
    date: str
    from_time: str | None
    to_time: str | None
    is_future: bool = False


@dataclass(frozen=True, slots=True)
class DeleteResult:
    user: str
    date: str


@dataclass(frozen=True, slots=True)
class LedgerRow:
    day: date
    from_time: str | None
    to_time: str | None
    from_calc: str | None
    to_calc: str | None
    duration: timedelta
    overtime: timedelta


@dataclass(frozen=True, slots=True)
class LedgerDay:
    day: date
    rows: tuple[LedgerRow, ...] = ()


@dataclass(frozen=True, slots=True)
class MonthlyLedger:
    user: str
    year: int
    month: int
    days: tuple[LedgerDay, ...] = field(default_factory=tuple)
    total: timedelta = timedelta(0)

    @property
    def has_records(self) -> bool:
        return any(day.rows for day in self.days)
