from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from .intervals import IntervalStore
from .models import LedgerDay, LedgerRow, MonthlyLedger, ReportFormat, WorkInterval, format_day
from .parsing import ONE_DAY, day_start, format_time, resolve_time

INCREMENT = timedelta(minutes=15)
BASE_WORK_DURATION = timedelta(hours=9)
ZERO = timedelta(0)

TABLE_HEADER = "date       | recorded      | calculated    | duration | overtime"
TABLE_FOOTER = "sum        |       |       |       |       | "
TIME_BLANK = " " * 5
DURATION_BLANK = " " * 8
DURATION_PAD = " " * 3

CSV_HEADER = 'Date,Start,End,"Calc start","Calc end",Duration,Overtime'
CSV_FOOTER = "Sum,,,,,"

MARKDOWN_HEADER = "| date | from | to | from' | to' | delta | over |"
MARKDOWN_RULE = "| --- | --- | --- | --- | --- | --- | --- |"

FENCE = "```"


def format_duration(value: timedelta) -> str:
    """Render a duration as HH:MM, with a leading '-' when negative."""
    sign = "-" if value < ZERO else ""
    total_minutes = abs(value) // timedelta(minutes=1)
    hours, minutes = divmod(total_minutes, 60)
    return f"{sign}{hours:02}:{minutes:02}"


def ceil_to_grid(instant: datetime, origin: datetime, step: timedelta = INCREMENT) -> datetime:
    steps = -(-(instant - origin) // step)
    return origin + steps * step


def floor_to_grid(instant: datetime, origin: datetime, step: timedelta = INCREMENT) -> datetime:
    steps = (instant - origin) // step
    return origin + steps * step


def month_days(year: int, month: int) -> list[date]:
    days: list[date] = []
    cursor = date(year, month, 1)
    while cursor.month == month:
        days.append(cursor)
        cursor += ONE_DAY
    return days


def build_row(day: date, interval: WorkInterval) -> LedgerRow:
    start = resolve_time(day, interval.from_time) if interval.from_time else None
    end = resolve_time(day, interval.to_time) if interval.to_time else None

    from_calc: str | None = None
    to_calc: str | None = None
    duration = ZERO

    if start is not None and end is not None:
        # An end before the start means the shift ran past midnight.
        if end < start:
            end += ONE_DAY
        origin = day_start(day)
        start_calc = ceil_to_grid(start, origin)
        end_calc = floor_to_grid(end, origin)
        from_calc = format_time(start_calc)
        to_calc = format_time(end_calc)
        duration = max(ZERO, end_calc - start_calc)

    return LedgerRow(
        day=day,
        from_time=interval.from_time,
        to_time=interval.to_time,
        from_calc=from_calc,
        to_calc=to_calc,
        duration=duration,
        overtime=max(ZERO, duration - BASE_WORK_DURATION),
    )


class LedgerAggregator:
    def __init__(self, store: IntervalStore, logger: logging.Logger | None = None) -> None:
        self.store = store
        self.logger = logger or logging.getLogger(__name__)

    def build(self, user: str, year: int, month: int) -> MonthlyLedger:
        # Read-only scan of every calendar day; rendering waits for the whole month.
        days: list[LedgerDay] = []
        total = ZERO
        for day in month_days(year, month):
            rows = tuple(build_row(day, interval) for interval in self.store.get(user, day))
            total += sum((row.duration for row in rows), ZERO)
            days.append(LedgerDay(day=day, rows=rows))

        ledger = MonthlyLedger(user=user, year=year, month=month, days=tuple(days), total=total)
        self.logger.debug(
            "Built ledger user=%s month=%04d/%02d rows=%d total=%s",
            user,
            year,
            month,
            sum(len(day.rows) for day in ledger.days),
            format_duration(total),
        )
        return ledger

    def render(self, ledger: MonthlyLedger, fmt: ReportFormat) -> str | None:
        """Render a ledger; ``None`` means there is nothing to show."""
        if fmt is ReportFormat.CSV:
            return render_csv(ledger)
        if not ledger.has_records:
            return None
        if fmt is ReportFormat.MARKDOWN:
            return render_markdown(ledger)
        return render_table(ledger)

    def report(self, user: str, year: int, month: int, fmt: ReportFormat) -> tuple[str | None, timedelta]:
        ledger = self.build(user, year, month)
        return self.render(ledger, fmt), ledger.total


def render_table(ledger: MonthlyLedger) -> str:
    lines = [TABLE_HEADER]
    for day in ledger.days:
        for row in day.rows:
            duration = format_duration(row.duration) + DURATION_PAD if row.duration else DURATION_BLANK
            lines.append(
                " | ".join(
                    [
                        format_day(row.day),
                        row.from_time or TIME_BLANK,
                        row.to_time or TIME_BLANK,
                        row.from_calc or TIME_BLANK,
                        row.to_calc or TIME_BLANK,
                        duration,
                        format_duration(row.overtime) if row.overtime else "",
                    ]
                )
            )
    lines.append(TABLE_FOOTER + format_duration(ledger.total))
    return FENCE + "\n".join(lines) + FENCE


def render_csv(ledger: MonthlyLedger) -> str:
    lines = [CSV_HEADER]
    for day in ledger.days:
        if not day.rows:
            lines.append(format_day(day.day) + ",,,,,,")
            continue
        for row in day.rows:
            lines.append(
                ",".join(
                    [
                        format_day(row.day),
                        row.from_time or "",
                        row.to_time or "",
                        row.from_calc or "",
                        row.to_calc or "",
                        format_duration(row.duration) if row.duration else "",
                        format_duration(row.overtime) if row.overtime else "",
                    ]
                )
            )
    lines.append(CSV_FOOTER + format_duration(ledger.total))
    return FENCE + "\n".join(lines) + FENCE


def render_markdown(ledger: MonthlyLedger) -> str:
    lines = [MARKDOWN_HEADER, MARKDOWN_RULE]
    for day in ledger.days:
        for row in day.rows:
            cells = [
                format_day(row.day),
                row.from_time or "",
                row.to_time or "",
                row.from_calc or "",
                row.to_calc or "",
                format_duration(row.duration) if row.duration else "",
                format_duration(row.overtime) if row.overtime else "",
            ]
            lines.append("| " + " | ".join(cells) + " |")
    lines.append(f"| sum |  |  |  |  | {format_duration(ledger.total)} |  |")
    return "\n".join(lines)
