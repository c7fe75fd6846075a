from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from .errors import ArgumentError
from .intervals import IntervalStore
from .models import ClockResult, DeleteResult, Direction, format_day
from .parsing import format_time, local_now, parse_date_text, resolve_time


class AttendanceRecorder:
    def __init__(
        self,
        store: IntervalStore,
        clock: Callable[[], datetime] = local_now,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    def clock_in(
        self,
        user: str,
        date_text: str | None = None,
        from_text: str | None = None,
        to_text: str | None = None,
    ) -> ClockResult:
        return self.clock_event(Direction.CLOCK_IN, user, date_text, from_text, to_text)

    def clock_out(
        self,
        user: str,
        date_text: str | None = None,
        from_text: str | None = None,
        to_text: str | None = None,
    ) -> ClockResult:
        return self.clock_event(Direction.CLOCK_OUT, user, date_text, from_text, to_text)

    def clock_event(
        self,
        direction: Direction,
        user: str,
        date_text: str | None = None,
        from_text: str | None = None,
        to_text: str | None = None,
    ) -> ClockResult:
        if direction not in (Direction.CLOCK_IN, Direction.CLOCK_OUT):
            raise ValueError(f"Not a clock direction: {direction}")

        if date_text and not from_text and not to_text:
            raise ArgumentError()

        now = self.clock().replace(second=0, microsecond=0)
        today = now.date()
        day = today
        start: datetime | None = None
        end: datetime | None = None
        is_future = False

        if not date_text and not from_text and not to_text:
            # Bare "hi"/"bye": stamp the current minute on the matching side.
            if direction is Direction.CLOCK_IN:
                start = now
            else:
                end = now
        else:
            if date_text:
                day = parse_date_text(date_text, reference=today)
            if from_text:
                start = resolve_time(day, from_text)
                # Only a same-day clock-in can be ahead of the clock.
                is_future = direction is Direction.CLOCK_IN and day == today and start > now
            if to_text:
                end = resolve_time(day, to_text)

        from_time = format_time(start) if start else None
        to_time = format_time(end) if end else None

        self.store.append(user, day, from_time, to_time)
        self.logger.info(
            "Recorded %s: user=%s day=%s from=%s to=%s future=%s",
            direction.value,
            user,
            format_day(day),
            from_time,
            to_time,
            is_future,
        )

        return ClockResult(
            direction=direction,
            user=user,
            date=format_day(day),
            from_time=from_time,
            to_time=to_time,
            is_future=is_future,
        )

    def delete(self, user: str, date_text: str | None = None) -> DeleteResult:
        if not date_text:
            raise ArgumentError()

        day = parse_date_text(date_text, reference=self.clock().date())
        self.store.remove(user, day)
        self.logger.info("Deleted records: user=%s day=%s", user, format_day(day))
        return DeleteResult(user=user, date=format_day(day))
