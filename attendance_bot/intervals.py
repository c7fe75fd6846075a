from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from .db import Database
from .models import DayState, RecordKey, WorkInterval, day_state


class IntervalStore:
    """Reads and writes the ordered work intervals of one user on one day.

    The last interval decides how a new clock-in/out lands:

    * ``EMPTY``  - start the first interval with the given fields.
    * ``OPEN``   - the last interval has no end yet; the given fields are set
      on it, so a clock-out closes it and a repeated clock-in moves its start.
    * ``CLOSED`` - the last interval already ended; start a new one.
    """

    def __init__(self, db: Database, logger: logging.Logger | None = None) -> None:
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def get(self, user: str, day: date) -> list[WorkInterval]:
        return self.db.get(RecordKey(user, day))

    def state(self, user: str, day: date) -> DayState:
        return day_state(self.get(user, day))

    def append(
        self,
        user: str,
        day: date,
        from_time: str | None = None,
        to_time: str | None = None,
    ) -> list[WorkInterval]:
        if from_time is None and to_time is None:
            raise ValueError("append needs from_time or to_time")

        key = RecordKey(user, day)
        intervals = self.db.get(key)
        state = day_state(intervals)

        if state is DayState.OPEN:
            current = intervals[-1]
            intervals[-1] = replace(
                current,
                from_time=from_time or current.from_time,
                to_time=to_time or current.to_time,
            )
        else:
            intervals.append(WorkInterval(from_time=from_time, to_time=to_time))

        self.db.set(key, intervals)
        self.logger.debug(
            "Stored interval user=%s day=%s state=%s count=%d",
            user,
            key.storage_day,
            state.value,
            len(intervals),
        )
        return intervals

    def remove(self, user: str, day: date) -> None:
        self.db.remove(RecordKey(user, day))
