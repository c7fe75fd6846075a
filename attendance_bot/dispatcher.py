from __future__ import annotations

import asyncio
import logging
import random
from typing import Protocol

from .errors import AttendanceError
from .grammar import CommandRequest
from .ledger import LedgerAggregator
from .messages import Messages, pick, render_template
from .models import ClockResult, DeleteResult, Direction, ReportFormat
from .parsing import parse_month_text
from .recorder import AttendanceRecorder

LIST_FORMATS = {
    Direction.LIST: ReportFormat.TABLE,
    Direction.LIST_CSV: ReportFormat.CSV,
    Direction.LIST_MARKDOWN: ReportFormat.MARKDOWN,
}


class ReplyChannelLike(Protocol):
    async def send(self, content: str) -> None: ...


class CommandDispatcher:
    """Runs one parsed command and replies; a failing command never stops the bot."""

    def __init__(
        self,
        recorder: AttendanceRecorder,
        aggregator: LedgerAggregator,
        messages: Messages,
        *,
        list_delay_seconds: float = 1.0,
        rng: random.Random | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.recorder = recorder
        self.aggregator = aggregator
        self.messages = messages
        self.list_delay_seconds = list_delay_seconds
        self.rng = rng
        self.logger = logger or logging.getLogger(__name__)

    async def dispatch(self, request: CommandRequest, requester: str, channel: ReplyChannelLike) -> None:
        user = request.user or requester
        try:
            if request.direction in LIST_FORMATS:
                await self._send_ledger(request, user, channel)
            elif request.direction is Direction.DELETE:
                result = self.recorder.delete(user, request.date_text)
                await channel.send(self.render_delete(result))
            else:
                result = self.recorder.clock_event(
                    request.direction,
                    user,
                    request.date_text,
                    request.from_text,
                    request.to_text,
                )
                await channel.send(self.render_clock(result))
        except AttendanceError as exc:
            self.logger.info("Rejected %s from %s: %s", request.direction.value, requester, exc)
            await channel.send(self.render_error(exc))
        except Exception as exc:  # pragma: no cover - runtime safety
            self.logger.exception("Command %s failed", request.direction.value)
            await channel.send(self.render_error(exc))

    async def _send_ledger(self, request: CommandRequest, user: str, channel: ReplyChannelLike) -> None:
        fmt = LIST_FORMATS[request.direction]
        year, month = parse_month_text(request.month_text, reference=self.recorder.clock().date())

        before = self.messages.before_csv if fmt is ReportFormat.CSV else self.messages.before_list
        await channel.send(render_template(pick(before, self.rng), user=user, month=month))

        # The acknowledgement is always delivered before the ledger body.
        await asyncio.sleep(self.list_delay_seconds)

        body, _total = self.aggregator.report(user, year, month, fmt)
        if body is None:
            template = pick(self.messages.none_list, self.rng)
        else:
            template = pick(self.messages.after_list, self.rng)
        await channel.send(render_template(template, list=body or "", month=month, user=user))

    def render_clock(self, result: ClockResult) -> str:
        if result.direction is Direction.CLOCK_IN:
            variants = self.messages.future if result.is_future else self.messages.hi
        else:
            variants = self.messages.bye
        return render_template(
            pick(variants, self.rng),
            user=result.user,
            date=result.date,
            **{"from": result.from_time, "to": result.to_time},
        )

    def render_delete(self, result: DeleteResult) -> str:
        return render_template(pick(self.messages.delete, self.rng), user=result.user, date=result.date)

    def render_error(self, exc: Exception) -> str:
        return render_template(pick(self.messages.error, self.rng), message=str(exc))
