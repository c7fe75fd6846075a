import asyncio
from datetime import date, datetime

from attendance_bot.db import Database
from attendance_bot.dispatcher import CommandDispatcher
from attendance_bot.grammar import CommandRequest
from attendance_bot.intervals import IntervalStore
from attendance_bot.ledger import LedgerAggregator
from attendance_bot.messages import Messages
from attendance_bot.models import Direction, WorkInterval
from attendance_bot.recorder import AttendanceRecorder

NOW = datetime(2024, 12, 24, 10, 30)


class FakeChannel:
    def __init__(self) -> None:
        self.sent: list[str] = []

    async def send(self, content: str) -> None:
        self.sent.append(content)


def _dispatcher() -> CommandDispatcher:
    db = Database(":memory:")
    db.initialize()
    store = IntervalStore(db)
    return CommandDispatcher(
        AttendanceRecorder(store, clock=lambda: NOW),
        LedgerAggregator(store),
        Messages(),
        list_delay_seconds=0,
    )


def _run(dispatcher: CommandDispatcher, request: CommandRequest, requester: str = "alice") -> list[str]:
    channel = FakeChannel()
    asyncio.run(dispatcher.dispatch(request, requester, channel))
    return channel.sent


def test_clock_in_confirmation() -> None:
    sent = _run(_dispatcher(), CommandRequest(Direction.CLOCK_IN, from_text="9"))

    assert sent == ["Good morning! alice started working at 09:00- on 2024/12/24."]


def test_future_clock_in_gets_acknowledgement() -> None:
    sent = _run(_dispatcher(), CommandRequest(Direction.CLOCK_IN, from_text="11"))

    assert sent == ["Sure. alice will arrive at 11:00."]


def test_clock_out_confirmation() -> None:
    sent = _run(_dispatcher(), CommandRequest(Direction.CLOCK_OUT, date_text="12/20", from_text="9", to_text="1730"))

    assert sent == ["Good bye! alice finished working at 09:00-17:30 on 2024/12/20."]


def test_user_override_records_for_other_user() -> None:
    dispatcher = _dispatcher()

    _run(dispatcher, CommandRequest(Direction.CLOCK_IN, user="bob", from_text="9"))

    assert dispatcher.recorder.store.get("bob", NOW.date()) == [WorkInterval("09:00", None)]
    assert dispatcher.recorder.store.get("alice", NOW.date()) == []


def test_errors_become_a_reply() -> None:
    dispatcher = _dispatcher()

    assert _run(dispatcher, CommandRequest(Direction.CLOCK_IN, date_text="12/24")) == ["Error occurred: Argument error."]
    assert _run(dispatcher, CommandRequest(Direction.CLOCK_IN, from_text="25")) == [
        "Error occurred: Time format error: 25 is outside the day"
    ]
    assert dispatcher.recorder.store.get("alice", NOW.date()) == []


def test_delete_confirmation() -> None:
    dispatcher = _dispatcher()
    _run(dispatcher, CommandRequest(Direction.CLOCK_IN, from_text="9"))

    sent = _run(dispatcher, CommandRequest(Direction.DELETE, date_text="1224"))

    assert sent == ["OK. alice's working time on 2024/12/24 was deleted."]
    assert dispatcher.recorder.store.get("alice", NOW.date()) == []


def test_list_sends_acknowledgement_before_table() -> None:
    dispatcher = _dispatcher()
    dispatcher.recorder.store.append("alice", date(2024, 12, 2), "09:00", "18:00")

    sent = _run(dispatcher, CommandRequest(Direction.LIST))

    assert len(sent) == 2
    assert sent[0] == "OK. There is alice's working time list on 12."
    assert sent[1].startswith("```date       | recorded")
    assert sent[1].endswith("09:00```")


def test_empty_list_reports_nothing() -> None:
    sent = _run(_dispatcher(), CommandRequest(Direction.LIST, month_text="201411"))

    assert sent == [
        "OK. There is alice's working time list on 11.",
        "The list of 11 is nothing.",
    ]


def test_empty_csv_list_still_has_a_body() -> None:
    sent = _run(_dispatcher(), CommandRequest(Direction.LIST_CSV, month_text="11"))

    assert sent[0] == "OK. There is alice's working time list on 11 with CSV format."
    assert sent[1].startswith('```Date,Start,End,"Calc start","Calc end",Duration,Overtime\n2024/11/01,,,,,,')


def test_bad_month_is_rejected_before_acknowledgement() -> None:
    sent = _run(_dispatcher(), CommandRequest(Direction.LIST, month_text="13"))

    assert sent == ["Error occurred: Date parse failed: 13"]
