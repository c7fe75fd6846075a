import dataclasses
import json
import random

import pytest

from attendance_bot.messages import Messages, load_messages, pick, render_template


def test_render_template_substitutes_named_placeholders() -> None:
    text = render_template("%{user} worked %{from}-%{to} on %{date}.", user="alice", date="2024/12/24", **{"from": "09:00", "to": None})

    assert text == "alice worked 09:00- on 2024/12/24."


def test_render_template_keeps_unknown_placeholders() -> None:
    assert render_template("%{user} %{other}", user="alice") == "alice %{other}"


def test_render_template_replaces_every_occurrence() -> None:
    assert render_template("%{user}/%{user}", user="bob") == "bob/bob"


def test_pick_uses_given_random() -> None:
    variants = ("a", "b", "c")

    assert pick(variants, random.Random(7)) == random.Random(7).choice(variants)
    assert pick(("only",)) == "only"


def test_pick_needs_variants() -> None:
    with pytest.raises(ValueError):
        pick(())


def test_messages_are_immutable() -> None:
    messages = Messages()

    with pytest.raises(dataclasses.FrozenInstanceError):
        messages.hi = ("changed",)


def test_load_messages_overrides_by_name(tmp_path) -> None:
    path = tmp_path / "messages.json"
    path.write_text(json.dumps({"hi": "Hello %{user}", "bye": ["See you", "Later"]}), encoding="utf-8")

    messages = load_messages(path)

    assert messages.hi == ("Hello %{user}",)
    assert messages.bye == ("See you", "Later")
    assert messages.error == Messages().error


@pytest.mark.parametrize("payload", [{"unknown": "x"}, {"hi": []}, {"hi": [1]}, ["hi"]])
def test_load_messages_rejects_bad_files(tmp_path, payload) -> None:
    path = tmp_path / "messages.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(ValueError):
        load_messages(path)
