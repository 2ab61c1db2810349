"""Unit tests for sessions: outputs, observers and end-to-end feedback flows."""

from __future__ import annotations

import math

import pytest

from reactive_feedback.feedback.config import FeedbackSettings
from reactive_feedback.feedback.gate import require, validate
from reactive_feedback.feedback.modal import Modal, ModalAction
from reactive_feedback.feedback.progress import ProgressState, ProgressTracker
from reactive_feedback.feedback.task import TaskContext
from reactive_feedback.session.output import OutputState
from reactive_feedback.session.session import Session, SessionClosedError


def _output(session: Session, name: str) -> tuple[OutputState, str]:
    snap = session.snapshot().outputs[name]
    return snap.state, snap.value


def test_greeting_waits_for_language_and_name(session: Session) -> None:
    session.set_input("language", "")
    session.set_input("name", "")

    @session.output("greeting")
    def greeting(_ctx: TaskContext) -> str:
        language = session.inputs["language"]
        name = session.inputs["name"]
        require(language, name)
        return f"Hello {name}!"

    session.flush()
    assert _output(session, "greeting") == (OutputState.AWAITING, "")

    session.set_input("language", "English")
    session.flush()
    assert _output(session, "greeting") == (OutputState.AWAITING, "")

    session.set_input("name", "Hadley")
    session.flush()
    assert _output(session, "greeting") == (OutputState.VALUE, "Hello Hadley!")


def test_validation_message_replaces_output_and_stops_task(session: Session) -> None:
    after_validate: list[str] = []
    session.set_input("x", -1)
    session.set_input("trans", "log")

    @session.output("transformed")
    def transformed(_ctx: TaskContext) -> str:
        x = session.inputs["x"]
        if session.inputs["trans"] == "log" and x < 0:
            validate("x can not be negative")
        after_validate.append("ran")
        return str(math.log(x))

    session.flush()

    assert _output(session, "transformed") == (OutputState.INVALID, "x can not be negative")
    assert after_validate == []

    session.set_input("x", 1)
    session.flush()
    assert _output(session, "transformed") == (OutputState.VALUE, "0.0")
    assert after_validate == ["ran"]


@pytest.mark.parametrize(("cancel_output", "expected"), [(True, "5 rows"), (False, "")])
def test_cancel_output_keeps_previous_value(
    session: Session, cancel_output: bool, expected: str
) -> None:
    session.set_input("rows", [1, 2, 3, 4, 5])

    @session.output("summary")
    def summary(_ctx: TaskContext) -> str:
        rows = session.inputs["rows"]
        require(rows, cancel_output=cancel_output)
        return f"{len(rows)} rows"

    session.flush()
    assert _output(session, "summary") == (OutputState.VALUE, "5 rows")

    session.set_input("rows", [])
    session.flush()
    assert _output(session, "summary") == (OutputState.AWAITING, expected)


def test_fatal_error_renders_generic_message(session: Session) -> None:
    @session.output("broken")
    def broken(_ctx: TaskContext) -> str:
        raise RuntimeError("database password is hunter2")

    results = session.flush()

    state, value = _output(session, "broken")
    assert state is OutputState.ERROR
    assert value == session.settings.generic_error_message
    assert "hunter2" not in value
    assert results[0].status == "fatal"


def test_calc_signals_reach_every_consumer(session: Session) -> None:
    computed: list[int] = []
    session.set_input("n", None)

    def doubled(_ctx: TaskContext) -> int:
        n = session.inputs["n"]
        require(n)
        if n < 0:
            validate("n must be positive")
        computed.append(n)
        return n * 2

    calc = session.calc(doubled)

    @session.output("a")
    def a(ctx: TaskContext) -> str:
        return f"a={calc(ctx)}"

    @session.output("b")
    def b(ctx: TaskContext) -> str:
        return f"b={calc(ctx)}+{calc(ctx)}"

    session.flush()
    assert _output(session, "a") == (OutputState.AWAITING, "")
    assert _output(session, "b") == (OutputState.AWAITING, "")

    session.set_input("n", -2)
    session.flush()
    assert _output(session, "a") == (OutputState.INVALID, "n must be positive")
    assert _output(session, "b") == (OutputState.INVALID, "n must be positive")

    session.set_input("n", 0)
    session.flush()
    assert _output(session, "a") == (OutputState.VALUE, "a=0")
    assert _output(session, "b") == (OutputState.VALUE, "b=0+0")
    # Once per task, not once per read.
    assert computed == [0, 0]


def test_observer_fires_on_click_but_not_on_registration(session: Session) -> None:
    fired: list[int] = []

    @session.observe_event("go")
    def go(_ctx: TaskContext) -> None:
        fired.append(session.inputs["go"].clicks)

    session.set_input("go", None)
    session.flush()
    assert fired == []

    session.click("go")
    session.click("go")
    session.flush()
    assert fired == [1, 2]


def test_progress_closed_when_observer_is_suspended(session: Session) -> None:
    trackers: list[ProgressTracker] = []

    @session.observe_event("load")
    def load(ctx: TaskContext) -> None:
        progress = ProgressTracker(ctx, max=3, message="Loading")
        trackers.append(progress)
        progress.inc(1)
        require(session.inputs.get("source"))
        progress.inc(2)

    session.click("load")
    results = session.flush()

    assert results[0].status == "suspended"
    assert trackers[0].state is ProgressState.CLOSED
    assert [m["action"] for m in results[0].effects] == ["open", "update", "close"]
    assert [m["action"] for m in session.drain_messages()] == ["open", "update", "close"]
    assert session.drain_messages() == []


def test_observer_failure_surfaces_as_error_notification(session: Session) -> None:
    @session.observe_event("explode")
    def explode(_ctx: TaskContext) -> None:
        raise ValueError("boom")

    session.click("explode")
    results = session.flush()

    assert results[0].status == "fatal"
    notes = session.notifications.visible()
    assert len(notes) == 1
    assert notes[0].level == "error"
    assert notes[0].message == session.settings.generic_error_message
    assert notes[0].duration_seconds is None


def test_repeated_observer_failures_share_one_notification(session: Session) -> None:
    @session.observe_event("explode")
    def explode(_ctx: TaskContext) -> None:
        raise ValueError("boom")

    for _ in range(5):
        session.click("explode")
        session.flush()

    assert len(session.notifications) == 1
    assert "error:explode" in session.notifications


def test_outbox_drops_oldest_messages_when_full(clock) -> None:
    settings = FeedbackSettings(_env_file=None, max_outbox_messages=10)
    session = Session(settings, clock=clock)

    for i in range(1000):
        session.notifications.show(f"step {i}", id="same")

    assert len(session.outbox) == 10
    messages = session.drain_messages()
    assert messages[-1]["notification"]["message"] == "step 999"
    assert len(session.outbox) == 0


def test_multi_step_modal_flow(session: Session) -> None:
    deleted: list[bool] = []

    @session.observe_event("delete")
    def confirm(_ctx: TaskContext) -> None:
        session.modal.show(
            Modal(
                title="Really delete?",
                footer=[
                    ModalAction(label="Cancel", dismiss=True),
                    ModalAction(label="Delete", input_id="confirmed"),
                ],
            )
        )

    @session.observe_event("confirmed")
    def execute(_ctx: TaskContext) -> None:
        deleted.append(True)
        session.modal.show(Modal(title="Deleted", easy_close=True))

    session.click("delete")
    session.flush()
    assert session.modal.current.title == "Really delete?"
    assert session.modal.dismiss() is False

    session.click("confirmed")
    session.flush()
    assert deleted == [True]
    assert session.snapshot().modal.title == "Deleted"
    assert session.modal.dismiss() is True
    assert session.snapshot().modal is None


def test_tick_expires_notifications(session: Session, clock) -> None:
    nid = session.notifications.show("Saved")
    clock.advance(session.settings.notification_duration_seconds)

    assert session.tick() == [nid]
    assert session.snapshot().notifications == []


def test_sessions_do_not_share_feedback_state(settings: FeedbackSettings, clock) -> None:
    one = Session(settings, clock=clock)
    two = Session(settings, clock=clock)

    one.notifications.show("Only for one", id="n")
    one.modal.show(Modal(title="One"))

    assert "n" not in two.notifications
    assert two.modal.current is None


def test_close_tears_down_feedback_and_refuses_work(session: Session) -> None:
    session.notifications.show("bye", duration=None)
    session.modal.show(Modal(title="open"))

    session.close()
    session.close()

    assert len(session.notifications) == 0
    assert session.modal.current is None
    with pytest.raises(SessionClosedError):
        session.set_input("x", 1)
    with pytest.raises(SessionClosedError):
        session.flush()
