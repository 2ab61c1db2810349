"""Demo app exercising every feedback primitive.

- ``greeting``: waits for both ``language`` and ``name``
- ``log_x``: validates ``x`` before a log transform
- ``compute`` button: a slow sum reported through a progress tracker, then a
  notification with the result
- ``delete`` button: confirm-then-execute-then-confirm modal flow
"""

from __future__ import annotations

import math

from reactive_feedback.feedback.gate import require, validate
from reactive_feedback.feedback.modal import Modal, ModalAction
from reactive_feedback.feedback.progress import ProgressTracker
from reactive_feedback.feedback.task import TaskContext
from reactive_feedback.session.session import Session

GREETINGS: dict[str, str] = {
    "English": "Hello",
    "Maori": "Kia ora",
    "French": "Bonjour",
}


def setup_demo(session: Session) -> None:
    inputs = session.inputs
    session.set_input("language", "")
    session.set_input("name", "")
    session.set_input("x", 1.0)
    session.set_input("trans", "log")
    session.set_input("steps", 10)

    @session.output("greeting")
    def greeting(_ctx: TaskContext) -> str:
        language = inputs.get("language")
        name = inputs.get("name")
        require(language, name)
        return f"{GREETINGS.get(str(language), 'Hello')} {name}!"

    @session.output("log_x")
    def log_x(_ctx: TaskContext) -> str:
        x = inputs.get("x")
        require(x)
        value = float(x)  # type: ignore[arg-type]
        if inputs.get("trans") == "log":
            if value < 0:
                validate("x can not be negative")
            if value == 0:
                validate("x can not be zero")
            return f"{math.log(value):.4f}"
        return f"{value:.4f}"

    @session.observe_event("compute")
    def compute(ctx: TaskContext) -> None:
        steps = int(inputs.get("steps") or 0)
        require(steps > 0)
        total = 0
        with ProgressTracker(
            ctx,
            max=steps,
            message="Computing",
            overflow=session.settings.progress_overflow,
        ) as progress:
            for i in range(1, steps + 1):
                total += i
                progress.inc(1, detail=f"step {i} of {steps}")
        session.notifications.show(f"Sum is {total}", id="compute-result")

    @session.observe_event("delete")
    def confirm_delete(_ctx: TaskContext) -> None:
        session.modal.show(
            Modal(
                title="Delete everything?",
                body="This cannot be undone.",
                footer=[
                    ModalAction(label="Cancel", dismiss=True),
                    ModalAction(label="Delete", input_id="delete_confirmed"),
                ],
            )
        )

    @session.observe_event("delete_confirmed")
    def delete(_ctx: TaskContext) -> None:
        session.modal.show(
            Modal(title="Deleted", body="Everything was deleted.", easy_close=True)
        )
