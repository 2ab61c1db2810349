"""Output boundaries: where a task's result is turned into what the user sees.

This is the single recovery point for suspension and validation failures.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel

from reactive_feedback.feedback.signals import Fatal, Suspend, ValidationFailure
from reactive_feedback.feedback.task import TaskContext, TaskResult

RenderFn = Callable[[TaskContext], object]


class OutputState(str, Enum):
    AWAITING = "awaiting"
    VALUE = "value"
    INVALID = "invalid"
    ERROR = "error"


class OutputSnapshot(BaseModel):
    state: OutputState
    value: str


class OutputBoundary:
    def __init__(self, *, name: str, render: RenderFn, generic_error_message: str) -> None:
        self.name = name
        self.render = render
        self.generic_error_message = generic_error_message
        self.state = OutputState.AWAITING
        self.value = ""

    def apply(self, result: TaskResult) -> bool:
        """Render ``result`` into this output. Returns whether anything changed."""

        before = (self.state, self.value)
        signal = result.signal

        if signal is None:
            self.state = OutputState.VALUE
            self.value = "" if result.value is None else str(result.value)
        elif isinstance(signal, Suspend):
            self.state = OutputState.AWAITING
            if not signal.cancel_output:
                self.value = ""
        elif isinstance(signal, ValidationFailure):
            self.state = OutputState.INVALID
            self.value = signal.message
        elif isinstance(signal, Fatal):
            self.state = OutputState.ERROR
            self.value = self.generic_error_message

        return (self.state, self.value) != before

    def snapshot(self) -> OutputSnapshot:
        return OutputSnapshot(state=self.state, value=self.value)
