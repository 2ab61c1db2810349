"""Signals that end a task early.

A task exits in one of four ways: it returns a value, it is suspended because
its inputs are not ready, it fails validation with a user-facing message, or it
fails unexpectedly. The last three are modelled as explicit tagged variants so
that the output boundary (not the call site) decides what to render.

Inside a running task the variants travel as a single exception type,
:class:`TaskAborted`, which the task runner converts back into a variant.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Suspend:
    """Inputs are not ready. Not an error.

    When ``cancel_output`` is set, an output reached by this signal keeps its
    previously rendered value instead of clearing.
    """

    cancel_output: bool = False


@dataclass(frozen=True, slots=True)
class ValidationFailure:
    """A business rule failed; ``message`` is shown to the user verbatim."""

    message: str


@dataclass(frozen=True, slots=True)
class Fatal:
    """Unexpected failure. Rendered generically, logged in full."""

    cause: BaseException

    @property
    def description(self) -> str:
        return f"{type(self.cause).__name__}: {self.cause}"


Signal = Suspend | ValidationFailure | Fatal


class TaskAborted(Exception):
    """Carries a :data:`Signal` out of the remainder of a task."""

    def __init__(self, signal: Suspend | ValidationFailure) -> None:
        super().__init__(signal)
        self.signal = signal

    def __str__(self) -> str:
        if isinstance(self.signal, ValidationFailure):
            return self.signal.message
        return "suspended"
