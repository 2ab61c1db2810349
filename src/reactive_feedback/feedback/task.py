"""Task execution context and runner.

A task is one evaluation of a reactive computation. It receives an explicit
:class:`TaskContext` that owns:

- the cleanup list (``on_exit``), drained in reverse order on every exit path
- the ordered list of UI side effects issued while it ran

:func:`run_task` is the top-level handler: every way out of a task becomes a
:class:`TaskResult` carrying the value or the signal.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal, Protocol

from reactive_feedback.feedback.signals import (
    Fatal,
    Signal,
    Suspend,
    TaskAborted,
    ValidationFailure,
)

logger = logging.getLogger(__name__)

TaskStatus = Literal["ok", "suspended", "invalid", "fatal"]


class TaskHost(Protocol):
    """What a task needs from the session it runs in."""

    @property
    def current_task(self) -> TaskContext | None: ...

    def send(self, message: dict[str, object]) -> None: ...


class TaskContext:
    """Execution context for a single task run."""

    def __init__(self, *, name: str, host: TaskHost | None = None) -> None:
        self.name = name
        self.task_id = uuid.uuid4().hex
        self.host = host
        self.effects: list[dict[str, object]] = []
        self._cleanups: list[Callable[[], object]] = []
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def on_exit(self, callback: Callable[[], object]) -> None:
        """Register ``callback`` to run when the task exits, however it exits."""

        if self._finished:
            raise RuntimeError(f"Task {self.name!r} has already exited")
        self._cleanups.append(callback)

    def emit(self, message: dict[str, object]) -> None:
        """Issue a UI side effect on behalf of this task."""

        if self.host is None:
            self.effects.append(message)
        else:
            self.host.send(message)

    def is_current(self) -> bool:
        if self.host is None:
            return not self._finished
        return self.host.current_task is self

    def finish(self) -> BaseException | None:
        """Drain the cleanup list, newest first.

        Every callback runs even if an earlier one raises. Returns the first
        error raised by a callback, if any.
        """

        first_error: BaseException | None = None
        while self._cleanups:
            callback = self._cleanups.pop()
            try:
                callback()
            except Exception as e:
                logger.exception(
                    "Task cleanup failed",
                    extra={"task": self.name, "task_id": self.task_id},
                )
                if first_error is None:
                    first_error = e
        self._finished = True
        return first_error


@dataclass(frozen=True, slots=True)
class TaskResult:
    task_id: str
    name: str
    value: object = None
    signal: Signal | None = None
    effects: list[dict[str, object]] = field(default_factory=list)

    @property
    def status(self) -> TaskStatus:
        if self.signal is None:
            return "ok"
        if isinstance(self.signal, Suspend):
            return "suspended"
        if isinstance(self.signal, ValidationFailure):
            return "invalid"
        return "fatal"

    @property
    def ok(self) -> bool:
        return self.signal is None


def run_task(ctx: TaskContext, fn: Callable[[TaskContext], object]) -> TaskResult:
    """Run ``fn`` inside ``ctx`` and classify how it exited.

    Cleanups run before this returns, on every path. Exceptions that are not
    ``Exception`` subclasses (e.g. ``KeyboardInterrupt``) still run cleanups
    and then propagate.
    """

    value: object = None
    signal: Signal | None = None
    try:
        value = fn(ctx)
    except TaskAborted as e:
        signal = e.signal
        logger.debug(
            "Task aborted",
            extra={"task": ctx.name, "task_id": ctx.task_id, "signal": type(signal).__name__},
        )
    except Exception as e:
        logger.exception("Task failed", extra={"task": ctx.name, "task_id": ctx.task_id})
        signal = Fatal(cause=e)
    finally:
        cleanup_error = ctx.finish()

    if cleanup_error is not None and signal is None:
        value = None
        signal = Fatal(cause=cleanup_error)

    return TaskResult(
        task_id=ctx.task_id,
        name=ctx.name,
        value=value,
        signal=signal,
        effects=list(ctx.effects),
    )
