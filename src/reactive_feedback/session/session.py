"""One connected user's reactive session.

The session is deliberately minimal: it has no dependency tracking. Setting an
input marks every output dirty and queues the observers bound to that input;
:meth:`Session.flush` then runs them one at a time. Tasks never interleave
within a session.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import deque
from collections.abc import Callable
from typing import TypeVar

from pydantic import BaseModel, Field

from reactive_feedback.feedback.config import FeedbackSettings
from reactive_feedback.feedback.inputs import ActionButtonValue
from reactive_feedback.feedback.modal import Modal, ModalController
from reactive_feedback.feedback.notifications import FeedbackChannel, Notification
from reactive_feedback.feedback.signals import Fatal, TaskAborted, ValidationFailure
from reactive_feedback.feedback.task import TaskContext, TaskResult, run_task
from reactive_feedback.session.output import OutputBoundary, OutputSnapshot, RenderFn

logger = logging.getLogger(__name__)

T = TypeVar("T")
ObserverFn = Callable[[TaskContext], object]

# Observers may set inputs, which can queue more work; stop runaway loops.
_MAX_FLUSH_ROUNDS = 100


class SessionClosedError(RuntimeError):
    pass


class SessionSnapshot(BaseModel):
    id: str
    outputs: dict[str, OutputSnapshot] = Field(default_factory=dict)
    notifications: list[Notification] = Field(default_factory=list)
    modal: Modal | None = None


class Calc:
    """A reactive expression evaluated inside the task that reads it.

    Signals raised while computing propagate to every reader, so an output
    downstream of a suspended expression is itself suspended. Within one task
    the expression is computed at most once.
    """

    def __init__(self, fn: Callable[[TaskContext], object], *, name: str) -> None:
        self.fn = fn
        self.name = name
        self._task_id: str | None = None
        self._outcome: object = None
        self._aborted: TaskAborted | None = None

    def __call__(self, ctx: TaskContext) -> object:
        if self._task_id != ctx.task_id:
            try:
                self._outcome, self._aborted = self.fn(ctx), None
            except TaskAborted as e:
                self._outcome, self._aborted = None, e
            self._task_id = ctx.task_id
        if self._aborted is not None:
            raise TaskAborted(self._aborted.signal)
        return self._outcome


class _Observer:
    def __init__(self, fn: ObserverFn, *, input_id: str, ignore_none: bool) -> None:
        self.fn = fn
        self.input_id = input_id
        self.ignore_none = ignore_none

    def wants(self, value: object) -> bool:
        if not self.ignore_none:
            return True
        if isinstance(value, ActionButtonValue):
            return value.clicks > 0
        return value is not None


class Session:
    """Per-user feedback state plus a tiny reactive loop."""

    def __init__(
        self,
        settings: FeedbackSettings | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        session_id: str | None = None,
    ) -> None:
        self.settings = settings or FeedbackSettings()
        self.id = session_id or uuid.uuid4().hex
        self.lock = threading.Lock()

        self.inputs: dict[str, object] = {}
        # Bounded: a client that never drains loses the oldest messages.
        self.outbox: deque[dict[str, object]] = deque(
            maxlen=self.settings.max_outbox_messages
        )
        self.notifications = FeedbackChannel(
            send=self.send,
            default_duration=self.settings.notification_duration_seconds,
            order=self.settings.notification_order,
            clock=clock,
        )
        self.modal = ModalController(send=self.send)

        self._outputs: dict[str, OutputBoundary] = {}
        self._observers: dict[str, list[_Observer]] = {}
        self._dirty: set[str] = set()
        self._queued: list[_Observer] = []
        self._current: TaskContext | None = None
        self._closed = False

    # -- task host -----------------------------------------------------------

    @property
    def current_task(self) -> TaskContext | None:
        return self._current

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, message: dict[str, object]) -> None:
        self.outbox.append(message)
        if self._current is not None:
            self._current.effects.append(message)

    def drain_messages(self) -> list[dict[str, object]]:
        messages = list(self.outbox)
        self.outbox.clear()
        return messages

    # -- wiring ----------------------------------------------------------------

    def output(self, name: str) -> Callable[[RenderFn], RenderFn]:
        """Register a render function as the output called ``name``."""

        def decorator(fn: RenderFn) -> RenderFn:
            self._outputs[name] = OutputBoundary(
                name=name,
                render=fn,
                generic_error_message=self.settings.generic_error_message,
            )
            self._dirty.add(name)
            return fn

        return decorator

    def observe_event(
        self, input_id: str, *, ignore_none: bool = True
    ) -> Callable[[ObserverFn], ObserverFn]:
        """Run the decorated function whenever ``input_id`` changes.

        With ``ignore_none`` (the default) the observer does not fire for
        ``None`` or for a button that has never been clicked.
        """

        def decorator(fn: ObserverFn) -> ObserverFn:
            observer = _Observer(fn, input_id=input_id, ignore_none=ignore_none)
            self._observers.setdefault(input_id, []).append(observer)
            return fn

        return decorator

    def calc(self, fn: Callable[[TaskContext], T], *, name: str | None = None) -> Calc:
        return Calc(fn, name=name or getattr(fn, "__name__", "calc"))

    # -- inputs ----------------------------------------------------------------

    def set_input(self, name: str, value: object) -> None:
        self._check_open()
        self.inputs[name] = value
        self._dirty.update(self._outputs)
        for observer in self._observers.get(name, []):
            if observer.wants(value):
                self._queued.append(observer)

    def click(self, input_id: str) -> ActionButtonValue:
        current = self.inputs.get(input_id)
        if not isinstance(current, ActionButtonValue):
            current = ActionButtonValue()
        clicked = current.clicked()
        self.set_input(input_id, clicked)
        return clicked

    # -- evaluation ------------------------------------------------------------

    def flush(self) -> list[TaskResult]:
        """Run queued observers, then re-render dirty outputs, until settled."""

        self._check_open()
        results: list[TaskResult] = []
        for _ in range(_MAX_FLUSH_ROUNDS):
            if not self._queued and not self._dirty:
                return results
            while self._queued:
                observer = self._queued.pop(0)
                results.append(self._run_observer(observer))
            dirty = [name for name in self._outputs if name in self._dirty]
            self._dirty.clear()
            for name in dirty:
                results.append(self._render(self._outputs[name]))
        raise RuntimeError(f"Session {self.id} did not settle after {_MAX_FLUSH_ROUNDS} rounds")

    def tick(self, now: float | None = None) -> list[str]:
        """Advance session timers. Returns ids of expired notifications."""

        self._check_open()
        return self.notifications.expire(now)

    def _run(self, name: str, fn: Callable[[TaskContext], object]) -> TaskResult:
        if self._current is not None:
            raise RuntimeError(
                f"Task {name!r} cannot start while {self._current.name!r} is running"
            )
        ctx = TaskContext(name=name, host=self)
        self._current = ctx
        try:
            return run_task(ctx, fn)
        finally:
            self._current = None

    def _render(self, boundary: OutputBoundary) -> TaskResult:
        result = self._run(f"output:{boundary.name}", boundary.render)
        if boundary.apply(result):
            self.send(
                {
                    "type": "output",
                    "name": boundary.name,
                    "state": boundary.state.value,
                    "value": boundary.value,
                }
            )
        return result

    def _run_observer(self, observer: _Observer) -> TaskResult:
        name = getattr(observer.fn, "__name__", "observer")
        result = self._run(f"observer:{observer.input_id}:{name}", observer.fn)
        if isinstance(result.signal, ValidationFailure):
            logger.debug(
                "Observer validation failed",
                extra={"session_id": self.id, "task": result.name},
            )
        elif isinstance(result.signal, Fatal):
            # No output to render into: surface the failure as a notification,
            # one per input so repeated failures replace rather than stack.
            self.notifications.show(
                self.settings.generic_error_message,
                level="error",
                duration=None,
                id=f"error:{observer.input_id}",
            )
        return result

    # -- lifecycle -------------------------------------------------------------

    def close(self) -> None:
        """Disconnect: tear down all feedback state."""

        if self._closed:
            return
        self.notifications.clear()
        self.modal.remove()
        self._queued.clear()
        self._dirty.clear()
        self._closed = True
        logger.info("Session closed", extra={"session_id": self.id})

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            id=self.id,
            outputs={name: out.snapshot() for name, out in self._outputs.items()},
            notifications=self.notifications.visible(),
            modal=self.modal.current,
        )

    def _check_open(self) -> None:
        if self._closed:
            raise SessionClosedError(f"Session {self.id} is closed")
