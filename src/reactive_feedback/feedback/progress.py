"""Progress reporting for long-running tasks.

A :class:`ProgressTracker` belongs to the task that created it. Construction
registers ``close`` with that task's cleanup list, so the indicator is torn
down however the task exits. Nothing is shown to the user until the first
``set``/``inc``.
"""

from __future__ import annotations

import logging
import uuid
from enum import Enum
from types import TracebackType

from reactive_feedback.feedback.config import ProgressOverflow
from reactive_feedback.feedback.task import TaskContext

logger = logging.getLogger(__name__)


class ProgressState(str, Enum):
    CREATED = "created"
    ACTIVE = "active"
    CLOSED = "closed"


class ProgressClosedError(RuntimeError):
    pass


class ProgressOwnershipError(RuntimeError):
    pass


class ProgressOverflowError(ValueError):
    pass


class ProgressTracker:
    """Completion tracker for one operation.

    Args:
        task: The owning task. Only this task may advance the tracker.
        max: Value that represents completion.
        min: Value that represents no progress.
        message: Headline shown once the tracker becomes visible.
        detail: Secondary text shown under the message.
        overflow: What to do with values outside ``[min, max]``.
    """

    def __init__(
        self,
        task: TaskContext,
        *,
        max: float = 1.0,  # noqa: A002
        min: float = 0.0,  # noqa: A002
        message: str = "",
        detail: str = "",
        overflow: ProgressOverflow = "permit",
    ) -> None:
        if max <= min:
            raise ValueError(f"Progress max ({max}) must be greater than min ({min})")

        self.id = uuid.uuid4().hex
        self.owner = task
        self.min = min
        self.max = max
        self.current = min
        self.message = message
        self.detail = detail
        self.overflow = overflow
        self._state = ProgressState.CREATED

        task.on_exit(self.close)

    @property
    def state(self) -> ProgressState:
        return self._state

    @property
    def fraction(self) -> float:
        """Completion fraction. May exceed 1.0 when overflow is permitted."""

        return (self.current - self.min) / (self.max - self.min)

    def set(
        self,
        value: float,
        *,
        message: str | None = None,
        detail: str | None = None,
    ) -> None:
        """Move to an absolute position."""

        self._check_usable()
        self.current = self._bounded(value)
        self._publish(message=message, detail=detail)

    def inc(
        self,
        amount: float = 0.1,
        *,
        message: str | None = None,
        detail: str | None = None,
    ) -> None:
        """Advance relative to the current position."""

        self._check_usable()
        self.current = self._bounded(self.current + amount)
        self._publish(message=message, detail=detail)

    def close(self) -> None:
        """Tear down the indicator. Safe to call more than once."""

        if self._state is ProgressState.CLOSED:
            return
        was_visible = self._state is ProgressState.ACTIVE
        self._state = ProgressState.CLOSED
        if was_visible:
            self.owner.emit({"type": "progress", "action": "close", "id": self.id})
        logger.debug(
            "Progress closed",
            extra={"progress_id": self.id, "task": self.owner.name, "visible": was_visible},
        )

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _check_usable(self) -> None:
        if self._state is ProgressState.CLOSED:
            raise ProgressClosedError(f"Progress {self.id} is already closed")
        if not self.owner.is_current():
            raise ProgressOwnershipError(
                f"Progress {self.id} belongs to task {self.owner.name!r} and cannot be "
                "updated from another task"
            )

    def _bounded(self, value: float) -> float:
        if self.min <= value <= self.max or self.overflow == "permit":
            return value
        if self.overflow == "clamp":
            return min(self.max, max(self.min, value))
        raise ProgressOverflowError(
            f"Progress value {value} is outside [{self.min}, {self.max}]"
        )

    def _publish(self, *, message: str | None, detail: str | None) -> None:
        if message is not None:
            self.message = message
        if detail is not None:
            self.detail = detail

        if self._state is ProgressState.CREATED:
            self._state = ProgressState.ACTIVE
            self.owner.emit({"type": "progress", "action": "open", "id": self.id})

        self.owner.emit(
            {
                "type": "progress",
                "action": "update",
                "id": self.id,
                "message": self.message,
                "detail": self.detail,
                "value": self.current,
                "fraction": max(0.0, min(1.0, self.fraction)),
            }
        )
