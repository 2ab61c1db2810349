"""Identity-addressed notification stack for one session.

Notifications are keyed by id. Showing with an existing id updates that
notification in place (it keeps its position in the stack); showing without
an id creates a new one and returns the generated id.

Expiry is driven by the session tick (:meth:`FeedbackChannel.expire`), never by
a background timer.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from reactive_feedback.feedback.config import NotificationOrder

logger = logging.getLogger(__name__)

NotificationLevel = Literal["info", "warning", "error"]


class _Unset(Enum):
    UNSET = "unset"


UNSET = _Unset.UNSET


class Notification(BaseModel):
    id: str
    message: str
    level: NotificationLevel = "info"
    # 0 means "gone on the next tick".
    duration_seconds: float | None = Field(default=None, ge=0)
    dismissible: bool = True

    # Creation order; unchanged by updates.
    seq: int = Field(default=0, exclude=True)


class FeedbackChannel:
    """Notification stack with create/update/remove and auto-expiry."""

    def __init__(
        self,
        *,
        send: Callable[[dict[str, object]], None],
        default_duration: float = 5.0,
        order: NotificationOrder = "newest_last",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._send = send
        self._default_duration = default_duration
        self._order = order
        self._clock = clock
        self._items: dict[str, Notification] = {}
        self._deadlines: dict[str, float] = {}
        self._next_seq = 0

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, notification_id: object) -> bool:
        return notification_id in self._items

    def get(self, notification_id: str) -> Notification | None:
        return self._items.get(notification_id)

    def show(
        self,
        message: str,
        *,
        level: NotificationLevel = "info",
        duration: float | None | _Unset = UNSET,
        dismissible: bool = True,
        id: str | None = None,  # noqa: A002 (matches the wire field)
    ) -> str:
        """Create or update a notification and return its id.

        ``duration=None`` keeps the notification until it is removed or
        dismissed. Zero or negative durations expire on the next tick. Each
        call restarts the expiry countdown.
        """

        notification_id = id or uuid.uuid4().hex
        seconds = self._default_duration if duration is UNSET else duration
        if seconds is not None:
            seconds = max(0.0, seconds)

        existing = self._items.get(notification_id)
        if existing is None:
            seq = self._next_seq
            self._next_seq += 1
        else:
            seq = existing.seq

        notification = Notification(
            id=notification_id,
            message=message,
            level=level,
            duration_seconds=seconds,
            dismissible=dismissible,
            seq=seq,
        )
        self._items[notification_id] = notification

        if seconds is None:
            self._deadlines.pop(notification_id, None)
        else:
            self._deadlines[notification_id] = self._clock() + seconds

        logger.debug(
            "Notification shown",
            extra={
                "notification_id": notification_id,
                "level": level,
                "updated": existing is not None,
            },
        )
        self._send(
            {
                "type": "notification",
                "action": "show",
                "notification": notification.model_dump(mode="json"),
            }
        )
        return notification_id

    def remove(self, notification_id: str) -> None:
        """Remove a notification. Unknown ids are ignored."""

        if self._items.pop(notification_id, None) is None:
            return
        self._deadlines.pop(notification_id, None)
        logger.debug("Notification removed", extra={"notification_id": notification_id})
        self._send({"type": "notification", "action": "remove", "id": notification_id})

    def dismiss(self, notification_id: str) -> bool:
        """User-initiated close. Only dismissible notifications go away."""

        notification = self._items.get(notification_id)
        if notification is None or not notification.dismissible:
            return False
        self.remove(notification_id)
        return True

    def expire(self, now: float | None = None) -> list[str]:
        """Remove every notification whose deadline has passed."""

        current = self._clock() if now is None else now
        expired = [nid for nid, deadline in self._deadlines.items() if deadline <= current]
        for nid in expired:
            self.remove(nid)
        return expired

    def clear(self) -> None:
        for nid in list(self._items):
            self.remove(nid)

    def visible(self) -> list[Notification]:
        """Notifications in display order."""

        items = sorted(self._items.values(), key=lambda n: n.seq)
        if self._order == "newest_first":
            items.reverse()
        return items
