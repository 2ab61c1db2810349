"""Single-slot modal dialog controller.

At most one modal is shown per session. Showing another replaces it outright;
nothing is queued.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Literal

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ModalSize = Literal["s", "m", "l", "xl"]


class ModalAction(BaseModel):
    """A footer button.

    Buttons with an ``input_id`` are ordinary action-button inputs: clicking
    them runs whatever observers are bound to that id. A ``dismiss`` button
    closes the modal itself.
    """

    label: str
    input_id: str | None = None
    dismiss: bool = False


class Modal(BaseModel):
    title: str | None = None
    body: object = None
    footer: list[ModalAction] = Field(
        default_factory=lambda: [ModalAction(label="Dismiss", dismiss=True)]
    )
    easy_close: bool = False
    size: ModalSize = "m"
    fade: bool = True


class ModalController:
    def __init__(self, *, send: Callable[[dict[str, object]], None]) -> None:
        self._send = send
        self._current: Modal | None = None

    @property
    def current(self) -> Modal | None:
        return self._current

    def show(self, modal: Modal) -> None:
        replaced = self._current is not None
        self._current = modal
        logger.debug("Modal shown", extra={"title": modal.title, "replaced": replaced})
        self._send({"type": "modal", "action": "show", "modal": modal.model_dump(mode="json")})

    def remove(self) -> None:
        if self._current is None:
            return
        self._current = None
        logger.debug("Modal removed")
        self._send({"type": "modal", "action": "remove"})

    def dismiss(self) -> bool:
        """User clicked outside the dialog or pressed Escape."""

        if self._current is None or not self._current.easy_close:
            return False
        self.remove()
        return True

    def press_dismiss_button(self) -> bool:
        """User clicked a footer ``dismiss`` button."""

        if self._current is None:
            return False
        if not any(action.dismiss for action in self._current.footer):
            return False
        self.remove()
        return True
