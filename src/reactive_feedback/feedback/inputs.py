"""Input value types with feedback-specific meaning."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ActionButtonValue:
    """Value of an action-button input.

    A button that has never been clicked is "not ready" for :func:`require`,
    even though its click count is a number.
    """

    clicks: int = 0

    def clicked(self) -> ActionButtonValue:
        return ActionButtonValue(clicks=self.clicks + 1)
