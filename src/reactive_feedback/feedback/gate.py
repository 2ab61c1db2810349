"""Readiness gates and validation for reactive tasks.

``require`` suspends a task quietly when its inputs are incomplete;
``validate`` fails it with a message the user should see.

Truthiness here is an explicit policy rather than Python's ``bool()``:
numeric zero is a perfectly good value, an empty string is not.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sized

from reactive_feedback.feedback.inputs import ActionButtonValue
from reactive_feedback.feedback.signals import Suspend, TaskAborted, ValidationFailure


def _is_missing(value: object) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def is_truthy(value: object) -> bool:
    """Return whether ``value`` counts as "ready".

    Not ready:
      - ``None``, ``False`` and float NaN
      - empty strings and other empty sized collections
      - collections whose every element is missing (``None`` / NaN)
      - exception instances (a captured failed computation)
      - an action button that has never been clicked

    Everything else is ready, including ``0`` and negative numbers.
    """

    if _is_missing(value) or value is False:
        return False
    if isinstance(value, BaseException):
        return False
    if isinstance(value, ActionButtonValue):
        return value.clicks > 0
    if isinstance(value, (str, bytes)):
        return len(value) > 0
    if isinstance(value, Sized):
        if len(value) == 0:
            return False
        if isinstance(value, Iterable) and not isinstance(value, dict):
            return not all(_is_missing(item) for item in value)
    return True


def require(*conditions: object, cancel_output: bool = False) -> None:
    """Suspend the current task at the first condition that is not ready.

    Conditions after the first failing one are not inspected.
    """

    for condition in conditions:
        if not is_truthy(condition):
            raise TaskAborted(Suspend(cancel_output=cancel_output))


def validate(message: str) -> None:
    """Fail the current task; the nearest output shows ``message``."""

    raise TaskAborted(ValidationFailure(message=message))


def need(condition: object, message: str) -> str | None:
    """Return ``message`` when ``condition`` is not ready, else ``None``."""

    if is_truthy(condition):
        return None
    return message


def validate_needs(*results: str | None) -> None:
    """Fail with every collected :func:`need` message, one per line.

    Falls through when every result is ``None``.
    """

    messages = [r for r in results if r is not None]
    if messages:
        validate("\n".join(messages))
