"""Unit tests for readiness gates and validation."""

from __future__ import annotations

import pytest

from reactive_feedback.feedback.gate import is_truthy, need, require, validate, validate_needs
from reactive_feedback.feedback.inputs import ActionButtonValue
from reactive_feedback.feedback.signals import Suspend, TaskAborted, ValidationFailure


@pytest.mark.parametrize(
    "value",
    [
        None,
        False,
        "",
        b"",
        [],
        (),
        {},
        set(),
        float("nan"),
        [None, None],
        [None, float("nan")],
        ValueError("failed upstream"),
        ActionButtonValue(clicks=0),
    ],
)
def test_require_suspends_on_values_that_are_not_ready(value: object) -> None:
    with pytest.raises(TaskAborted) as excinfo:
        require(value)
    assert excinfo.value.signal == Suspend(cancel_output=False)


@pytest.mark.parametrize(
    "value",
    [
        0,
        0.0,
        -1,
        -0.5,
        "0",
        "text",
        True,
        [0],
        [None, 1],
        {"a": None},
        ActionButtonValue(clicks=1),
        object(),
    ],
)
def test_require_proceeds_on_ready_values(value: object) -> None:
    assert require(value) is None
    assert is_truthy(value)


def test_zero_is_ready_but_empty_string_is_not() -> None:
    require(0)
    with pytest.raises(TaskAborted):
        require("")


def test_require_short_circuits_at_first_falsy_condition() -> None:
    inspected: list[str] = []

    class Recorded:
        def __init__(self, name: str) -> None:
            self.name = name

        def __len__(self) -> int:
            inspected.append(self.name)
            return 1

        def __iter__(self):  # type: ignore[no-untyped-def]
            return iter([self.name])

    with pytest.raises(TaskAborted):
        require(Recorded("first"), "", Recorded("never"))

    assert inspected == ["first"]


def test_require_with_no_conditions_falls_through() -> None:
    require()


def test_require_carries_cancel_output_flag() -> None:
    with pytest.raises(TaskAborted) as excinfo:
        require("ready", None, cancel_output=True)
    assert excinfo.value.signal == Suspend(cancel_output=True)


def test_validate_always_raises_with_message() -> None:
    with pytest.raises(TaskAborted) as excinfo:
        validate("x can not be negative")
    assert excinfo.value.signal == ValidationFailure(message="x can not be negative")
    assert str(excinfo.value) == "x can not be negative"


def test_need_returns_message_only_when_not_ready() -> None:
    assert need("data", "Please pick a dataset") is None
    assert need(0, "Please pick a number") is None
    assert need("", "Please pick a dataset") == "Please pick a dataset"


def test_validate_needs_joins_failed_messages() -> None:
    validate_needs(None, None)

    with pytest.raises(TaskAborted) as excinfo:
        validate_needs(
            need("", "Please choose a state."),
            need("CA", "Please choose a county."),
            need(None, "Please choose a year."),
        )
    signal = excinfo.value.signal
    assert isinstance(signal, ValidationFailure)
    assert signal.message == "Please choose a state.\nPlease choose a year."
