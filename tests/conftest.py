"""Test configuration and fixtures."""

from __future__ import annotations

import pytest

from reactive_feedback.feedback.config import FeedbackSettings
from reactive_feedback.session.session import Session


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Provide a clock that only moves when told to."""
    return FakeClock()


@pytest.fixture
def settings() -> FeedbackSettings:
    """Provide settings that ignore any local `.env` file."""
    return FeedbackSettings(_env_file=None)


@pytest.fixture
def session(settings: FeedbackSettings, clock: FakeClock) -> Session:
    """Provide a fresh session driven by the fake clock."""
    return Session(settings, clock=clock)
