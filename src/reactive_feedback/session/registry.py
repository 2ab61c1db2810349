"""Connected sessions, looked up by id.

Each session owns its own notification stack and modal. The registry only
hands them out; it never shares feedback state between sessions.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from reactive_feedback.feedback.config import FeedbackSettings
from reactive_feedback.session.session import Session

logger = logging.getLogger(__name__)

SessionSetup = Callable[[Session], None]


@dataclass(frozen=True, slots=True)
class SessionNotFound(Exception):
    session_id: str

    def __str__(self) -> str:
        return f"Session not found: {self.session_id}"


@dataclass(frozen=True, slots=True)
class SessionLimitReached(Exception):
    limit: int

    def __str__(self) -> str:
        return f"Session limit reached ({self.limit})"


class SessionRegistry:
    def __init__(
        self,
        *,
        setup: SessionSetup,
        settings: FeedbackSettings,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._setup = setup
        self._settings = settings
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def connect(self) -> Session:
        """Create a session, wire it with ``setup`` and render it once."""

        with self._lock:
            if len(self._sessions) >= self._settings.max_sessions:
                raise SessionLimitReached(self._settings.max_sessions)
            session = Session(self._settings, clock=self._clock)
            self._sessions[session.id] = session

        # The session is already visible to get(); hold its lock so no request
        # touches it before setup and the first flush are done.
        try:
            with session.lock:
                self._setup(session)
                session.flush()
        except Exception:
            logger.exception("Session setup failed", extra={"session_id": session.id})
            self.disconnect(session.id)
            raise

        logger.info("Session connected", extra={"session_id": session.id})
        return session

    def get(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def disconnect(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFound(session_id)
        with session.lock:
            session.close()
