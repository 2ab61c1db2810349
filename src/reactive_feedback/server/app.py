"""FastAPI app factory.

Endpoints are thin wrappers over :class:`SessionRegistry`. Every request that
touches a session holds that session's lock, so requests against one session
never interleave.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from reactive_feedback import __version__
from reactive_feedback.feedback.config import FeedbackSettings
from reactive_feedback.server.models import DismissResponse, HealthResponse, SetInputRequest
from reactive_feedback.session.registry import (
    SessionLimitReached,
    SessionNotFound,
    SessionRegistry,
    SessionSetup,
)
from reactive_feedback.session.session import Session, SessionClosedError, SessionSnapshot


def create_app(
    setup: SessionSetup,
    settings: FeedbackSettings | None = None,
    *,
    clock: Callable[[], float] | None = None,
) -> FastAPI:
    settings = settings or FeedbackSettings()
    registry = SessionRegistry(setup=setup, settings=settings, clock=clock or time.monotonic)

    app = FastAPI(
        title="Reactive Feedback",
        version=__version__,
        description="REST API over per-session reactive feedback state.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.settings = settings
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @contextmanager
    def _locked(session_id: str) -> Iterator[Session]:
        try:
            session = registry.get(session_id)
        except SessionNotFound as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        with session.lock:
            if session.closed:
                raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
            try:
                yield session
            except SessionClosedError as e:
                raise HTTPException(status_code=404, detail=str(e)) from e

    @app.get("/api/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(version=__version__, sessions=len(registry))

    @app.post("/api/sessions", response_model=SessionSnapshot, status_code=201)
    def connect() -> SessionSnapshot:
        try:
            session = registry.connect()
        except SessionLimitReached as e:
            raise HTTPException(status_code=409, detail=str(e)) from e
        with session.lock:
            return session.snapshot()

    @app.delete("/api/sessions/{session_id}", status_code=204)
    def disconnect(session_id: str) -> None:
        try:
            registry.disconnect(session_id)
        except SessionNotFound as e:
            raise HTTPException(status_code=404, detail=str(e)) from e

    @app.get("/api/sessions/{session_id}", response_model=SessionSnapshot)
    def get_session(session_id: str) -> SessionSnapshot:
        with _locked(session_id) as session:
            session.tick()
            return session.snapshot()

    @app.post("/api/sessions/{session_id}/inputs", response_model=SessionSnapshot)
    def set_input(session_id: str, req: SetInputRequest) -> SessionSnapshot:
        with _locked(session_id) as session:
            session.set_input(req.name, req.value)
            session.flush()
            return session.snapshot()

    @app.post("/api/sessions/{session_id}/buttons/{input_id}", response_model=SessionSnapshot)
    def click(session_id: str, input_id: str) -> SessionSnapshot:
        with _locked(session_id) as session:
            session.click(input_id)
            session.flush()
            return session.snapshot()

    @app.post(
        "/api/sessions/{session_id}/notifications/{notification_id}/dismiss",
        response_model=DismissResponse,
    )
    def dismiss_notification(session_id: str, notification_id: str) -> DismissResponse:
        with _locked(session_id) as session:
            return DismissResponse(dismissed=session.notifications.dismiss(notification_id))

    @app.post("/api/sessions/{session_id}/modal/dismiss", response_model=DismissResponse)
    def dismiss_modal(session_id: str) -> DismissResponse:
        with _locked(session_id) as session:
            return DismissResponse(dismissed=session.modal.dismiss())

    @app.post("/api/sessions/{session_id}/modal/dismiss-button", response_model=DismissResponse)
    def press_modal_dismiss_button(session_id: str) -> DismissResponse:
        with _locked(session_id) as session:
            return DismissResponse(dismissed=session.modal.press_dismiss_button())

    @app.get("/api/sessions/{session_id}/messages")
    def drain_messages(session_id: str) -> list[dict[str, object]]:
        with _locked(session_id) as session:
            return session.drain_messages()

    return app
