"""Configuration for the feedback subsystem.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Nothing here is required; every setting has a usable default so a session can
start without any configuration.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NotificationOrder = Literal["newest_last", "newest_first"]
ProgressOverflow = Literal["permit", "clamp", "error"]

DEFAULT_GENERIC_ERROR_MESSAGE = (
    "An error has occurred. Check your logs or contact the app author for clarification."
)


class FeedbackSettings(BaseSettings):
    """Settings for sessions, notifications, progress and the HTTP adapter.

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `FeedbackSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    notification_duration_seconds: float = Field(
        default=5.0,
        gt=0,
        validation_alias="FEEDBACK_NOTIFICATION_DURATION_SECONDS",
        description="Lifetime of a notification when the caller does not pass a duration",
    )
    notification_order: NotificationOrder = Field(
        default="newest_last",
        validation_alias="FEEDBACK_NOTIFICATION_ORDER",
        description="Whether the most recent notification is rendered last or first",
    )

    progress_overflow: ProgressOverflow = Field(
        default="permit",
        validation_alias="FEEDBACK_PROGRESS_OVERFLOW",
        description=(
            "What progress does when advanced past its maximum: 'permit' keeps the raw "
            "value, 'clamp' pins it to the bounds, 'error' raises."
        ),
    )

    generic_error_message: str = Field(
        default=DEFAULT_GENERIC_ERROR_MESSAGE,
        validation_alias="FEEDBACK_GENERIC_ERROR_MESSAGE",
        description="Text shown in an output whose task failed unexpectedly",
    )

    max_sessions: int = Field(
        default=100,
        ge=1,
        validation_alias="FEEDBACK_MAX_SESSIONS",
        description="Maximum number of concurrently connected sessions",
    )

    max_outbox_messages: int = Field(
        default=1000,
        ge=1,
        validation_alias="FEEDBACK_MAX_OUTBOX_MESSAGES",
        description="Undrained UI messages kept per session; the oldest are dropped first",
    )

    # Dev-friendly CORS. Override via FEEDBACK_CORS_ORIGINS=...
    cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        validation_alias="FEEDBACK_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
