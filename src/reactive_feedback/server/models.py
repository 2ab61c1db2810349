"""Pydantic models for the REST server."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    sessions: int


class SetInputRequest(BaseModel):
    name: str = Field(min_length=1)
    value: object = None


class DismissResponse(BaseModel):
    dismissed: bool
