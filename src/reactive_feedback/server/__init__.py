"""FastAPI server adapter for reactive-feedback.

Design intent:
- Keep feedback semantics in `reactive_feedback.feedback.*` and `reactive_feedback.session.*`
- Keep server-specific concerns (routing, CORS, request locking) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from reactive_feedback.server.app import create_app
