"""Reactive Feedback.

User feedback primitives for server-driven reactive UIs:
- `require` / `validate` to suspend or fail a computation
- per-session notifications, progress indicators and modal dialogs
- a minimal reactive session and a REST adapter to drive it
"""

__version__ = "0.1.0"

from reactive_feedback.feedback.config import FeedbackSettings
from reactive_feedback.feedback.gate import need, require, validate, validate_needs
from reactive_feedback.feedback.progress import ProgressTracker
from reactive_feedback.session.session import Session

__all__ = [
    "__version__",
    "FeedbackSettings",
    "ProgressTracker",
    "Session",
    "need",
    "require",
    "validate",
    "validate_needs",
]
