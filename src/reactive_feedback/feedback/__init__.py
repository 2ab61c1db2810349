"""Feedback primitives.

This package holds the parts a task talks to directly:
- signals (suspend / validation failure / fatal) and the task runner
- gates (`require`, `validate`)
- notifications, progress trackers and the modal controller

None of it knows about HTTP or about how a session schedules tasks.
"""

__all__: list[str] = []
