#!/usr/bin/env python3
"""Programmatic session example.

This demonstrates using the feedback primitives directly, without HTTP:

* wire an output that waits for its inputs with `require`
* report a validation failure in place of the output
* run a slow observer with a progress tracker and a notification
* print the UI messages a renderer would receive
"""

from __future__ import annotations

import argparse
import json
from typing import Sequence

from reactive_feedback import ProgressTracker, Session, require, validate
from reactive_feedback.feedback.config import FeedbackSettings
from reactive_feedback.feedback.logging import configure_logging
from reactive_feedback.feedback.task import TaskContext


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drive a feedback session from code.")
    parser.add_argument("--dataset", default="", help="Dataset name (empty means 'not chosen')")
    parser.add_argument("--rows", type=int, default=5, help="Rows to load")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = FeedbackSettings()
    configure_logging(settings.log_level)

    session = Session(settings)
    session.set_input("dataset", args.dataset)
    session.set_input("rows", args.rows)

    @session.output("summary")
    def summary(_ctx: TaskContext) -> str:
        dataset = session.inputs["dataset"]
        rows = session.inputs["rows"]
        require(dataset)
        if rows < 0:
            validate("rows can not be negative")
        return f"{dataset}: {rows} rows"

    @session.observe_event("load")
    def load(ctx: TaskContext) -> None:
        require(session.inputs["dataset"])
        rows = session.inputs["rows"]
        with ProgressTracker(ctx, max=max(rows, 1), message="Loading rows") as progress:
            for i in range(rows):
                progress.inc(1, detail=f"row {i + 1}")
        session.notifications.show(f"Loaded {rows} rows", id="load")

    session.flush()
    session.click("load")
    session.flush()

    print(json.dumps(session.snapshot().model_dump(mode="json"), indent=2))
    for message in session.drain_messages():
        print(json.dumps(message))
    session.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
