"""CLI entrypoint.

- `demo`: drive the demo app through a scripted session and print snapshots
- `serve`: serve the demo app over HTTP
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from reactive_feedback import __version__
from reactive_feedback.feedback.config import FeedbackSettings
from reactive_feedback.feedback.logging import configure_logging
from reactive_feedback.session.demo import setup_demo
from reactive_feedback.session.session import Session

logger = logging.getLogger(__name__)

# (label, input name, value); a value of None means "click the button".
DEMO_SCRIPT: list[tuple[str, str, object]] = [
    ("language set", "language", "English"),
    ("name set", "name", "Hadley"),
    ("negative x", "x", -1),
    ("positive x", "x", 10),
    ("compute clicked", "compute", None),
    ("delete clicked", "delete", None),
    ("delete confirmed", "delete_confirmed", None),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reactive-feedback",
        description="User feedback primitives for server-driven reactive UIs",
    )
    parser.add_argument(
        "--version", action="version", version=f"reactive-feedback {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("demo", help="Run the demo app through a scripted session")

    serve = subparsers.add_parser("serve", help="Serve the demo app over HTTP")
    serve.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve.add_argument("--port", type=int, default=8000, help="Port to bind")

    return parser


def _print_snapshot(label: str, session: Session) -> None:
    payload = {"step": label, "snapshot": session.snapshot().model_dump(mode="json")}
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def run_demo(settings: FeedbackSettings) -> int:
    session = Session(settings)
    setup_demo(session)
    session.flush()
    _print_snapshot("connected", session)

    for label, name, value in DEMO_SCRIPT:
        if value is None:
            session.click(name)
        else:
            session.set_input(name, value)
        session.flush()
        _print_snapshot(label, session)

    session.close()
    return 0


def run_server(settings: FeedbackSettings, *, host: str, port: int) -> int:
    import uvicorn

    from reactive_feedback.server.app import create_app

    app = create_app(setup_demo, settings)
    logger.info("Starting server", extra={"host": host, "port": port})
    uvicorn.run(app, host=host, port=port, log_config=None)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = FeedbackSettings()
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    if args.command == "demo":
        return run_demo(settings)
    if args.command == "serve":
        return run_server(settings, host=args.host, port=args.port)

    parser.error(f"Unknown command: {args.command}")
    return 2
