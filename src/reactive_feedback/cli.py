"""Console script shim; the CLI lives in `reactive_feedback.feedback.main`."""

from __future__ import annotations

from reactive_feedback.feedback.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
