"""Structured step logging utilities.

Responsibilities:
- Emit concise, deterministic step-level trace lines for normalization runs.
- Route output through a dedicated `loguru` sink.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class RunLogger:
    """Emit deterministic step logs for CLI-observable normalization activity."""

    def __init__(self, sink: TextIO | None = None, level: str = "DEBUG") -> None:
        """Attach a message-only sink bound to records emitted by this logger."""

        self._sink = sink or sys.stderr
        _loguru_logger.enable(__name__)
        self._logger = _loguru_logger.bind(slugforge_run=id(self))
        marker = id(self)
        self._handler_id = _loguru_logger.add(
            self._sink,
            format="{message}",
            level=level,
            colorize=False,
            filter=lambda record: record["extra"].get("slugforge_run") == marker,
        )

    def close(self) -> None:
        """Detach the sink."""

        _loguru_logger.remove(self._handler_id)

    def _emit(self, level: str, event: str, step: str, **context: object) -> None:
        """Emit one structured log line."""

        line = f"[step] level={level} step={step} event={event}{_format_context(context)}"
        self._logger.log(level, line)

    def log_step(self, step: str, text: str) -> None:
        """Emit a step-complete event with the resulting size."""

        self._emit(
            "DEBUG",
            "complete",
            step,
            chars=len(text),
            bytes=len(text.encode("utf-8", "surrogatepass")),
        )

    def log_run_complete(self, steps: int, slug: str) -> None:
        """Emit the end-of-run event."""

        self._emit("INFO", "complete", "normalize", steps=steps, chars=len(slug))

    def log_failure(self, step: str, error_type: str) -> None:
        """Emit a failure event without the offending input."""

        self._emit("ERROR", "failure", step, error_type=error_type)
