"""Logging setup for stagegate.

Status lines for the committer are printed directly; this logger carries
diagnostics. Everything goes to stderr so git shows it next to the hook's
own output.

Configuration via environment variables:
  STAGEGATE_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: WARNING)
  STAGEGATE_LOG_FILE: optional path to also write JSON log lines to a file
"""

from __future__ import annotations

import json
import logging
import os
import sys

ROOT_LOGGER = "stagegate"


class _JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        return json.dumps(entry, default=str, ensure_ascii=False)


_CONFIGURED = False


def configure_logging() -> logging.Logger:
    """Configure the stagegate root logger (idempotent)."""
    global _CONFIGURED  # noqa: PLW0603
    root = logging.getLogger(ROOT_LOGGER)
    if _CONFIGURED:
        return root
    _CONFIGURED = True

    level_name = os.environ.get("STAGEGATE_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    root.setLevel(level)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(logging.Formatter("stagegate: %(levelname)s: %(message)s"))
    root.addHandler(stderr_handler)

    log_file = os.environ.get("STAGEGATE_LOG_FILE")
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(_JSONFormatter())
        root.addHandler(file_handler)

    root.propagate = False
    return root
