"""
Logging bootstrap for the CLI.
Installs a JSONL file sink when a log path is configured, otherwise a stderr
stream handler. Debug mode turns on the step-by-step resolution trace.
"""

import json
import logging
import os
import sys
from datetime import UTC
from datetime import datetime
from pathlib import Path

LOG_PATH_ENV_VAR = "OPEN_IMPORT_FILE_LOG_PATH"
LOG_LEVEL_ENV_VAR = "OPEN_IMPORT_FILE_LOG_LEVEL"

PACKAGE_LOGGER = "open_import_file"

_RESERVED_ATTRS = frozenset(
    (
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
    )
)


class JsonlHandler(logging.Handler):
    """Appends one JSON object per log record to a file."""

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            base = {
                "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
                "lvl": record.levelname,
                "schema": {"name": "open_import_file.log", "ver": "1.0.0"},
                "logger": record.name,
                "message": record.getMessage(),
            }
            for k, v in record.__dict__.items():
                if k in _RESERVED_ATTRS:
                    continue
                base.setdefault(k, v)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(base, ensure_ascii=False, default=str) + "\n")
        except Exception:
            self.handleError(record)


def init_logging(path: str | None = None, level: str | None = None, debug: bool = False) -> logging.Handler:
    """Attach the CLI log handler to the package logger.

    Args:
        path: JSONL log file (default: $OPEN_IMPORT_FILE_LOG_PATH, else stderr)
        level: Level name (default: $OPEN_IMPORT_FILE_LOG_LEVEL, else WARNING)
        debug: Force DEBUG level for resolution tracing

    Returns:
        The installed handler
    """
    path = path or os.environ.get(LOG_PATH_ENV_VAR)
    level = "DEBUG" if debug else (level or os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING")).upper()

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level, logging.WARNING))

    # Remove handlers from earlier calls to avoid duplicates
    for h in list(logger.handlers):
        if getattr(h, "_open_import_file", False):
            logger.removeHandler(h)
            h.close()

    if path:
        handler: logging.Handler = JsonlHandler(path)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler._open_import_file = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return handler
