"""Diagnostics — JSON log file plus terse stderr output for the CLI."""

import datetime
import json
import logging
import logging.handlers
import os
import sys

logger = logging.getLogger(__name__)

APP_DIR = "~/.pixelsort"
LOG_NAME = "pixelsort.log"


def _validate_log_dir(env_dir: str) -> str:
    """Keep PIXELSORT_LOG_DIR inside ~/.pixelsort, else fall back to the default."""
    base = os.path.expanduser(APP_DIR)
    default = os.path.join(base, "logs")
    if not env_dir:
        return default
    resolved = os.path.realpath(env_dir)
    allowed = os.path.realpath(base)
    if resolved != allowed and not resolved.startswith(allowed + os.sep):
        logger.warning("PIXELSORT_LOG_DIR outside %s, using default", APP_DIR)
        return default
    return resolved


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created, tz=datetime.timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry)


def setup_logging(log_dir: str | None = None, level: str | None = None) -> str:
    """Attach a rotating JSON file handler and a WARNING-level stderr handler.

    Args:
        log_dir: Override log directory (validated against ~/.pixelsort).
        level:   Root level name; defaults to PIXELSORT_LOG_LEVEL or INFO.

    Returns:
        The resolved log directory.
    """
    resolved_dir = _validate_log_dir(log_dir or os.environ.get("PIXELSORT_LOG_DIR", ""))
    os.makedirs(resolved_dir, mode=0o700, exist_ok=True)
    level_name = (level or os.environ.get("PIXELSORT_LOG_LEVEL", "INFO")).upper()

    # 10MB per file, 7 backups
    file_handler = logging.handlers.RotatingFileHandler(
        os.path.join(resolved_dir, LOG_NAME), maxBytes=10_000_000, backupCount=7
    )
    file_handler.setFormatter(JSONFormatter())

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    console.setLevel(logging.WARNING)

    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    root.addHandler(file_handler)
    root.addHandler(console)
    return resolved_dir


def init_diagnostics(level: str | None = None) -> str:
    """Call once from main.py before sorting."""
    log_dir = setup_logging(level=level)
    logger.info("Logging to %s", log_dir)
    return log_dir
