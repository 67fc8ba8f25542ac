"""Diagnostics: structured logging and Sentry error reporting.

Layers:
1. Structured JSON logging with RotatingFileHandler
2. Sentry SDK, enabled only when PIXELFX_SENTRY_DSN is set
"""

import datetime
import json
import logging
import logging.handlers
import os
from pathlib import Path

import sentry_sdk

logger = logging.getLogger(__name__)

# Maximum log age in days
MAX_LOG_AGE_DAYS = 7

LOG_FILE_NAME = "pixelfx.log"


def _validate_log_dir(env_dir: str) -> str:
    """Validate PIXELFX_LOG_DIR is under ~/.pixelfx. Returns safe path."""
    default = os.path.expanduser("~/.pixelfx/logs")
    if env_dir:
        resolved = os.path.realpath(env_dir)
        allowed = os.path.realpath(os.path.expanduser("~/.pixelfx"))
        if not resolved.startswith(allowed + os.sep) and resolved != allowed:
            logger.warning("PIXELFX_LOG_DIR outside allowed prefix, using default")
            return default
        return resolved
    return default


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created, tz=datetime.timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(log_entry)


def _cleanup_old_logs(log_dir: str):
    """Delete log files older than MAX_LOG_AGE_DAYS."""
    cutoff = datetime.datetime.now() - datetime.timedelta(days=MAX_LOG_AGE_DAYS)
    try:
        for f in Path(log_dir).glob(f"{LOG_FILE_NAME}*"):
            if f.stat().st_mtime < cutoff.timestamp():
                f.unlink(missing_ok=True)
    except OSError as e:
        logger.debug("Log cleanup skipped: %s", e)


def setup_structured_logging(log_dir: str | None = None) -> str:
    """Configure structured JSON logging with rotation.

    Args:
        log_dir: Override log directory (validated against ~/.pixelfx prefix).

    Returns:
        The directory logs are written to.
    """
    resolved_dir = _validate_log_dir(log_dir or os.environ.get("PIXELFX_LOG_DIR", ""))
    os.makedirs(resolved_dir, mode=0o700, exist_ok=True)

    log_path = os.path.join(resolved_dir, LOG_FILE_NAME)
    log_level = os.environ.get("PIXELFX_LOG_LEVEL", "INFO").upper()

    # Rotating handler: 10MB max, 7 backups
    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10_000_000,
        backupCount=7,
    )
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level, logging.INFO))
    root.addHandler(handler)

    _cleanup_old_logs(resolved_dir)

    return resolved_dir


def init_sentry(dsn: str | None = None):
    """Initialise Sentry. An empty DSN leaves reporting disabled."""
    sentry_sdk.init(
        dsn=dsn if dsn is not None else os.environ.get("PIXELFX_SENTRY_DSN", ""),
        environment=os.environ.get("PIXELFX_ENV", "development"),
        max_breadcrumbs=50,
    )


def init_diagnostics(log_dir: str | None = None) -> str:
    """Initialize logging and error reporting. Call once from the host application."""
    resolved_dir = setup_structured_logging(log_dir)
    init_sentry()
    logger.info("Diagnostics initialized: logging=%s", resolved_dir)
    return resolved_dir
