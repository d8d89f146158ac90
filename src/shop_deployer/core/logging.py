"""Loguru logging configuration for the deployer.

Everything is logged as text to stderr. Records bound with
``json_output=True`` are deployment events (one per recorded deployment)
and are additionally serialized as JSON lines, so a deploy log can be
replayed or shipped without parsing the text format. With a ``log_dir``
both streams are also written to files there.
"""

import sys
from pathlib import Path

from loguru import logger

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"

LOG_FILE_NAME = "shop-deployer.log"
EVENTS_FILE_NAME = "deployments.jsonl"


def _is_deployment_event(record) -> bool:
    return bool(record["extra"].get("json_output", False))


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Configure Loguru sinks.

    Args:
        log_level: Minimum log level to emit, case-insensitive.
        log_dir: Optional directory for log files. When set, a text log
            rotated every 24 hours (kept 7 days) and a JSON lines file of
            deployment events are written there.
    """
    level = log_level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=_LOG_FORMAT)
    logger.add(sys.stderr, level=level, serialize=True, filter=_is_deployment_event)

    if not log_dir:
        return

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_path / LOG_FILE_NAME,
        level=level,
        format=_LOG_FORMAT,
        rotation="24h",
        retention="7 days",
    )
    logger.add(
        log_path / EVENTS_FILE_NAME,
        level=level,
        serialize=True,
        filter=_is_deployment_event,
        rotation="10 MB",
    )
