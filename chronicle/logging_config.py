"""
Logging setup for chronicle.

Every chronicle.* logger writes to one rotating file at DEBUG and to stderr
at WARNING (or the console level passed in). Mutations, parses, history
moves and subscriber deliveries each log one pipe-delimited line through
the helpers below, e.g.:

    TIME | parsed | 2847-01-01 12:00 -> 2847-05-15 07:00 | +158d

Call setup_logging(log_dir) once from the entry point.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime


ROOT_LOGGER_NAME = "chronicle"
LOG_FILE_NAME = "chronicle.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

FILE_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-35s | %(funcName)-25s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"

_banner_written = False


def _file_handler(log_path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT))
    return handler


def setup_logging(
    log_dir: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Attach the file and console handlers to the chronicle logger.

    Calling it again swaps the handlers (closing the old ones), so a test
    or a CLI run can point the log somewhere else.

    Args:
        log_dir: Directory for chronicle.log; created if missing
        log_level: File handler level
        console_level: stderr handler level

    Returns:
        Path to the log file
    """
    global _banner_written

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / LOG_FILE_NAME

    chronicle_logger = logging.getLogger(ROOT_LOGGER_NAME)
    chronicle_logger.setLevel(logging.DEBUG)
    for old in list(chronicle_logger.handlers):
        old.close()
        chronicle_logger.removeHandler(old)

    chronicle_logger.addHandler(_file_handler(log_path, log_level))
    chronicle_logger.addHandler(_console_handler(console_level))

    if not _banner_written:
        chronicle_logger.info("=" * 80)
        chronicle_logger.info(f"Chronicle session log opened {datetime.now().isoformat()}")
        chronicle_logger.info(f"Writing to {log_path.absolute()}")
        chronicle_logger.info("=" * 80)
        _banner_written = True

    return log_path


def get_logger(name: str) -> logging.Logger:
    """Logger for name, placed under the chronicle namespace if it is not already."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_narrative(
    logger: logging.Logger,
    status: str,
    confidence: str | None = None,
    details: str | None = None,
) -> None:
    """Log a narrative parse and what came of it."""
    confidence_str = f" | confidence={confidence}" if confidence else ""
    details_str = f" | {details}" if details else ""
    logger.debug(f"NARRATIVE | {status}{confidence_str}{details_str}")


def log_time_advance(
    logger: logging.Logger,
    source: str,
    before: str,
    after: str,
    days_delta: int = 0,
) -> None:
    """Log a change of the in-world clock."""
    delta_str = f" | +{days_delta}d" if days_delta else ""
    logger.info(f"TIME | {source} | {before} -> {after}{delta_str}")


def log_subscriber(
    logger: logging.Logger,
    subscriber_id: str,
    action: str,
    details: str | None = None,
) -> None:
    """Log subscriber registration and delivery."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"SUBSCRIBER | {subscriber_id} | {action}{details_str}")


def log_history(
    logger: logging.Logger,
    action: str,
    depth: int,
    details: str | None = None,
) -> None:
    """Log undo history pushes and pops."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"HISTORY | {action} | depth={depth}{details_str}")


def log_storage(
    logger: logging.Logger,
    operation: str,
    path: Path | str | None = None,
    success: bool = True,
    details: str | None = None,
) -> None:
    """Log export/import of the state document."""
    status = "OK" if success else "FAILED"
    path_str = f" | {path}" if path else ""
    details_str = f" | {details}" if details else ""
    logger.debug(f"STORAGE | {operation}{path_str} | {status}{details_str}")


def log_observer_cmd(
    logger: logging.Logger,
    command: str,
    details: str | None = None,
) -> None:
    """Log facade commands."""
    details_str = f" | {details}" if details else ""
    logger.info(f"OBSERVER_CMD | {command}{details_str}")
