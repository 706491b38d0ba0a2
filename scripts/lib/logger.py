"""
Logging for the Lead Dashboard API, CLI report and library modules.

Every logger writes `asctime | level | name | message` lines to stdout.
When LOG_TO_FILE is on (the default), the same lines are appended to
logs/YYYYMMDD_lead_dashboard.log, or under LOG_DIR when that is set.

Usage:
    from scripts.lib.logger import setup_logger
    logger = setup_logger(__name__)
    logger.info("Fetched %d leads", len(leads))
"""
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_LOG_DIR = PROJECT_ROOT / "logs"
LOG_FILE_SUFFIX = "lead_dashboard.log"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def resolve_level(level: Optional[str] = None) -> int:
    """Numeric level for a name such as "debug"; LOG_LEVEL, then INFO, by default."""
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def log_file_path(log_dir: Optional[Path] = None, day: Optional[datetime] = None) -> Path:
    """Daily log file, e.g. logs/20261018_lead_dashboard.log."""
    target_dir = Path(log_dir or os.getenv("LOG_DIR") or DEFAULT_LOG_DIR)
    stamp = (day or datetime.now()).strftime("%Y%m%d")
    return target_dir / f"{stamp}_{LOG_FILE_SUFFIX}"


def _handlers(log_to_file: bool, log_dir: Optional[Path]) -> list:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    handlers = [console]

    if log_to_file:
        path = log_file_path(log_dir)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    return handlers


def setup_logger(
    name: str,
    level: str = None,
    log_to_file: bool = None,
    log_dir: Path = None,
) -> logging.Logger:
    """
    Return the named logger, attaching console (and file) handlers once.

    Args:
        name: Logger name, usually __name__ or a short component name.
        level: Level name; defaults to LOG_LEVEL.
        log_to_file: Also write the daily file; defaults to LOG_TO_FILE.
        log_dir: Directory for the daily file; defaults to LOG_DIR or logs/.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(resolve_level(level))
    if log_to_file is None:
        log_to_file = _env_flag("LOG_TO_FILE", True)

    for handler in _handlers(log_to_file, log_dir):
        logger.addHandler(handler)
    return logger
