# gateway_addon/core/logging_config.py
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import List, Optional

from gateway_addon.core.config import settings

# Resolve log path relative to the project root to avoid surprises with CWD.
PROJECT_ROOT = Path(__file__).resolve().parents[2]

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]  %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("gateway_addon")

# Handlers installed by the last configure_logging() call.
_installed_handlers: List[logging.Handler] = []


def resolve_log_dir(log_dir: Optional[str] = None) -> Path:
    path = Path(log_dir if log_dir is not None else settings.LOG_DIR)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def configure_logging(log_dir: Optional[str] = None, level: Optional[str] = None) -> Path:
    """Install console + rotating file handlers on the root logger.

    Returns the path of the active log file.
    """
    level_name = (level or settings.LOG_LEVEL).strip().upper()
    log_level = logging.getLevelName(level_name)

    directory = resolve_log_dir(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_file_path = directory / "logs.log"

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    file_handler = TimedRotatingFileHandler(
        log_file_path,
        when="midnight",
        interval=1,
        backupCount=7,
        encoding="utf-8",
        delay=True,
    )
    file_handler.suffix = "%Y-%m-%d"
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    for handler in _installed_handlers:
        handler.close()
    _installed_handlers[:] = [file_handler, console_handler]

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logger.setLevel(log_level)

    root_logger.info(f"✅ Logging initialized. Writing logs to: {log_file_path}")
    root_logger.info(f"logging start time UTC: {datetime.now(timezone.utc).isoformat()}")

    return log_file_path


__all__ = ["configure_logging", "logger"]
