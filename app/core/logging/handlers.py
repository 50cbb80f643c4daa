"""
Rotating file handlers, enabled when LOG_DIR is set
"""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict

from core.logging.filters import SensitiveDataFilter
from core.logging.formatters import EnhancedJSONFormatter


def _rotating_handler(path: Path, level: int, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        str(path),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(EnhancedJSONFormatter())
    handler.addFilter(SensitiveDataFilter())
    handler.setLevel(level)
    return handler


def setup_log_handlers(
    log_dir: str,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 30,
) -> Dict[str, logging.Handler]:
    """
    Build file handlers: app.log for everything, security.log for blocked attempts

    Args:
        log_dir: Directory for log files (created if missing)
        max_bytes: Maximum log file size
        backup_count: Number of backup files

    Returns:
        Handlers keyed by logger name
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    return {
        "app": _rotating_handler(log_path / "app.log", logging.INFO, max_bytes, backup_count),
        "security": _rotating_handler(log_path / "security.log", logging.WARNING, max_bytes, backup_count),
        "system": _rotating_handler(log_path / "system.log", logging.INFO, max_bytes, backup_count),
    }
