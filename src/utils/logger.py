"""
Logging Configuration
"""

from loguru import logger
import sys
from pathlib import Path

from src.config.settings import settings

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

_configured = False


def setup_logger():
    """
    Configure console, application, error and audit sinks

    Every module calls this at import time; sinks are only added once.

    Returns:
        logger: Configured logger instance
    """
    global _configured
    if _configured:
        return logger

    logger.remove()

    log_dir = Path(settings.LOG_FILE).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=settings.LOG_LEVEL, colorize=True)

    logger.add(
        settings.LOG_FILE,
        format=FILE_FORMAT,
        level=settings.LOG_LEVEL,
        rotation="10 MB",
        retention="30 days",
        compression="zip"
    )

    logger.add(
        str(log_dir / "error.log"),
        format=FILE_FORMAT,
        level="ERROR",
        rotation="10 MB",
        retention="90 days",
        compression="zip"
    )

    # Submissions, signatures and settings changes only
    logger.add(
        str(log_dir / "audit.log"),
        format="{time:YYYY-MM-DD HH:mm:ss} | {message}",
        filter=lambda record: "AUDIT" in record["extra"],
        rotation="10 MB",
        retention="365 days",
        compression="zip"
    )

    _configured = True
    return logger


def log_audit(user_id: str, action: str, details: str):
    """
    Write one line to the audit trail

    Args:
        user_id: Acting user id
        action: e.g. CREATED_REPORT, APPROVE_REPORT, REPLACE_MATRIX
        details: Free-form key=value details
    """
    logger.bind(AUDIT=True).info(f"USER_ID={user_id} | ACTION={action} | DETAILS={details}")
