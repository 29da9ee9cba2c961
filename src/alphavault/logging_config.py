"""
Logging configuration for the AlphaVault dashboard service.

Keeps application loggers at the requested level while holding chatty
HTTP client and server libraries at WARNING.
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "urllib3",
    "asyncio",
    "uvicorn.access",
)


def configure_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    enable_file_logging: bool = False,
    enable_console_logging: bool = True,
) -> None:
    """
    Configure root logging for the service.

    Args:
        log_level: Application logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None and enable_file_logging=True,
                 creates logs/alphavault_YYYYMMDD.log
        enable_file_logging: Whether to log to file
        enable_console_logging: Whether to log to console

    Example:
        >>> from alphavault.logging_config import configure_logging
        >>> configure_logging(log_level="INFO")
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    handlers: list[logging.Handler] = []

    if enable_console_logging:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handlers.append(console_handler)

    if enable_file_logging:
        if log_file is None:
            log_dir = Path("logs")
            log_dir.mkdir(exist_ok=True)
            log_file = log_dir / f"alphavault_{datetime.now().strftime('%Y%m%d')}.log"

        # File captures everything the application emits
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handlers.append(file_handler)

    root_level = logging.DEBUG if enable_file_logging else level
    logging.basicConfig(level=root_level, handlers=handlers, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    app_level = logging.DEBUG if enable_file_logging else level
    logging.getLogger("alphavault").setLevel(app_level)
    logging.getLogger("__main__").setLevel(app_level)

    logger = logging.getLogger(__name__)
    logger.info("Logging configured (level=%s, file=%s)", log_level.upper(), log_file if enable_file_logging else None)
