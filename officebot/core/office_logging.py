"""
Central logging configuration for officebot.

Keeps officebot modules at INFO (or DEBUG in debug mode) while suppressing
verbose debug output from aiohttp, httpx and the Slack SDKs.
"""

import logging
import os
from typing import Optional

from officebot.core.request_context import get_request_id


class CorrelationIdFilter(logging.Filter):
    """Add correlation ID to all log records for request tracing."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add correlation ID to log record.

        Args:
            record: Log record to enhance

        Returns:
            True to allow record to be logged
        """
        record.request_id = get_request_id()

        return True


def configure_logging(debug_mode: bool = False, force_debug: Optional[bool] = None) -> None:
    """
    Configure logging levels for officebot.

    Args:
        debug_mode: Whether to enable debug logging for officebot modules
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        OFFICEBOT_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        OFFICEBOT_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("OFFICEBOT_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("OFFICEBOT_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    correlation_filter = CorrelationIdFilter()

    # Preserve any handler installed by officebot._init_logging
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(root_level)
        formatter = logging.Formatter(
            "[%(asctime)s] [%(request_id)s] %(levelname)s - %(name)s - %(message)s"
        )
        handler.setFormatter(formatter)
        handler.addFilter(correlation_filter)
        root_logger.addHandler(handler)
    else:
        for existing_handler in root_logger.handlers:
            existing_handler.addFilter(correlation_filter)

    logger_config: dict[str, int] = {
        "aiohttp.access": logging.WARNING,
        "aiohttp.server": logging.WARNING,
        "aiohttp.web": logging.INFO,
        "httpx": logging.WARNING,
        "httpcore": logging.WARNING,
        "asyncio": logging.WARNING,
        "slack_bolt": logging.INFO,
        "slack_sdk": logging.WARNING,
    }

    logger_config["officebot"] = logging.DEBUG if final_debug else logging.INFO

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.info("Debug logging enabled for officebot modules")
    else:
        root_logger.info("Production logging configuration applied")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}

    for logger_name in ["officebot", "aiohttp.access", "httpx", "slack_sdk"]:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)

    return status
