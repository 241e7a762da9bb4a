"""officebot - Slack app showing the team's shared office-attendance schedule.

Keeps top-level imports light so the package can be inspected without pulling
in aiohttp or Slack Bolt.
"""

__version__ = "0.1.0"

from typing import Optional


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream to console.

    Honors OFFICEBOT_DEBUG (truthy values: "1", "true", "yes", "on"), which
    forces DEBUG verbosity regardless of the requested level.
    """
    import logging
    import os
    import sys

    debug_env = os.environ.get("OFFICEBOT_DEBUG", "")
    if debug_env.strip().lower() in ("1", "true", "yes", "on"):
        level_name = "DEBUG"

    root = logging.getLogger()
    # Only configure a handler if none are present to avoid duplicate output.
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        try:
            from colorlog import ColoredFormatter

            fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
            log_colors = {
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            }
            formatter = ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors)
        except ImportError:
            fmt = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
            formatter = logging.Formatter(fmt, datefmt="%H:%M:%S")

        handler.setFormatter(formatter)
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        level = getattr(logging, level_name.upper(), logging.INFO)
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )


def run_server(args: Optional[object] = None) -> None:
    """Load configuration and start the officebot HTTP server.

    Args:
        args: Optional argparse namespace carrying --port, --data-file and --debug

    Command line values override environment and .env configuration.
    """
    import logging
    import os

    _init_logging(os.environ.get("OFFICEBOT_LOG_LEVEL"))
    logger = logging.getLogger(__name__)

    from officebot.api.server import start_server
    from officebot.core.config_manager import ConfigManager

    config = ConfigManager().load_full_config()

    if args is not None:
        port = getattr(args, "port", None)
        if port is not None:
            config["server_port"] = port
            logger.debug("Port override from CLI: %d", port)
        data_file = getattr(args, "data_file", None)
        if data_file:
            config["data_file"] = data_file
        if getattr(args, "debug", False):
            config["debug_logging"] = True

    start_server(config)
