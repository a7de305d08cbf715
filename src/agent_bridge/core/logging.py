"""Logging infrastructure for agent-bridge."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "agent_bridge"

LOG_LEVEL_ENV_VAR = "AGENT_BRIDGE_LOG_LEVEL"
LOG_FILE_ENV_VAR = "AGENT_BRIDGE_LOG_FILE"

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

DEFAULT_LOG_DIR = Path.home() / ".agent-bridge" / "logs"
DEFAULT_LOG_FILE = DEFAULT_LOG_DIR / "agent-bridge.log"

MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_level_from_env() -> int:
    """Get logging level from the AGENT_BRIDGE_LOG_LEVEL environment variable.

    Returns:
        Logging level constant. Defaults to WARNING if not set or invalid.
    """
    level_str = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    return LOG_LEVEL_MAP.get(level_str, logging.WARNING)


def get_default_log_file() -> Path:
    """Get the log file path.

    AGENT_BRIDGE_LOG_FILE wins over the default under ~/.agent-bridge/logs.
    """
    override = os.environ.get(LOG_FILE_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_LOG_FILE


def setup_logging(
    level: int | None = None,
    log_file: Path | None = None,
    console_output: bool = True,
    rich_console: bool = True,
    file_logging: bool = True,
) -> logging.Logger:
    """Configure logging for agent-bridge.

    The level is taken from, in order:
    1. The explicit ``level`` argument
    2. The AGENT_BRIDGE_LOG_LEVEL environment variable
    3. WARNING

    Args:
        level: Logging level. If None, uses env var or default.
        log_file: Custom file path for log output. If None, uses default.
        console_output: Show logs on the console.
        rich_console: Use Rich for console formatting.
        file_logging: Write logs to a rotating file.

    Returns:
        The package logger the handlers were attached to.
    """
    handlers: list[logging.Handler] = []

    if level is None:
        level = get_log_level_from_env()

    if file_logging:
        if log_file is None:
            log_file = get_default_log_file()
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        # File always captures everything
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    # Console logs go to stderr, leaving stdout to agent output
    if console_output:
        if rich_console:
            console_handler: logging.Handler = RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                show_time=True,
                show_path=False,
                level=level,
            )
        else:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            console_handler.setLevel(level)
        handlers.append(console_handler)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG if file_logging else level)

    # Avoid duplicate handlers on repeated setup
    root_logger.handlers.clear()

    for handler in handlers:
        root_logger.addHandler(handler)
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the agent-bridge hierarchy.

    Args:
        name: Either a module __name__ already under agent_bridge, or a
            short name such as "agents.registry" that gets prefixed.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
