"""Core package containing errors and logging helpers."""

from agent_bridge.core.errors import AgentBridgeError, ConfigError
from agent_bridge.core.logging import get_logger, setup_logging

__all__ = [
    "AgentBridgeError",
    "ConfigError",
    "get_logger",
    "setup_logging",
]
