"""Base exception types for agent-bridge."""

from __future__ import annotations


class AgentBridgeError(Exception):
    """Base class for all agent-bridge errors."""


class ConfigError(AgentBridgeError):
    """Raised when configuration cannot be loaded or validated."""
