"""Configuration loading and agent resolution."""

from agent_bridge.config.loader import ConfigLoader
from agent_bridge.config.models import AgentBridgeConfig, ExecutionConfig
from agent_bridge.config.resolve import build_exec_options, resolve_agent
from agent_bridge.config.sources import (
    EnvironmentSource,
    IConfigSource,
    JsonFileSource,
    YamlFileSource,
)

__all__ = [
    "AgentBridgeConfig",
    "ConfigLoader",
    "EnvironmentSource",
    "ExecutionConfig",
    "IConfigSource",
    "JsonFileSource",
    "YamlFileSource",
    "build_exec_options",
    "resolve_agent",
]
