"""
CLI agent abstraction.

This package runs external AI coding CLIs (Claude Code, Goose, Codex, ...)
through one contract: describe how a tool takes its prompt, synthesize the
command line, and execute it with timeout and cancellation handling.

Example:
    ```python
    from agent_bridge.agents import ExecOptions, create_default_registry

    registry = create_default_registry()
    agent = registry.require("claude")
    agent.validate()
    result = await agent.execute("fix the tests", ExecOptions(autonomous=True))
    ```
"""

from .base import Agent
from .builtin import (
    AGENT_CLASSES,
    DEFAULT_AGENT,
    ClaudeAgent,
    ClineAgent,
    CodexAgent,
    GeminiAgent,
    GooseAgent,
    OpenCodeAgent,
    create_agent,
    register_builtin_agents,
)
from .capabilities import Capabilities, PromptDelivery, PromptMethod
from .cli_agent import CLIAgent
from .configurator import (
    ConfigResult,
    Configurator,
    SandboxConfigurator,
    SandboxResult,
    configure,
    is_configurator,
    is_sandbox_configurator,
)
from .custom import PROMPT_PLACEHOLDER, CustomAgent, CustomAgentConfig
from .detect import AuthType, ClaudeAuthStatus, detect_claude_auth
from .errors import (
    AgentConfigError,
    AgentError,
    AgentExecutionError,
    AgentNotFoundError,
    AgentStartError,
    AgentTimeoutError,
    AgentUnavailableError,
    AgentVersionError,
)
from .options import ExecOptions, ExecResult, TextSink
from .process import ProcessExecutor
from .registry import AgentRegistry, AgentStatus, create_default_registry
from .shell import build_pipeline, escape_shell_arg
from .synthesizer import Command, CommandSynthesizer, parse_slash_command

__all__ = [
    "AGENT_CLASSES",
    "DEFAULT_AGENT",
    "PROMPT_PLACEHOLDER",
    "Agent",
    "AgentConfigError",
    "AgentError",
    "AgentExecutionError",
    "AgentNotFoundError",
    "AgentRegistry",
    "AgentStartError",
    "AgentStatus",
    "AgentTimeoutError",
    "AgentUnavailableError",
    "AgentVersionError",
    "AuthType",
    "CLIAgent",
    "Capabilities",
    "ClaudeAgent",
    "ClaudeAuthStatus",
    "ClineAgent",
    "CodexAgent",
    "Command",
    "CommandSynthesizer",
    "ConfigResult",
    "Configurator",
    "CustomAgent",
    "CustomAgentConfig",
    "ExecOptions",
    "ExecResult",
    "GeminiAgent",
    "GooseAgent",
    "OpenCodeAgent",
    "ProcessExecutor",
    "PromptDelivery",
    "PromptMethod",
    "SandboxConfigurator",
    "SandboxResult",
    "TextSink",
    "build_pipeline",
    "configure",
    "create_agent",
    "create_default_registry",
    "detect_claude_auth",
    "escape_shell_arg",
    "is_configurator",
    "is_sandbox_configurator",
    "parse_slash_command",
    "register_builtin_agents",
]
