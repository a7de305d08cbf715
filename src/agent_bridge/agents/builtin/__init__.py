"""
Built-in CLI agents.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import AgentNotFoundError
from .claude import ClaudeAgent
from .cline import ClineAgent
from .codex import CodexAgent
from .gemini import GeminiAgent
from .goose import GooseAgent
from .opencode import OpenCodeAgent

if TYPE_CHECKING:
    from ..cli_agent import CLIAgent
    from ..registry import AgentRegistry


AGENT_CLASSES: dict[str, type[CLIAgent]] = {
    "claude": ClaudeAgent,
    "cline": ClineAgent,
    "codex": CodexAgent,
    "gemini": GeminiAgent,
    "goose": GooseAgent,
    "opencode": OpenCodeAgent,
}

DEFAULT_AGENT = "claude"


def create_agent(name: str) -> CLIAgent:
    """Create a built-in agent by name.

    Raises:
        AgentNotFoundError: If no built-in agent has that name.
    """
    agent_class = AGENT_CLASSES.get(name)
    if agent_class is None:
        raise AgentNotFoundError(name, sorted(AGENT_CLASSES))
    return agent_class()


def register_builtin_agents(registry: AgentRegistry) -> None:
    """Register one instance of every built-in agent."""
    for agent_class in AGENT_CLASSES.values():
        registry.register(agent_class())


__all__ = [
    "AGENT_CLASSES",
    "DEFAULT_AGENT",
    "ClaudeAgent",
    "ClineAgent",
    "CodexAgent",
    "GeminiAgent",
    "GooseAgent",
    "OpenCodeAgent",
    "create_agent",
    "register_builtin_agents",
]
