"""
Optional project-setup capabilities for agents.

Agents that can prepare a project (settings files, permissions, sandbox
paths) implement these protocols in addition to ``Agent``. Callers probe for
them with ``is_configurator`` / ``is_sandbox_configurator`` instead of
``isinstance`` checks against concrete classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from agent_bridge.core.logging import get_logger

if TYPE_CHECKING:
    from .base import Agent

logger = get_logger("agents.configurator")


@dataclass
class ConfigResult:
    """
    Outcome of configuring an agent for a project.

    Attributes:
        permissions_added: Permissions written during configuration
        already_configured: True if nothing needed to change
        warning: Optional warning, e.g. a deny-list conflict
    """

    permissions_added: list[str] = field(default_factory=list)
    already_configured: bool = False
    warning: str = ""


@dataclass
class SandboxResult:
    """
    Outcome of configuring an agent's sandbox for a project.

    Attributes:
        paths_added: Writable paths added to the sandbox
        existing_paths: Paths that were already allowed
        sandbox_enabled: Whether the sandbox is enabled afterwards
        sandbox_was_enabled: Whether it was enabled before
        already_configured: True if nothing needed to change
    """

    paths_added: list[str] = field(default_factory=list)
    existing_paths: list[str] = field(default_factory=list)
    sandbox_enabled: bool = False
    sandbox_was_enabled: bool = False
    already_configured: bool = False


@runtime_checkable
class Configurator(Protocol):
    """Agent that can set itself up for a project.

    configure_project must be idempotent.
    """

    def configure_project(self, project_dir: str | Path, specs_dir: str) -> ConfigResult:
        ...


@runtime_checkable
class SandboxConfigurator(Protocol):
    """Agent whose sandbox can be opened up for a project's specs directory."""

    def get_sandbox_paths(self, specs_dir: str) -> list[str]:
        ...

    def configure_sandbox(
        self, project_dir: str | Path, specs_dir: str
    ) -> SandboxResult:
        ...


def is_configurator(agent: Agent) -> bool:
    """Check if the agent implements Configurator."""
    return isinstance(agent, Configurator)


def is_sandbox_configurator(agent: Agent) -> bool:
    """Check if the agent implements SandboxConfigurator."""
    return isinstance(agent, SandboxConfigurator)


def configure(agent: Agent, project_dir: str | Path, specs_dir: str) -> ConfigResult | None:
    """
    Configure a project for the agent if it supports it.

    Args:
        agent: Agent to configure
        project_dir: Project root directory
        specs_dir: Directory holding specs, relative to project_dir

    Returns:
        The configuration result, or None if the agent is not a Configurator
    """
    if not isinstance(agent, Configurator):
        return None
    result = agent.configure_project(project_dir, specs_dir)
    logger.debug(
        "Configured %s for %s (%d permissions added)",
        agent.name,
        project_dir,
        len(result.permissions_added),
    )
    return result
