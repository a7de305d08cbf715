"""Shared test fixtures for agent-bridge tests.

Fixture overview
================

::

    clean_agent_env (unsets agent API keys and AGENT_BRIDGE_* variables)
    ├── registry (empty AgentRegistry)
    ├── default_registry (all built-in agents)
    └── make_agent (factory for descriptor-driven CLIAgents)

    temp_config_dirs (isolated user/project config directories)
    pid_file (path a child process writes its pid to)

Notes:
- Real processes are limited to POSIX basics (sh, echo, printf, cat) and
  sys.executable
- Async tests use pytest-asyncio with explicit @pytest.mark.asyncio
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from agent_bridge.agents import (
    AgentRegistry,
    Capabilities,
    CLIAgent,
    PromptDelivery,
    PromptMethod,
    create_default_registry,
)

AGENT_ENV_VARS = (
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "GEMINI_API_KEY",
    "CLAUDE_MODEL",
    "GOOSE_MODE",
    "AGENT_BRIDGE_AGENT",
    "AGENT_BRIDGE_CUSTOM_AGENT_CMD",
    "AGENT_BRIDGE_TIMEOUT",
    "AGENT_BRIDGE_AUTONOMOUS",
    "AGENT_BRIDGE_USE_SUBSCRIPTION",
    "AGENT_BRIDGE_WORK_DIR",
    "AGENT_BRIDGE_LOG_LEVEL",
    "AGENT_BRIDGE_LOG_FILE",
)


@pytest.fixture
def clean_agent_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove agent API keys and agent-bridge settings from the environment."""
    for name in AGENT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def registry() -> AgentRegistry:
    """Empty registry."""
    return AgentRegistry()


@pytest.fixture
def default_registry() -> AgentRegistry:
    """Registry holding every built-in agent."""
    return create_default_registry()


@pytest.fixture
def make_agent() -> Callable[..., CLIAgent]:
    """Factory for CLIAgents with an inline descriptor.

    Keyword arguments other than name, command and automatable go to
    PromptDelivery when they are delivery fields, otherwise to Capabilities.
    """
    delivery_fields = {"flag", "prompt_flag", "command_flag", "interactive_flag"}

    def _make(
        name: str = "testagent",
        command: str = "testagent",
        method: PromptMethod = PromptMethod.ARG,
        automatable: bool = True,
        **kwargs: object,
    ) -> CLIAgent:
        delivery_kwargs = {k: v for k, v in kwargs.items() if k in delivery_fields}
        caps_kwargs = {k: v for k, v in kwargs.items() if k not in delivery_fields}
        capabilities = Capabilities(
            automatable=automatable,
            prompt_delivery=PromptDelivery(method=method, **delivery_kwargs),
            **caps_kwargs,
        )
        return CLIAgent(name=name, command=command, capabilities=capabilities)

    return _make


@pytest.fixture
def temp_config_dirs(tmp_path: Path) -> tuple[Path, Path]:
    """Isolated (user_dir, project_dir); neither exists yet."""
    return tmp_path / "user" / ".agent-bridge", tmp_path / "project" / ".agent-bridge"


@pytest.fixture
def pid_file(tmp_path: Path) -> Path:
    """File a child shell writes its pid into."""
    return tmp_path / "child.pid"


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Keep handlers added by setup_logging from leaking between tests."""
    yield
    logger = logging.getLogger("agent_bridge")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
