"""Error taxonomy for agent validation, construction and execution."""

from __future__ import annotations

from agent_bridge.core.errors import AgentBridgeError


class AgentError(AgentBridgeError):
    """Base class for errors raised by agents and the agent registry."""


class AgentUnavailableError(AgentError):
    """The agent's executable is missing or a required env var is unset."""

    def __init__(self, agent_name: str, reason: str) -> None:
        self.agent_name = agent_name
        self.reason = reason
        super().__init__(f"{agent_name}: {reason}")


class AgentConfigError(AgentError):
    """An agent definition is malformed (e.g. template without placeholder)."""


class AgentNotFoundError(AgentError):
    """No agent is registered under the requested name."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(
            f"unknown agent {name!r}; available: {', '.join(available) or 'none'}"
        )


class AgentStartError(AgentError):
    """The operating system failed to spawn the agent process."""


class AgentExecutionError(AgentError):
    """The agent process failed for a reason other than its exit code."""


class AgentTimeoutError(AgentError, TimeoutError):
    """The agent process outlived its timeout and was killed."""

    def __init__(self, agent_name: str, timeout: float, duration: float) -> None:
        self.agent_name = agent_name
        self.timeout = timeout
        self.duration = duration
        super().__init__(
            f"executing {agent_name}: timed out after {timeout:g}s "
            f"(killed after {duration:.2f}s)"
        )


class AgentVersionError(AgentError):
    """The version probe for an agent failed."""
