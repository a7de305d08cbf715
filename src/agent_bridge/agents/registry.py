"""Agent registration, lookup and health checks."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from agent_bridge.core.logging import get_logger

from .base import Agent
from .errors import AgentError, AgentNotFoundError, AgentVersionError

logger = get_logger("agents.registry")


class _RWLock:
    """Read-write lock: many concurrent readers or one writer.

    Waiting writers block new readers, so a stream of lookups cannot
    starve a registration.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._read_ok = threading.Condition(self._lock)
        self._write_ok = threading.Condition(self._lock)
        self._readers = 0
        self._writers_waiting = 0
        self._writer_active = False

    def acquire_read(self) -> None:
        with self._lock:
            while self._writer_active or self._writers_waiting > 0:
                self._read_ok.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._lock:
            self._readers -= 1
            if self._readers == 0:
                self._write_ok.notify_all()

    def acquire_write(self) -> None:
        with self._lock:
            self._writers_waiting += 1
            while self._writer_active or self._readers > 0:
                self._write_ok.wait()
            self._writers_waiting -= 1
            self._writer_active = True

    def release_write(self) -> None:
        with self._lock:
            self._writer_active = False
            self._read_ok.notify_all()
            self._write_ok.notify_all()

    @contextmanager
    def read(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


@dataclass
class AgentStatus:
    """Health report for one registered agent.

    Attributes:
        name: Registry key.
        installed: Whether validation passed.
        version: Reported version, empty if unknown.
        valid: Whether the agent is ready to execute.
        error: Validation failure message, empty when valid.
    """

    name: str
    installed: bool
    version: str = ""
    valid: bool = False
    error: str = ""


class AgentRegistry:
    """
    Thread-safe collection of agents keyed by name.

    Registering a name that already exists replaces the previous agent.

    Example:
        ```python
        registry = create_default_registry()
        for status in registry.doctor():
            print(status.name, status.version or status.error)

        agent = registry.require("goose")
        ```
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._agents: dict[str, Agent] = {}
        self._lock = _RWLock()

    def register(self, agent: Agent) -> None:
        """
        Register an agent under its name.

        Args:
            agent: Agent to add; replaces any agent with the same name.
        """
        with self._lock.write():
            previous = self._agents.get(agent.name)
            self._agents[agent.name] = agent
        if previous is not None and previous is not agent:
            logger.debug("Replaced agent %s", agent.name)
        else:
            logger.debug("Registered agent %s", agent.name)

    def get(self, name: str) -> Agent | None:
        """Get an agent by name, or None if not registered."""
        with self._lock.read():
            return self._agents.get(name)

    def require(self, name: str) -> Agent:
        """
        Get an agent by name.

        Raises:
            AgentNotFoundError: If no agent has that name.
        """
        with self._lock.read():
            agent = self._agents.get(name)
            if agent is None:
                raise AgentNotFoundError(name, sorted(self._agents))
            return agent

    def names(self) -> list[str]:
        """All registered agent names, sorted."""
        with self._lock.read():
            return sorted(self._agents)

    def _snapshot(self) -> list[Agent]:
        with self._lock.read():
            return [self._agents[name] for name in sorted(self._agents)]

    def available(self) -> list[Agent]:
        """Agents whose validation passes, sorted by name."""
        # Validation touches PATH and the environment; not done under the lock
        return [agent for agent in self._snapshot() if agent.is_available()]

    def automatable(self) -> list[Agent]:
        """Available agents that can run headless, sorted by name."""
        return [agent for agent in self.available() if agent.capabilities.automatable]

    def doctor(self) -> list[AgentStatus]:
        """Report installation and version status of every agent, sorted by name."""
        return [self._check(agent) for agent in self._snapshot()]

    @staticmethod
    def _check(agent: Agent) -> AgentStatus:
        try:
            agent.validate()
        except AgentError as e:
            return AgentStatus(name=agent.name, installed=False, error=str(e))

        try:
            version = agent.version()
        except AgentVersionError as e:
            logger.debug("Version probe failed for %s: %s", agent.name, e)
            version = ""
        return AgentStatus(name=agent.name, installed=True, version=version, valid=True)

    def __contains__(self, name: object) -> bool:
        with self._lock.read():
            return name in self._agents

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._agents)


def create_default_registry() -> AgentRegistry:
    """Create a registry holding every built-in agent."""
    from .builtin import register_builtin_agents

    registry = AgentRegistry()
    register_builtin_agents(registry)
    return registry
