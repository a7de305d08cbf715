"""
Base class for CLI agents.

An Agent wraps one external command-line coding tool behind a uniform
contract: validate that it can run, build its command line for a prompt,
and execute it under a timeout.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .errors import AgentError

if TYPE_CHECKING:
    from .capabilities import Capabilities
    from .options import ExecOptions, ExecResult
    from .synthesizer import Command


class Agent(ABC):
    """Abstract CLI agent.

    Implementations must be safe for concurrent use: no method may mutate
    state shared between calls.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique lowercase identifier, used as the registry key."""
        ...

    @property
    @abstractmethod
    def capabilities(self) -> Capabilities:
        """Read-only capability descriptor."""
        ...

    @abstractmethod
    def version(self) -> str:
        """Return the installed CLI version.

        Returns "unknown" when the agent has no way to report a version.

        Raises:
            AgentVersionError: If the version probe fails.
        """
        ...

    @abstractmethod
    def validate(self) -> None:
        """Check the CLI is on PATH and required env vars are set.

        Must be fast and must not run the tool.

        Raises:
            AgentUnavailableError: If the agent cannot run on this system.
        """
        ...

    @abstractmethod
    def build_command(self, prompt: str, options: ExecOptions | None = None) -> Command:
        """Construct the command for a prompt without starting anything."""
        ...

    @abstractmethod
    async def execute(
        self, prompt: str, options: ExecOptions | None = None
    ) -> ExecResult:
        """Build and run the command, returning its result.

        A non-zero exit code is reported in the result, not raised.

        Raises:
            AgentStartError: If the process cannot be spawned.
            AgentTimeoutError: If options.timeout elapses first.
            AgentExecutionError: If the process dies abnormally.
            asyncio.CancelledError: If the calling task is cancelled.
        """
        ...

    def is_available(self) -> bool:
        """Check if validate() passes."""
        try:
            self.validate()
        except AgentError:
            return False
        return True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
