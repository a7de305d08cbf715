"""
Descriptor-driven CLI agent.

``CLIAgent`` combines a capability descriptor with the shared
``CommandSynthesizer`` and ``ProcessExecutor``. Built-in agents are
``CLIAgent`` instances that differ only in the data they pass in.
"""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from typing import ClassVar

from agent_bridge.core.logging import get_logger

from .base import Agent
from .capabilities import Capabilities
from .errors import AgentUnavailableError, AgentVersionError
from .options import ExecOptions, ExecResult
from .process import ProcessExecutor
from .synthesizer import Command, CommandSynthesizer

logger = get_logger("agents.cli_agent")

_NAME_RE = re.compile(r"^[a-z0-9]+$")


class CLIAgent(Agent):
    """Agent for a CLI tool described by a ``Capabilities`` descriptor.

    Example:
        ```python
        goose = CLIAgent(
            name="goose",
            command="goose",
            capabilities=Capabilities(
                automatable=True,
                prompt_delivery=PromptDelivery(
                    method=PromptMethod.SUBCOMMAND_ARG, flag="run", prompt_flag="-t"
                ),
                autonomous_flag="--no-session",
            ),
        )
        result = await goose.execute("add feature", ExecOptions(autonomous=True))
        ```
    """

    # Version probes are the only place this class runs the tool synchronously
    VERSION_TIMEOUT: ClassVar[float] = 10.0

    def __init__(
        self,
        name: str,
        command: str,
        capabilities: Capabilities,
        version_flag: str = "--version",
    ) -> None:
        """Initialize agent.

        Args:
            name: Lowercase alphanumeric registry key.
            command: Executable name or path.
            capabilities: How the CLI takes prompts and autonomy.
            version_flag: Flag printing the version; empty if unsupported.

        Raises:
            ValueError: If name or command is malformed.
        """
        if not _NAME_RE.match(name):
            raise ValueError(f"agent name must be lowercase alphanumeric: {name!r}")
        if not command:
            raise ValueError("command must not be empty")

        self._name = name
        self.command = command
        self.version_flag = version_flag
        self._capabilities = capabilities
        self._synthesizer = CommandSynthesizer(command, capabilities)
        self._executor = ProcessExecutor(name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities

    def version(self) -> str:
        if not self.version_flag:
            return "unknown"
        try:
            completed = subprocess.run(
                [self.command, self.version_flag],
                capture_output=True,
                text=True,
                timeout=self.VERSION_TIMEOUT,
                check=True,
                stdin=subprocess.DEVNULL,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise AgentVersionError(f"getting version for {self.name}: {e}") from e
        return completed.stdout.strip()

    def validate(self) -> None:
        if shutil.which(self.command) is None:
            raise AgentUnavailableError(
                self.name,
                f"CLI {self.command!r} not found in PATH (install it or check your PATH)",
            )
        for env_var in self._capabilities.required_env:
            if not os.environ.get(env_var):
                raise AgentUnavailableError(
                    self.name, f"required environment variable {env_var} is not set"
                )

    def build_command(self, prompt: str, options: ExecOptions | None = None) -> Command:
        return self._synthesizer.build(prompt, options or ExecOptions())

    async def execute(
        self, prompt: str, options: ExecOptions | None = None
    ) -> ExecResult:
        options = options or ExecOptions()
        command = self.build_command(prompt, options)
        logger.debug(
            "Executing %s (autonomous=%s, timeout=%s)",
            self.name,
            options.autonomous,
            options.timeout or "none",
        )
        return await self._executor.run(command, options)
