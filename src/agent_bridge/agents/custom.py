"""
Template-driven custom agents.

A custom agent runs any CLI tool from a user supplied template such as
``aider --message {{PROMPT}}``, optionally piping its stdout through a
post-processor command.
"""

from __future__ import annotations

import shutil
from collections.abc import Mapping
from types import MappingProxyType
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from agent_bridge.core.logging import get_logger

from .base import Agent
from .capabilities import Capabilities, PromptDelivery, PromptMethod
from .errors import AgentConfigError, AgentUnavailableError
from .options import ExecOptions, ExecResult
from .process import ProcessExecutor
from .shell import build_pipeline
from .synthesizer import Command, compose_environment, subscription_env

logger = get_logger("agents.custom")

PROMPT_PLACEHOLDER = "{{PROMPT}}"


class CustomAgentConfig(BaseModel):
    """
    Structured configuration for a custom agent.

    Attributes:
        command: Executable to run (e.g. "aider").
        args: Arguments; at least one must contain {{PROMPT}}.
        env: Environment variables for the command.
        post_processor: Optional command that receives the stdout.
    """

    model_config = ConfigDict(frozen=True)

    command: str = ""
    args: tuple[str, ...] = ()
    env: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    post_processor: str | None = None

    @field_validator("command")
    @classmethod
    def strip_command(cls, v: str) -> str:
        """Strip surrounding whitespace from the command."""
        return v.strip()

    @field_validator("post_processor")
    @classmethod
    def empty_post_processor_is_none(cls, v: str | None) -> str | None:
        """Treat a blank post-processor as unset."""
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v

    @field_validator("env", mode="after")
    @classmethod
    def freeze_env(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(v))

    @field_serializer("env")
    def serialize_env(self, v: Mapping[str, str]) -> dict[str, str]:
        return dict(v)

    def is_valid(self) -> bool:
        """Check if a command is configured."""
        return bool(self.command)


class CustomAgent(Agent):
    """Agent built from a command template instead of a descriptor.

    Example:
        ```python
        agent = CustomAgent.from_template("aider --yes --message {{PROMPT}}")
        result = await agent.execute("fix the failing test")
        ```
    """

    DEFAULT_NAME: ClassVar[str] = "custom"

    def __init__(self, config: CustomAgentConfig, name: str = DEFAULT_NAME) -> None:
        """Initialize custom agent.

        Args:
            config: Command, args, env and optional post-processor.
            name: Registry key for this agent.

        Raises:
            AgentConfigError: If the command is empty or no argument
                contains the {{PROMPT}} placeholder.
        """
        if not config.command:
            raise AgentConfigError("custom agent: command is required")
        if not any(PROMPT_PLACEHOLDER in arg for arg in config.args):
            raise AgentConfigError(
                f"custom agent: args must contain {PROMPT_PLACEHOLDER} placeholder"
            )

        self._name = name
        self.config = config
        self._capabilities = Capabilities(
            automatable=True,
            prompt_delivery=PromptDelivery(method=PromptMethod.TEMPLATE),
        )
        self._executor = ProcessExecutor(name)

    @classmethod
    def from_template(cls, template: str, name: str = DEFAULT_NAME) -> CustomAgent:
        """Create an agent from a whitespace-separated template string.

        "claude -p {{PROMPT}}" -> command "claude", args ["-p", "{{PROMPT}}"]

        Raises:
            AgentConfigError: If the template is empty or has no placeholder.
        """
        parts = template.split()
        if not parts:
            raise AgentConfigError("custom agent: empty template")
        return cls(CustomAgentConfig(command=parts[0], args=parts[1:]), name=name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities

    def version(self) -> str:
        """Custom agents have no version probe."""
        return "custom"

    def validate(self) -> None:
        """Check that the command and post-processor are on PATH."""
        if shutil.which(self.config.command) is None:
            raise AgentUnavailableError(
                self.name, f"command {self.config.command!r} not found in PATH"
            )
        post_processor = self.config.post_processor
        if post_processor and shutil.which(post_processor) is None:
            raise AgentUnavailableError(
                self.name, f"post_processor {post_processor!r} not found in PATH"
            )

    def expand_args(self, prompt: str) -> list[str]:
        """Substitute the prompt for every placeholder in every argument."""
        return [arg.replace(PROMPT_PLACEHOLDER, prompt) for arg in self.config.args]

    def build_command(self, prompt: str, options: ExecOptions | None = None) -> Command:
        """Build the command; a post-processor turns it into a shell pipeline.

        options.extra_args are appended after the expanded template args.
        """
        options = options or ExecOptions()
        argv = [self.config.command, *self.expand_args(prompt), *options.extra_args]
        if self.config.post_processor:
            argv = build_pipeline(argv, self.config.post_processor)

        return Command(
            argv=tuple(argv),
            env=compose_environment(
                self.config.env, subscription_env(options), options.env
            ),
            cwd=str(options.work_dir) if options.work_dir else None,
        )

    async def execute(
        self, prompt: str, options: ExecOptions | None = None
    ) -> ExecResult:
        options = options or ExecOptions()
        command = self.build_command(prompt, options)
        logger.debug(
            "Executing custom agent %s (post_processor=%s)",
            self.name,
            self.config.post_processor or "none",
        )
        return await self._executor.run(command, options)
