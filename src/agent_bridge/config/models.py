"""Configuration models for agent-bridge.

This module defines Pydantic models for selecting an agent and for the
default execution options applied to every run.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from agent_bridge.agents.custom import CustomAgentConfig


class ExecutionConfig(BaseModel):
    """Default execution options.

    Attributes:
        timeout: Seconds before the agent is killed (0 = no timeout, max one week).
        autonomous: Run agents without permission prompts.
        use_subscription: Blank ANTHROPIC_API_KEY so subscription billing is used.
        work_dir: Working directory for agent processes.
        extra_args: Arguments appended to every agent command.
        env: Extra environment variables for agent processes.
    """

    model_config = ConfigDict(validate_assignment=True)

    MAX_TIMEOUT: ClassVar[float] = 604800.0

    timeout: float = Field(default=0.0, ge=0.0, le=MAX_TIMEOUT)
    autonomous: bool = False
    use_subscription: bool = True
    work_dir: str | None = None
    extra_args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)

    @field_validator("work_dir")
    @classmethod
    def empty_work_dir_is_none(cls, v: str | None) -> str | None:
        """Treat an empty working directory as unset."""
        return v or None


class AgentBridgeConfig(BaseModel):
    """Root configuration model.

    Agent selection priority: custom_agent, then custom_agent_cmd, then
    agent_preset, then the default agent.

    Attributes:
        agent_preset: Name of a registered agent (e.g. "claude", "goose").
        custom_agent: Structured custom agent definition.
        custom_agent_cmd: Custom agent as a template string
            (e.g. "aider --message {{PROMPT}}").
        execution: Default execution options.
    """

    model_config = ConfigDict(validate_assignment=True)

    agent_preset: str = ""
    custom_agent: CustomAgentConfig | None = None
    custom_agent_cmd: str | None = None
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)

    @field_validator("agent_preset")
    @classmethod
    def normalize_preset(cls, v: str) -> str:
        """Strip and lowercase the preset name."""
        return v.strip().lower()

    @field_validator("custom_agent_cmd")
    @classmethod
    def blank_cmd_is_none(cls, v: str | None) -> str | None:
        """Treat a blank template as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()
