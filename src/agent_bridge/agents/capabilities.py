"""Capability descriptors for CLI agents.

A descriptor says how an agent CLI accepts a prompt and how it is switched
into autonomous (headless, no confirmations) mode. Descriptors are pure data;
``CommandSynthesizer`` turns them into command lines.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)


class PromptMethod(str, Enum):
    """How a prompt is passed to an agent CLI."""

    ARG = "arg"  # claude -p "fix the bug"
    POSITIONAL = "positional"  # cline "fix the bug"
    SUBCOMMAND = "subcommand"  # codex exec "fix the bug"
    SUBCOMMAND_ARG = "subcommand-arg"  # goose run -t "fix the bug"
    SUBCOMMAND_WITH_FLAG = "subcommand-with-flag"  # opencode run "fix" --command x
    TEMPLATE = "template"  # aider --message {{PROMPT}}


# Methods for which ``flag`` names the prompt flag or the subcommand.
_FLAG_METHODS = frozenset({
    PromptMethod.ARG,
    PromptMethod.SUBCOMMAND,
    PromptMethod.SUBCOMMAND_ARG,
    PromptMethod.SUBCOMMAND_WITH_FLAG,
})


class PromptDelivery(BaseModel):
    """
    Describes how to pass prompts to an agent CLI.

    Attributes:
        method: Prompt passing pattern.
        flag: Prompt flag (ARG) or subcommand name (SUBCOMMAND*).
        prompt_flag: Flag preceding the prompt after the subcommand
            (SUBCOMMAND_ARG only, e.g. "-t" for "goose run -t").
        command_flag: Trailing flag naming a command after the prompt
            (SUBCOMMAND_WITH_FLAG only, e.g. "--command").
        interactive_flag: Flag some CLIs require in interactive mode.
    """

    model_config = ConfigDict(frozen=True)

    method: PromptMethod
    flag: str = ""
    prompt_flag: str = ""
    command_flag: str = ""
    interactive_flag: str = ""

    @model_validator(mode="after")
    def check_fields_match_method(self) -> PromptDelivery:
        """Reject fields that the chosen method never reads."""
        if self.flag and self.method not in _FLAG_METHODS:
            raise ValueError(f"flag is not used by prompt method {self.method.value!r}")
        if self.prompt_flag and self.method is not PromptMethod.SUBCOMMAND_ARG:
            raise ValueError(
                f"prompt_flag is only used by {PromptMethod.SUBCOMMAND_ARG.value!r}"
            )
        if self.command_flag and self.method is not PromptMethod.SUBCOMMAND_WITH_FLAG:
            raise ValueError(
                f"command_flag is only used by {PromptMethod.SUBCOMMAND_WITH_FLAG.value!r}"
            )
        return self


class Capabilities(BaseModel):
    """
    Self-describing feature flags for an agent.

    Attributes:
        automatable: Agent can run fully headless without user input.
        prompt_delivery: How prompts reach the CLI.
        autonomous_flag: Flag that skips confirmations; empty when the
            CLI is non-interactive by default.
        autonomous_env: Environment variables set in autonomous mode.
        required_env: Variables that must be set for the agent to validate.
        optional_env: Informational list of variables the agent reads.
        default_args: Arguments always passed after the prompt arguments.
    """

    model_config = ConfigDict(frozen=True)

    automatable: bool = False
    prompt_delivery: PromptDelivery
    autonomous_flag: str = ""
    autonomous_env: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    required_env: tuple[str, ...] = ()
    optional_env: tuple[str, ...] = ()
    default_args: tuple[str, ...] = ()

    @field_validator("autonomous_env", mode="after")
    @classmethod
    def freeze_autonomous_env(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        """Store a read-only copy of the mapping."""
        return MappingProxyType(dict(v))

    @field_serializer("autonomous_env")
    def serialize_autonomous_env(self, v: Mapping[str, str]) -> dict[str, str]:
        return dict(v)
