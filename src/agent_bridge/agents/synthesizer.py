"""
Command synthesis for CLI agents.

Turns a capability descriptor, a prompt and per-call options into a
``Command``: the argv, environment and working directory of the process to
start. Argument order is fixed:

    prompt delivery -> default args -> autonomous flag -> extra args
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from .capabilities import Capabilities, PromptDelivery, PromptMethod
from .errors import AgentConfigError
from .options import ExecOptions

# Blanked when ExecOptions.use_subscription is set
SUBSCRIPTION_ENV_VAR = "ANTHROPIC_API_KEY"

_SLASH_COMMAND_RE = re.compile(r"^/([A-Za-z0-9_.:-]+)(?:\s+(.*))?$", re.DOTALL)


@dataclass(frozen=True)
class Command:
    """A fully resolved process invocation.

    Attributes:
        argv: Executable followed by its arguments.
        env: Complete process environment.
        cwd: Working directory, or None to inherit.
    """

    argv: tuple[str, ...]
    env: dict[str, str] = field(default_factory=dict, repr=False)
    cwd: str | None = None

    @property
    def executable(self) -> str:
        """The program to run."""
        return self.argv[0]

    @property
    def args(self) -> list[str]:
        """Arguments after the executable."""
        return list(self.argv[1:])


def compose_environment(*layers: Mapping[str, str] | None) -> dict[str, str]:
    """Overlay env layers on top of the inherited environment.

    Later layers win over earlier ones; None layers are skipped.
    """
    env = dict(os.environ)
    for layer in layers:
        if layer:
            env.update(layer)
    return env


def subscription_env(options: ExecOptions) -> dict[str, str]:
    """Env overrides that force subscription billing, if requested."""
    return {SUBSCRIPTION_ENV_VAR: ""} if options.use_subscription else {}


def parse_slash_command(prompt: str) -> tuple[str, str] | None:
    """Split a slash-command prompt into (command name, remaining prompt).

    "/autospec.specify \"my feature\"" -> ("autospec.specify", "my feature")

    Returns:
        None if the prompt is not a slash command.
    """
    match = _SLASH_COMMAND_RE.match(prompt.strip())
    if match is None:
        return None
    name, rest = match.group(1), (match.group(2) or "").strip()
    if len(rest) >= 2 and rest[0] == rest[-1] and rest[0] in "\"'":
        rest = rest[1:-1]
    return name, rest


def _arg_args(delivery: PromptDelivery, prompt: str) -> list[str]:
    return [delivery.flag, prompt]


def _positional_args(delivery: PromptDelivery, prompt: str) -> list[str]:
    return [prompt]


def _subcommand_args(delivery: PromptDelivery, prompt: str) -> list[str]:
    return [delivery.flag, prompt]


def _subcommand_arg_args(delivery: PromptDelivery, prompt: str) -> list[str]:
    return [delivery.flag, delivery.prompt_flag, prompt]


def _subcommand_with_flag_args(delivery: PromptDelivery, prompt: str) -> list[str]:
    if delivery.command_flag:
        slash = parse_slash_command(prompt)
        if slash is not None:
            name, rest = slash
            return [delivery.flag, rest, delivery.command_flag, name]
    return [delivery.flag, prompt]


def _template_args(delivery: PromptDelivery, prompt: str) -> list[str]:
    raise AgentConfigError(
        "template prompt delivery needs a command template; use CustomAgent"
    )


PROMPT_ARG_BUILDERS: dict[PromptMethod, Callable[[PromptDelivery, str], list[str]]] = {
    PromptMethod.ARG: _arg_args,
    PromptMethod.POSITIONAL: _positional_args,
    PromptMethod.SUBCOMMAND: _subcommand_args,
    PromptMethod.SUBCOMMAND_ARG: _subcommand_arg_args,
    PromptMethod.SUBCOMMAND_WITH_FLAG: _subcommand_with_flag_args,
    PromptMethod.TEMPLATE: _template_args,
}


class CommandSynthesizer:
    """Builds commands for one executable from its capability descriptor.

    Stateless after construction, so one instance may serve concurrent
    calls.
    """

    def __init__(self, executable: str, capabilities: Capabilities) -> None:
        """Initialize synthesizer.

        Args:
            executable: Program name or path of the agent CLI.
            capabilities: Descriptor for that CLI.
        """
        self.executable = executable
        self.capabilities = capabilities

    def build_args(self, prompt: str, options: ExecOptions) -> list[str]:
        """Build the argument list (without the executable)."""
        caps = self.capabilities
        delivery = caps.prompt_delivery

        builder = PROMPT_ARG_BUILDERS.get(delivery.method)
        if builder is None:
            raise AgentConfigError(f"unsupported prompt method: {delivery.method!r}")

        args = builder(delivery, prompt)
        args.extend(caps.default_args)
        if options.autonomous and caps.autonomous_flag:
            args.append(caps.autonomous_flag)
        args.extend(options.extra_args)
        return args

    def build_env(self, options: ExecOptions) -> dict[str, str]:
        """Build the process environment.

        Precedence, lowest first: inherited, autonomous env, subscription
        override, options.env.
        """
        autonomous_env = self.capabilities.autonomous_env if options.autonomous else None
        return compose_environment(autonomous_env, subscription_env(options), options.env)

    def build(self, prompt: str, options: ExecOptions) -> Command:
        """Build the complete command for a prompt."""
        return Command(
            argv=(self.executable, *self.build_args(prompt, options)),
            env=self.build_env(options),
            cwd=str(options.work_dir) if options.work_dir else None,
        )
