"""
OpenCode CLI agent.

Command: opencode run <prompt> [--command <name>]

The command name is passed through ExecOptions.extra_args, or taken from a
slash-command prompt ("/name rest of prompt").
"""

from __future__ import annotations

from ..capabilities import Capabilities, PromptDelivery, PromptMethod
from ..cli_agent import CLIAgent


class OpenCodeAgent(CLIAgent):
    """Agent for the OpenCode CLI."""

    def __init__(self) -> None:
        super().__init__(
            name="opencode",
            command="opencode",
            capabilities=Capabilities(
                automatable=True,
                prompt_delivery=PromptDelivery(
                    method=PromptMethod.SUBCOMMAND_WITH_FLAG,
                    flag="run",
                    command_flag="--command",
                    interactive_flag="--prompt",
                ),
                # run is already non-interactive
                autonomous_flag="",
                optional_env=("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "GEMINI_API_KEY"),
            ),
        )
