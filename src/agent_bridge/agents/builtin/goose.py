"""
Goose CLI agent.

Command: goose run -t <prompt> [--no-session]
Autonomous mode also sets GOOSE_MODE=auto.
"""

from __future__ import annotations

from ..capabilities import Capabilities, PromptDelivery, PromptMethod
from ..cli_agent import CLIAgent


class GooseAgent(CLIAgent):
    """Agent for the Goose CLI."""

    def __init__(self) -> None:
        super().__init__(
            name="goose",
            command="goose",
            capabilities=Capabilities(
                automatable=True,
                prompt_delivery=PromptDelivery(
                    method=PromptMethod.SUBCOMMAND_ARG,
                    flag="run",
                    prompt_flag="-t",
                ),
                autonomous_flag="--no-session",
                autonomous_env={"GOOSE_MODE": "auto"},
                optional_env=("ANTHROPIC_API_KEY", "OPENAI_API_KEY"),
            ),
        )
