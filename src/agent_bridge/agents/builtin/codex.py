"""
OpenAI Codex CLI agent.

Command: codex exec <prompt>
"""

from __future__ import annotations

from ..capabilities import Capabilities, PromptDelivery, PromptMethod
from ..cli_agent import CLIAgent


class CodexAgent(CLIAgent):
    """Agent for the OpenAI Codex CLI."""

    def __init__(self) -> None:
        super().__init__(
            name="codex",
            command="codex",
            capabilities=Capabilities(
                automatable=True,
                prompt_delivery=PromptDelivery(method=PromptMethod.SUBCOMMAND, flag="exec"),
                # exec is already non-interactive
                autonomous_flag="",
                required_env=("OPENAI_API_KEY",),
            ),
        )
