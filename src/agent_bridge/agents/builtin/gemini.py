"""
Google Gemini CLI agent.

Command: gemini -p <prompt> [--yolo]
"""

from __future__ import annotations

from ..capabilities import Capabilities, PromptDelivery, PromptMethod
from ..cli_agent import CLIAgent


class GeminiAgent(CLIAgent):
    """Agent for the Google Gemini CLI."""

    def __init__(self) -> None:
        super().__init__(
            name="gemini",
            command="gemini",
            capabilities=Capabilities(
                automatable=True,
                prompt_delivery=PromptDelivery(method=PromptMethod.ARG, flag="-p"),
                autonomous_flag="--yolo",
                required_env=("GEMINI_API_KEY",),
            ),
        )
