"""
Cline CLI agent.

Command: cline <prompt> [-Y]
"""

from __future__ import annotations

from ..capabilities import Capabilities, PromptDelivery, PromptMethod
from ..cli_agent import CLIAgent


class ClineAgent(CLIAgent):
    """Agent for the Cline CLI (-Y is its YOLO mode)."""

    def __init__(self) -> None:
        super().__init__(
            name="cline",
            command="cline",
            capabilities=Capabilities(
                automatable=True,
                prompt_delivery=PromptDelivery(method=PromptMethod.POSITIONAL),
                autonomous_flag="-Y",
                optional_env=("OPENAI_API_KEY", "ANTHROPIC_API_KEY"),
            ),
        )
