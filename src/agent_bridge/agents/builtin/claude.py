"""
Claude Code CLI agent.

Command: claude -p <prompt> --verbose --output-format stream-json
[--dangerously-skip-permissions]
"""

from __future__ import annotations

from ..capabilities import Capabilities, PromptDelivery, PromptMethod
from ..cli_agent import CLIAgent


class ClaudeAgent(CLIAgent):
    """Agent for Anthropic's Claude Code CLI.

    No API key is required: the CLI also works with a Pro/Max
    subscription (see ExecOptions.use_subscription).
    """

    def __init__(self) -> None:
        super().__init__(
            name="claude",
            command="claude",
            capabilities=Capabilities(
                automatable=True,
                prompt_delivery=PromptDelivery(method=PromptMethod.ARG, flag="-p"),
                autonomous_flag="--dangerously-skip-permissions",
                optional_env=("ANTHROPIC_API_KEY", "CLAUDE_MODEL"),
                # stream-json output requires --verbose
                default_args=("--verbose", "--output-format", "stream-json"),
            ),
        )
