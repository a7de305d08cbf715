"""Shell quoting for agent commands that must run through ``sh -c``.

Only used when a custom agent pipes its output into a post-processor. Every
token is wrapped in single quotes; inside single quotes the shell expands
nothing, so the only character needing care is the single quote itself,
which is written as ``'\\''`` (close quote, escaped quote, reopen).
"""

from __future__ import annotations

from collections.abc import Sequence

SHELL = "sh"


def escape_shell_arg(value: str) -> str:
    """Quote a string so ``sh`` reads it back as exactly one literal word.

    Safe for quotes, ``$``, backticks, globs, semicolons, pipes and
    newlines.
    """
    return "'" + value.replace("'", "'\\''") + "'"


def join_shell_args(argv: Sequence[str]) -> str:
    """Quote and join a command and its arguments."""
    return " ".join(escape_shell_arg(arg) for arg in argv)


def build_pipeline(argv: Sequence[str], post_processor: str) -> list[str]:
    """Build an argv running ``argv | post_processor`` under ``sh -c``.

    Args:
        argv: Primary command and its arguments.
        post_processor: Command receiving the primary command's stdout.

    Returns:
        The argv to execute directly.
    """
    if not argv:
        raise ValueError("argv must not be empty")
    script = f"{join_shell_args(argv)} | {escape_shell_arg(post_processor)}"
    return [SHELL, "-c", script]
