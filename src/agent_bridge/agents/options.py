"""Per-call execution options and results."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


class TextSink(Protocol):
    """Anything output can be streamed into (files, StringIO, sys.stdout)."""

    def write(self, data: str, /) -> object: ...


@dataclass(frozen=True)
class ExecOptions:
    """
    Configures a single agent execution.

    Attributes:
        autonomous: Enable headless mode (autonomous flag and env).
        timeout: Maximum execution time in seconds; 0 means no timeout.
        work_dir: Working directory; inherits the current one if None.
        extra_args: Arguments appended after everything else.
        env: Extra environment variables; these win over all others.
        stdout: Sink for stdout; if None, output is captured in the result.
        stderr: Sink for stderr; if None, output is captured in the result.
        use_subscription: Blank ANTHROPIC_API_KEY so subscription-based
            CLIs never fall back to API credits.
    """

    autonomous: bool = False
    timeout: float = 0.0
    work_dir: str | Path | None = None
    extra_args: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=dict)
    stdout: TextSink | None = None
    stderr: TextSink | None = None
    use_subscription: bool = False

    def __post_init__(self) -> None:
        if self.timeout < 0:
            raise ValueError("timeout must not be negative")
        # Accept lists from callers but keep the stored value immutable
        object.__setattr__(self, "extra_args", tuple(self.extra_args))


@dataclass
class ExecResult:
    """
    Outcome of a completed agent process.

    Attributes:
        exit_code: Process exit status (0 = success).
        stdout: Captured stdout (empty when a stdout sink was given).
        stderr: Captured stderr (empty when a stderr sink was given).
        duration: Seconds from process start to completion.
    """

    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration: float = 0.0

    @property
    def success(self) -> bool:
        """Check if the process exited with status 0."""
        return self.exit_code == 0
