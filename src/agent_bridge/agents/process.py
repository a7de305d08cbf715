"""Process execution engine for agent commands."""

from __future__ import annotations

import asyncio
import codecs
import contextlib
import io
import os
import signal
import time
from typing import TYPE_CHECKING, ClassVar

from agent_bridge.core.logging import get_logger

from .errors import AgentExecutionError, AgentStartError, AgentTimeoutError
from .options import ExecOptions, ExecResult

if TYPE_CHECKING:
    from asyncio.subprocess import Process

    from .options import TextSink
    from .synthesizer import Command

logger = get_logger("agents.process")

# Children lead their own session so the whole tree can be killed
_USE_PROCESS_GROUPS = os.name == "posix"


class ProcessExecutor:
    """
    Runs a synthesized command with timeout and cancellation handling.

    Output is streamed into the caller's sinks when given, otherwise
    captured in memory. The child is always reaped before ``run`` returns
    or raises.

    Example:
        ```python
        executor = ProcessExecutor("goose")
        result = await executor.run(command, ExecOptions(timeout=600))
        if not result.success:
            print(result.stderr)
        ```
    """

    # Bytes read from a pipe per iteration
    CHUNK_SIZE: ClassVar[int] = 4096

    # How long to wait for pipes to drain after a kill
    DRAIN_TIMEOUT: ClassVar[float] = 2.0

    def __init__(self, label: str) -> None:
        """
        Initialize executor.

        Args:
            label: Agent name used in errors and log messages
        """
        self.label = label

    async def run(self, command: Command, options: ExecOptions) -> ExecResult:
        """
        Run a command to completion.

        Args:
            command: The command to start
            options: Per-call options (timeout and output sinks)

        Returns:
            ExecResult for a process that exited on its own

        Raises:
            AgentStartError: If the process could not be spawned
            AgentTimeoutError: If options.timeout elapsed first
            AgentExecutionError: If the process died from a signal or
                its output could not be read
            asyncio.CancelledError: If the calling task was cancelled
        """
        process = await self._start(command)
        start_time = time.monotonic()
        logger.debug(
            "Started %s (pid=%d, %d args, cwd=%s)",
            self.label,
            process.pid,
            len(command.args),
            command.cwd or ".",
        )

        stdout_buffer = io.StringIO()
        stderr_buffer = io.StringIO()
        assert process.stdout is not None and process.stderr is not None
        stdout_sink = options.stdout if options.stdout is not None else stdout_buffer
        stderr_sink = options.stderr if options.stderr is not None else stderr_buffer
        pumps = [
            asyncio.create_task(self._pump(process.stdout, stdout_sink)),
            asyncio.create_task(self._pump(process.stderr, stderr_sink)),
        ]
        completion = asyncio.ensure_future(self._wait_for_exit(process, pumps))

        try:
            # Shielded so a timeout or cancel leaves the waiter for _terminate
            exit_code = await asyncio.wait_for(
                asyncio.shield(completion),
                timeout=options.timeout or None,
            )

        except TimeoutError:
            await self._terminate(process, completion)
            duration = time.monotonic() - start_time
            logger.warning(
                "%s timed out after %gs, process killed", self.label, options.timeout
            )
            raise AgentTimeoutError(self.label, options.timeout, duration) from None

        except asyncio.CancelledError:
            await self._terminate(process, completion)
            logger.info("%s cancelled, process killed", self.label)
            raise

        except Exception as e:
            # Pipe read or sink write failed; the process must not outlive us
            await self._terminate(process, completion)
            raise AgentExecutionError(f"executing {self.label}: {e}") from e

        duration = time.monotonic() - start_time

        if exit_code < 0:
            raise AgentExecutionError(
                f"executing {self.label}: terminated by signal {-exit_code}"
            )

        logger.debug("%s exited with %d (%.2fs)", self.label, exit_code, duration)
        return ExecResult(
            exit_code=exit_code,
            stdout=stdout_buffer.getvalue(),
            stderr=stderr_buffer.getvalue(),
            duration=duration,
        )

    async def _start(self, command: Command) -> Process:
        """Spawn the process or raise AgentStartError."""
        try:
            return await asyncio.create_subprocess_exec(
                command.executable,
                *command.args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=command.cwd,
                env=command.env,
                start_new_session=_USE_PROCESS_GROUPS,
            )
        except (OSError, ValueError) as e:
            logger.error("Failed to start %s: %s", self.label, e)
            raise AgentStartError(f"starting {self.label}: {e}") from e

    async def _pump(self, stream: asyncio.StreamReader, sink: TextSink) -> None:
        """Copy a pipe into a text sink until EOF."""
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            chunk = await stream.read(self.CHUNK_SIZE)
            if not chunk:
                break
            text = decoder.decode(chunk)
            if text:
                sink.write(text)
        tail = decoder.decode(b"", final=True)
        if tail:
            sink.write(tail)

    @staticmethod
    async def _wait_for_exit(process: Process, pumps: list[asyncio.Task[None]]) -> int:
        """Wait until both pipes hit EOF and the process has exited."""
        await asyncio.gather(*pumps)
        return await process.wait()

    async def _terminate(self, process: Process, completion: asyncio.Future[int]) -> None:
        """Kill the process tree and wait for it to be reaped."""
        self._kill(process)
        try:
            await asyncio.wait_for(asyncio.shield(completion), timeout=self.DRAIN_TIMEOUT)
        except TimeoutError:
            # A descendant outside the process group still holds a pipe open
            logger.debug("%s pipes did not close after kill", self.label)
            completion.cancel()
        except Exception as e:
            logger.debug("%s output lost during termination: %s", self.label, e)

        if not completion.done():
            with contextlib.suppress(asyncio.CancelledError):
                await completion
        if process.returncode is None:
            await process.wait()

    def _kill(self, process: Process) -> None:
        """Send SIGKILL to the process group, or to the process itself."""
        if _USE_PROCESS_GROUPS:
            try:
                os.killpg(process.pid, signal.SIGKILL)
                return
            except (ProcessLookupError, PermissionError):
                pass
        if process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
