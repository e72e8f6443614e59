"""Subprocess runner for the SeisComP command line tools."""

import asyncio
import logging
import time
from typing import Sequence

import logfire

from metad.domain.metadata.port.tool_runner import ToolResult, ToolRunner

logger = logging.getLogger(__name__)


class SubprocessToolRunner(ToolRunner):
    """Runs a tool as a child process and waits for it to exit.

    stdout and stderr are merged and captured for logging. A process that is
    still running after ``timeout`` seconds is killed.
    """

    def __init__(self, timeout: float, cwd: str | None = None) -> None:
        self._timeout = timeout
        self._cwd = cwd

    async def run(self, args: Sequence[str]) -> ToolResult:
        program, *arguments = args
        try:
            process = await asyncio.create_subprocess_exec(
                program,
                *arguments,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                cwd=self._cwd,
            )
        except OSError as e:
            logfire.error("Failed to start tool", program=program, error=str(e))
            return ToolResult(exit_code=None, spawn_error=f"{program}: {e}")

        start_time = time.monotonic()
        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            logfire.error(
                "Tool timed out", program=program, args=list(arguments), timeout=self._timeout
            )
            return ToolResult(exit_code=None, timed_out=True)

        duration = time.monotonic() - start_time
        logger.debug(
            f"{' '.join(args)} exited with code {process.returncode} after {duration:.1f}s"
        )
        return ToolResult(
            exit_code=process.returncode,
            output=stdout.decode("utf-8", errors="replace") if stdout else "",
        )
