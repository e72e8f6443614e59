"""ToolRunner port - runs an external command line tool to completion."""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Protocol, Sequence

from metad.domain.shared.port import Port


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one tool invocation.

    Attributes:
        exit_code: Process exit code, negative when killed by a signal,
            None when the process never ran to completion.
        output: Combined stdout/stderr, for logging only.
        timed_out: The process was killed after exceeding its timeout.
        spawn_error: The process could not be started at all.
    """

    exit_code: int | None
    output: str = ""
    timed_out: bool = False
    spawn_error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def failed(self) -> bool:
        """The tool ran and reported failure (any non-zero exit code)."""
        return self.exit_code is not None and self.exit_code != 0


class ToolRunner(Port, Protocol):
    @abstractmethod
    async def run(self, args: Sequence[str]) -> ToolResult: ...
