from __future__ import annotations

from typing import Sequence


class BootstrapError(Exception):
    """Base class for every error raised by the bootstrap workflow."""


class PreflightError(BootstrapError):
    """An environment precondition is unmet. Nothing has been changed yet."""


class ConfigError(PreflightError):
    pass


class CommandError(BootstrapError):
    def __init__(self, argv: Sequence[str], returncode: int, output: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output
        super().__init__(f"Command failed ({returncode}): {' '.join(self.argv)}\n{output}".rstrip())


class InstallAborted(BootstrapError):
    """Raised when abort_on_error is set and a package install fails."""


class RebootScheduled(Exception):
    """Control-flow signal: a restart is pending and this run must stop now."""

    def __init__(self, task_name: str, delay_s: int) -> None:
        self.task_name = task_name
        self.delay_s = delay_s
        super().__init__(f"Restart scheduled in {delay_s}s; {task_name} resumes the workflow")
