from __future__ import annotations

import logging
from dataclasses import dataclass

from .powershell import ps_quote, run_powershell

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReentryTask:
    """A boot-triggered task that re-invokes this program after a restart."""

    name: str
    execute: str
    arguments: str
    user: str = "SYSTEM"
    description: str = "Resumes WSL workstation setup after the feature-enable reboot"


class ScheduledTasks:
    """Task Scheduler access through the ScheduledTasks PowerShell module."""

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def exists(self, name: str) -> bool:
        r = run_powershell(
            f"Get-ScheduledTask -TaskName {ps_quote(name)} -ErrorAction SilentlyContinue "
            "| Select-Object -ExpandProperty TaskName",
            check=False,
        )
        return r.returncode == 0 and bool(r.stdout.strip())

    def register(self, task: ReentryTask) -> None:
        # -Force replaces a task of the same name instead of failing.
        script = "; ".join(
            [
                f"$action = New-ScheduledTaskAction -Execute {ps_quote(task.execute)} "
                f"-Argument {ps_quote(task.arguments)}",
                "$trigger = New-ScheduledTaskTrigger -AtStartup",
                f"$principal = New-ScheduledTaskPrincipal -UserId {ps_quote(task.user)} "
                "-LogonType ServiceAccount -RunLevel Highest",
                f"Register-ScheduledTask -TaskName {ps_quote(task.name)} -Action $action "
                f"-Trigger $trigger -Principal $principal -Description {ps_quote(task.description)} "
                "-Force | Out-Null",
            ]
        )
        run_powershell(script, dry_run=self.dry_run)
        logger.info("Registered reentry task %s (%s %s)", task.name, task.execute, task.arguments)

    def unregister(self, name: str) -> None:
        run_powershell(
            f"Unregister-ScheduledTask -TaskName {ps_quote(name)} -Confirm:$false -ErrorAction Stop",
            dry_run=self.dry_run,
        )
