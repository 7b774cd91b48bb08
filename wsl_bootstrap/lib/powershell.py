from __future__ import annotations

from .command import CmdResult, run_cmd

POWERSHELL = "powershell.exe"


def ps_quote(value: str) -> str:
    """Quote a value as a PowerShell single-quoted string literal."""
    return "'" + str(value).replace("'", "''") + "'"


def run_powershell(script: str, *, check: bool = True, dry_run: bool = False) -> CmdResult:
    return run_cmd(
        [
            POWERSHELL,
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy",
            "Bypass",
            "-Command",
            script,
        ],
        check=check,
        dry_run=dry_run,
    )
