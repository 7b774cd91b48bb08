from __future__ import annotations

from .command import run_cmd


class ShutdownRestart:
    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def schedule_restart(self, delay_s: int) -> None:
        run_cmd(
            [
                "shutdown.exe",
                "/r",
                "/t",
                str(int(delay_s)),
                "/c",
                "Restarting to finish enabling Windows features; setup resumes automatically.",
            ],
            dry_run=self.dry_run,
        )
