from __future__ import annotations

import logging
import shutil

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)


class Winget:
    def __init__(self, executable: str = "winget", *, dry_run: bool = False) -> None:
        self.executable = executable
        self.dry_run = dry_run

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def install(self, package_id: str) -> CmdResult:
        return run_cmd(
            [
                self.executable,
                "install",
                "--id",
                package_id,
                "--exact",
                "--silent",
                "--disable-interactivity",
                "--accept-package-agreements",
                "--accept-source-agreements",
            ],
            check=False,
            merge_stderr=True,
            dry_run=self.dry_run,
        )
