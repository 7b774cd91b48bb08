from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _program_data() -> Path:
    return Path(os.environ.get("ProgramData") or os.environ.get("PROGRAMDATA") or Path.home())


def _user_profile() -> Path:
    return Path(os.environ.get("USERPROFILE") or Path.home())


@dataclass(frozen=True)
class Paths:
    data_dir: Path = field(default_factory=lambda: _program_data() / "wsl-bootstrap")
    desktop_dir: Path = field(default_factory=lambda: _user_profile() / "Desktop")

    @property
    def state_default(self) -> str:
        return str(self.data_dir / "state.json")

    @property
    def log_default(self) -> str:
        return str(self.data_dir / "wsl-bootstrap.log")

    @property
    def install_log_default(self) -> str:
        return str(self.desktop_dir / "winget_install_log.txt")


PATHS = Paths()
