from __future__ import annotations

import logging
import re
from typing import List, Optional

from .command import run_cmd

logger = logging.getLogger(__name__)

WSL = "wsl.exe"


class WslCli:
    """wsl.exe wrapper. Queries always run; dry_run only suppresses changes."""

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def default_version(self) -> Optional[int]:
        """Parse "Default Version: N" from wsl --status; None when unknown."""
        r = run_cmd([WSL, "--status"], check=False)
        return parse_default_version(r.stdout)

    def set_default_version(self, version: int) -> None:
        run_cmd([WSL, "--set-default-version", str(version)], dry_run=self.dry_run)

    def list_distributions(self) -> List[str]:
        # Exits non-zero when no distribution is installed yet.
        r = run_cmd([WSL, "--list", "--quiet"], check=False)
        if not r.ok:
            return []
        return parse_distribution_list(r.stdout)

    def install_distribution(self, name: str) -> None:
        run_cmd([WSL, "--install", "--distribution", name, "--no-launch"], dry_run=self.dry_run)


_DEFAULT_VERSION_RE = re.compile(r"Default Version:\s*(\d+)", re.IGNORECASE)


def parse_default_version(text: str) -> Optional[int]:
    m = _DEFAULT_VERSION_RE.search(text or "")
    return int(m.group(1)) if m else None


def parse_distribution_list(text: str) -> List[str]:
    names: List[str] = []
    for line in text.splitlines():
        line = line.replace("\x00", "").strip()
        if line:
            names.append(line)
    return names


def has_distribution(installed: List[str], name: str) -> bool:
    wanted = name.lower()
    return any(d.lower() == wanted for d in installed)
