from __future__ import annotations

import logging

from ..lib.wsl import has_distribution
from ..pipeline import ProvisionCtx, SubsystemControl
from ..state_store import RunState

logger = logging.getLogger(__name__)


def ensure_distribution(wsl: SubsystemControl, name: str) -> bool:
    """Install the distribution if missing. Returns True if it was installed now."""

    installed = wsl.list_distributions()
    if has_distribution(installed, name):
        logger.info("WSL distribution %s already installed", name)
        return False
    logger.info("Installing WSL distribution %s (installed: %s)", name, ", ".join(installed) or "none")
    wsl.install_distribution(name)
    return True


class InstallDistroStep:
    step_id = "40_install_distro"

    def run(self, ctx: ProvisionCtx, state: RunState) -> RunState:
        name = ctx.cfg.distribution
        if ensure_distribution(ctx.caps.wsl, name):
            # Not detected or looped on: a second reboot is left to the operator.
            state.warn(f"{name} was just installed; a further restart may be required before first use.")
        return state
