from __future__ import annotations

import logging

from ..pipeline import ProvisionCtx, SubsystemControl
from ..state_store import RunState

logger = logging.getLogger(__name__)


def ensure_default_version(wsl: SubsystemControl, version: int) -> bool:
    """Set the WSL default version unless it is already set. Returns True if changed."""

    current = wsl.default_version()
    if current == version:
        logger.info("WSL default version already %s", version)
        return False
    logger.info("Setting WSL default version to %s (was %s)", version, current)
    wsl.set_default_version(version)
    return True


class WslDefaultVersionStep:
    step_id = "30_wsl_default_version"

    def run(self, ctx: ProvisionCtx, state: RunState) -> RunState:
        ensure_default_version(ctx.caps.wsl, ctx.cfg.wsl_default_version)
        return state
