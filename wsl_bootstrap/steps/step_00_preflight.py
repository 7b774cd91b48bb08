from __future__ import annotations

import logging

from ..errors import PreflightError
from ..lib.host import meets_minimum
from ..pipeline import HostInfo, ProvisionCtx
from ..state_store import RunState

logger = logging.getLogger(__name__)


def check_preflight(host: HostInfo, *, min_major: int = 10, min_build: int = 19041) -> None:
    """Raise PreflightError unless the process is elevated on a supported OS."""

    if not host.is_admin():
        raise PreflightError(
            "This program must be run as administrator "
            "(right-click the terminal and select 'Run as administrator')."
        )
    logger.info("Administrator privileges confirmed")

    version = host.os_version()
    if not meets_minimum(version, min_major=min_major, min_build=min_build):
        raise PreflightError(
            f"Unsupported Windows version {version}: WSL 2 needs Windows {min_major} "
            f"build {min_build} or later."
        )
    logger.info("Windows version %s is supported", version)


class PreflightStep:
    step_id = "00_preflight"

    def run(self, ctx: ProvisionCtx, state: RunState) -> RunState:
        check_preflight(ctx.caps.host, min_major=ctx.cfg.min_os_major, min_build=ctx.cfg.min_os_build)
        return state
