from __future__ import annotations

import logging

from .powershell import ps_quote, run_powershell

logger = logging.getLogger(__name__)


class DismFeatures:
    """Windows optional features via the DISM PowerShell cmdlets."""

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def is_enabled(self, feature_id: str) -> bool:
        # Read-only: runs even in dry-run mode.
        r = run_powershell(
            f"(Get-WindowsOptionalFeature -Online -FeatureName {ps_quote(feature_id)}).State"
        )
        state = r.stdout.strip()
        logger.debug("Feature %s state=%s", feature_id, state or "<empty>")
        return state == "Enabled"

    def enable(self, feature_id: str) -> None:
        run_powershell(
            f"Enable-WindowsOptionalFeature -Online -FeatureName {ps_quote(feature_id)} "
            "-All -NoRestart | Out-Null",
            dry_run=self.dry_run,
        )
