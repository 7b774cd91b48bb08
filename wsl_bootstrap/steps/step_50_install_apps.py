from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List

from ..catalog import AppCatalogEntry
from ..errors import InstallAborted, PreflightError
from ..pipeline import PackageManager, ProvisionCtx
from ..state_store import RunState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallOutcome:
    package_id: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class InstallReport:
    log_path: str
    outcomes: List[InstallOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[str]:
        return [o.package_id for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[str]:
        return [o.package_id for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "log_path": self.log_path,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "outcomes": [{"package_id": o.package_id, "returncode": o.returncode} for o in self.outcomes],
        }


def install_all(
    packages: PackageManager,
    catalog: Iterable[AppCatalogEntry],
    log_path: str,
    *,
    abort_on_error: bool = False,
    dry_run: bool = False,
) -> InstallReport:
    """Install every catalog entry in order, appending raw tool output to log_path.

    A failed entry is recorded and the batch continues, unless abort_on_error
    is set. The package manager must be on PATH before anything is touched.
    A dry run leaves the log file alone.
    """

    if not packages.is_available():
        raise PreflightError("winget was not found on PATH; install App Installer from the Microsoft Store.")

    report = InstallReport(log_path=log_path)
    p = Path(log_path)
    if not dry_run:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("", encoding="utf-8")

    for entry in catalog:
        logger.info("Installing %s", entry.package_id)
        r = packages.install(entry.package_id)
        outcome = InstallOutcome(package_id=entry.package_id, returncode=r.returncode)
        report.outcomes.append(outcome)

        if not dry_run:
            with p.open("a", encoding="utf-8") as fh:
                fh.write(f"===== {entry.package_id} (exit {r.returncode}) =====\n")
                fh.write(r.stdout)
                if r.stderr:
                    fh.write(r.stderr)
                fh.write("\n")

        if outcome.ok:
            logger.info("Installed %s", entry.package_id)
            continue

        logger.error("Failed to install %s (exit %s); see %s", entry.package_id, r.returncode, log_path)
        if abort_on_error:
            raise InstallAborted(f"Aborting after {entry.package_id} failed (exit {r.returncode})")

    logger.info("%d succeeded, %d failed; see %s", len(report.succeeded), len(report.failed), log_path)
    if report.failed:
        logger.warning("Failed packages: %s", ", ".join(report.failed))
    return report


class InstallAppsStep:
    step_id = "50_install_apps"

    def run(self, ctx: ProvisionCtx, state: RunState) -> RunState:
        report = install_all(
            ctx.caps.packages,
            ctx.cfg.apps,
            ctx.cfg.install_log,
            abort_on_error=ctx.cfg.abort_on_error,
            dry_run=ctx.cfg.dry_run,
        )
        state.install_report = report.to_dict()
        return state
