from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from .config import ProvisionConfig
from .lib.command import CmdResult
from .lib.features import DismFeatures
from .lib.host import OsVersion, WindowsHost
from .lib.power import ShutdownRestart
from .lib.tasks import ReentryTask, ScheduledTasks
from .lib.winget import Winget
from .lib.wsl import WslCli
from .state_store import RunState

logger = logging.getLogger(__name__)


class HostInfo(Protocol):
    def is_admin(self) -> bool:
        ...

    def os_version(self) -> OsVersion:
        ...


class FeatureQuery(Protocol):
    def is_enabled(self, feature_id: str) -> bool:
        ...

    def enable(self, feature_id: str) -> None:
        ...


class TaskRegistry(Protocol):
    def exists(self, name: str) -> bool:
        ...

    def register(self, task: ReentryTask) -> None:
        ...

    def unregister(self, name: str) -> None:
        ...


class SubsystemControl(Protocol):
    def default_version(self) -> Optional[int]:
        ...

    def set_default_version(self, version: int) -> None:
        ...

    def list_distributions(self) -> List[str]:
        ...

    def install_distribution(self, name: str) -> None:
        ...


class PackageManager(Protocol):
    def is_available(self) -> bool:
        ...

    def install(self, package_id: str) -> CmdResult:
        ...


class PowerControl(Protocol):
    def schedule_restart(self, delay_s: int) -> None:
        ...


@dataclass(frozen=True)
class Capabilities:
    host: HostInfo
    features: FeatureQuery
    tasks: TaskRegistry
    wsl: SubsystemControl
    packages: PackageManager
    power: PowerControl

    @classmethod
    def windows(cls, *, dry_run: bool = False) -> "Capabilities":
        return cls(
            host=WindowsHost(),
            features=DismFeatures(dry_run=dry_run),
            tasks=ScheduledTasks(dry_run=dry_run),
            wsl=WslCli(dry_run=dry_run),
            packages=Winget(dry_run=dry_run),
            power=ShutdownRestart(dry_run=dry_run),
        )


@dataclass(frozen=True)
class ProvisionCtx:
    cfg: ProvisionConfig
    caps: Capabilities
    state_path: str
    # Executable and argument string the reentry task runs after restart.
    reentry_execute: str = ""
    reentry_arguments: str = ""


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, ctx: ProvisionCtx, state: RunState) -> RunState:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: RunState
    ran_steps: List[str] = field(default_factory=list)


def run_pipeline(
    *,
    ctx: ProvisionCtx,
    state: RunState,
    steps: Sequence[Step],
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps in order.

    Steps are not skipped on re-run: each one checks live system state
    itself, so the post-reboot pass repeats cheap queries instead of
    trusting a journal. RebootScheduled propagates to the caller.
    """

    ran: List[str] = []

    for step in steps:
        state.current_step = step.step_id
        logger.info("Running step %s", step.step_id)
        state = step.run(ctx, state)
        state.mark_step_completed(step.step_id)
        ran.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    state.current_step = None
    return PipelineResult(state=state, ran_steps=ran)
