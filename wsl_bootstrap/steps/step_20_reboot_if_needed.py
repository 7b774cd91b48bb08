from __future__ import annotations

import logging

from ..errors import RebootScheduled
from ..lib.tasks import ReentryTask
from ..pipeline import ProvisionCtx
from ..state_store import Phase, RunState, persist

logger = logging.getLogger(__name__)


def maybe_reboot(ctx: ProvisionCtx, state: RunState) -> RunState:
    """Register the reentry task and restart when features changed on a fresh run.

    | need_restart | has_resumed | action                                   |
    |--------------|-------------|------------------------------------------|
    | False        | any         | continue                                 |
    | True         | False       | register task, restart, RebootScheduled  |
    | True         | True        | warn, continue without a second reboot   |
    """

    if not state.need_restart:
        return state

    if state.has_resumed:
        state.warn(
            "Features were enabled again on a resumed run; not rebooting a second time. "
            "A manual restart may be needed before WSL works."
        )
        return state

    task = ReentryTask(
        name=ctx.cfg.task_name,
        execute=ctx.reentry_execute,
        arguments=ctx.reentry_arguments,
    )
    ctx.caps.tasks.register(task)

    state.phase = Phase.AWAITING_REBOOT
    if not ctx.cfg.dry_run:
        # The OS may kill us any time after the restart is scheduled.
        persist(ctx.state_path, state)

    delay_s = ctx.cfg.restart_delay_seconds
    ctx.caps.power.schedule_restart(delay_s)
    logger.info("Restart scheduled in %ss; setup resumes at next startup", delay_s)
    raise RebootScheduled(task.name, delay_s)


class RebootIfNeededStep:
    step_id = "20_reboot_if_needed"

    def run(self, ctx: ProvisionCtx, state: RunState) -> RunState:
        return maybe_reboot(ctx, state)
