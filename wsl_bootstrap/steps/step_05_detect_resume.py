from __future__ import annotations

import logging

from ..pipeline import ProvisionCtx, TaskRegistry
from ..state_store import Phase, RunState

logger = logging.getLogger(__name__)


def detect_resume(tasks: TaskRegistry, task_name: str) -> bool:
    """True iff the reentry task is registered. Lookup errors count as absent."""

    try:
        found = tasks.exists(task_name)
    except Exception as e:
        logger.warning("Could not look up task %s (%s); assuming a fresh run", task_name, e)
        return False
    return bool(found)


class DetectResumeStep:
    step_id = "05_detect_resume"

    def run(self, ctx: ProvisionCtx, state: RunState) -> RunState:
        state.has_resumed = detect_resume(ctx.caps.tasks, ctx.cfg.task_name)
        state.phase = Phase.RESUMED if state.has_resumed else Phase.FRESH

        if state.has_resumed:
            logger.info("Reentry task %s found: continuing after reboot", ctx.cfg.task_name)
        else:
            logger.info("No reentry task: fresh run")
            if state.journal_phase == Phase.AWAITING_REBOOT.value:
                state.warn(
                    f"Journal says a reboot was pending but task {ctx.cfg.task_name} is gone; "
                    "continuing as a fresh run"
                )
        return state
