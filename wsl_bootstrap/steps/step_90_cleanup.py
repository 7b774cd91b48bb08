from __future__ import annotations

import logging

from ..catalog import TUNNEL_DOMAINS
from ..pipeline import ProvisionCtx, TaskRegistry
from ..state_store import Phase, RunState

logger = logging.getLogger(__name__)


def cleanup_if_resumed(tasks: TaskRegistry, task_name: str, has_resumed: bool) -> bool:
    """Remove the reentry task after a resumed run. Failures are only warnings.

    Returns True if the task was removed.
    """

    if not has_resumed:
        return False
    try:
        tasks.unregister(task_name)
    except Exception as e:
        logger.warning("Could not remove reentry task %s: %s", task_name, e)
        return False
    logger.info("Removed reentry task %s", task_name)
    return True


class CleanupStep:
    step_id = "90_cleanup"

    def run(self, ctx: ProvisionCtx, state: RunState) -> RunState:
        if state.has_resumed and not cleanup_if_resumed(ctx.caps.tasks, ctx.cfg.task_name, True):
            state.warn(f"Reentry task {ctx.cfg.task_name} could not be removed; delete it manually.")

        state.phase = Phase.COMPLETE
        logger.info(
            "Advisory: consider blackholing %s in %%SystemRoot%%\\System32\\drivers\\etc\\hosts "
            "to block VS Code remote tunnels",
            " and ".join(TUNNEL_DOMAINS),
        )
        return state
