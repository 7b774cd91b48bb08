from __future__ import annotations

import logging
from typing import Iterable

from ..catalog import FeatureDescriptor
from ..pipeline import FeatureQuery, ProvisionCtx
from ..state_store import RunState

logger = logging.getLogger(__name__)


def ensure_features(features: FeatureQuery, catalog: Iterable[FeatureDescriptor]) -> bool:
    """Enable every catalog feature that is not already enabled.

    Returns True if anything was enabled, meaning a restart is pending.
    Never restarts by itself.
    """

    any_changed = False
    for feature in catalog:
        if features.is_enabled(feature.identifier):
            logger.info("%s (%s) already enabled", feature.label, feature.identifier)
            continue
        logger.info("Enabling %s (%s)", feature.label, feature.identifier)
        features.enable(feature.identifier)
        any_changed = True
    return any_changed


class EnableFeaturesStep:
    step_id = "10_enable_features"

    def run(self, ctx: ProvisionCtx, state: RunState) -> RunState:
        state.need_restart = ensure_features(ctx.caps.features, ctx.cfg.features)
        return state
