from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import FatalError
from ..lib.steamos import set_readonly
from ..pipeline import RestoreCtx
from ..state_store import add_warning, is_acquired, set_acquired

logger = logging.getLogger(__name__)


class DisableReadonlyStep:
    step_id = "20_disable_readonly"

    def run(self, ctx: RestoreCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        if not ctx.cfg.manage_readonly:
            logger.info("Read-only management disabled by config, skipping")
            return state

        logger.info("Disabling SteamOS readonly mode...")
        r = set_readonly(False, dry_run=ctx.dry_run)
        if not r.ok:
            raise FatalError(f"Failed to disable SteamOS readonly mode (exit {r.returncode})")
        set_acquired(state, "readonly_disabled", True)
        logger.info("SteamOS readonly mode disabled")
        return state


class EnableReadonlyStep:
    """Cleanup: put read-only mode back if this run lifted it."""

    step_id = "90_enable_readonly"

    def run(self, ctx: RestoreCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        if not is_acquired(state, "readonly_disabled"):
            return state

        logger.info("Re-enabling SteamOS readonly mode...")
        r = set_readonly(True, dry_run=ctx.dry_run)
        if r.ok:
            set_acquired(state, "readonly_disabled", False)
            logger.info("SteamOS readonly mode re-enabled")
        else:
            add_warning(state, self.step_id, f"Failed to re-enable SteamOS readonly mode (exit {r.returncode})")
        return state
