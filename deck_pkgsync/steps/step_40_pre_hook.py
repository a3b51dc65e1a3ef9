from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import FatalError
from ..lib.hooks import run_hook
from ..pipeline import RestoreCtx

logger = logging.getLogger(__name__)


class PreHookStep:
    step_id = "40_pre_hook"

    def run(self, ctx: RestoreCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        res = run_hook(ctx.cfg.pre_hook, dry_run=ctx.dry_run)
        state.setdefault("execution", {}).setdefault("hooks", {})["pre"] = res.status
        if res.status == "failed":
            raise FatalError(f"Pre-installation hook failed (exit {res.returncode}). Aborting installation.")
        if res.status == "ok":
            logger.info("Pre-installation hook executed successfully")
        return state
