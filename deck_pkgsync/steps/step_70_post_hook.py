from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.hooks import run_hook
from ..pipeline import RestoreCtx
from ..state_store import add_warning

logger = logging.getLogger(__name__)


class PostHookStep:
    step_id = "70_post_hook"

    def run(self, ctx: RestoreCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        res = run_hook(ctx.cfg.post_hook, dry_run=ctx.dry_run)
        state.setdefault("execution", {}).setdefault("hooks", {})["post"] = res.status
        if res.status == "failed":
            add_warning(
                state,
                self.step_id,
                f"Post-installation hook failed (exit {res.returncode}), but installation has completed.",
            )
        elif res.status == "ok":
            logger.info("Post-installation hook executed successfully")
        return state
