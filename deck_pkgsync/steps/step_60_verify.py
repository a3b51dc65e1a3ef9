from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.manifest import classify, read_manifest
from ..lib.pacman import installed_names
from ..pipeline import RestoreCtx
from ..state_store import add_warning

logger = logging.getLogger(__name__)


class VerifyInstallStep:
    step_id = "60_verify"

    def run(self, ctx: RestoreCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        if ctx.dry_run:
            logger.info("Verification skipped (dry run)")
            return state

        logger.info("Verifying installed packages...")
        names = read_manifest(ctx.cfg.manifest_path)
        try:
            installed = installed_names()
        except RuntimeError as e:
            state.setdefault("execution", {})["verify"] = {"unknown": names}
            add_warning(state, self.step_id, f"Could not query installed packages, verification skipped: {e}")
            return state
        result = classify(names, installed)
        state.setdefault("execution", {})["verify"] = {
            "installed": result.installed,
            "missing": result.missing,
        }

        if not result.missing:
            logger.info("All %d packages verified successfully", result.total)
            return state

        lines = "\n".join(f"  - {p}" for p in result.missing)
        add_warning(
            state,
            self.step_id,
            f"{len(result.missing)} of {result.total} packages could not be verified:\n{lines}",
        )
        logger.warning("These packages may require manual installation or are not available")
        return state
