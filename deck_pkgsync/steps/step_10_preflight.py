from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import FatalError
from ..lib.command import have_cmd
from ..lib.manifest import read_manifest
from ..pipeline import RestoreCtx

logger = logging.getLogger(__name__)


class PreflightStep:
    step_id = "10_preflight"

    def run(self, ctx: RestoreCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        manifest = ctx.cfg.manifest_path
        if not manifest.is_file():
            raise FatalError(f"Package list file not found: {manifest}")
        if manifest.stat().st_size == 0:
            raise FatalError(f"Package list file is empty: {manifest}")

        names = read_manifest(manifest)
        if not names:
            raise FatalError(f"Package list file has no package names: {manifest}")

        if not have_cmd(ctx.cfg.installer):
            raise FatalError(f"{ctx.cfg.installer} is not installed. Please install it first.")

        state.setdefault("execution", {})["manifest"] = {"path": str(manifest), "count": len(names)}
        return state
