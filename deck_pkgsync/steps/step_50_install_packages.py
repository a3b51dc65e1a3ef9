from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import FatalError
from ..lib.manifest import read_manifest
from ..lib.pacman import bulk_install
from ..pipeline import RestoreCtx
from ..state_store import add_warning

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "50_install_packages"

    def run(self, ctx: RestoreCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        packages = read_manifest(ctx.cfg.manifest_path)
        logger.info("Installing %d packages in one batch using %s...", len(packages), ctx.cfg.installer)

        r = bulk_install(
            packages,
            installer=ctx.cfg.installer,
            flags=ctx.cfg.installer_flags,
            env=ctx.proxy_env,
            dry_run=ctx.dry_run,
        )
        state.setdefault("execution", {})["install"] = {
            "argv": r.argv,
            "returncode": r.returncode,
            "requested": len(packages),
        }

        if r.ok:
            logger.info("All installable packages processed successfully")
            return state

        # The installer's exit code cannot tell an unavailable package from a network failure.
        msg = f"{ctx.cfg.installer} exited {r.returncode}; some packages could not be installed"
        if ctx.cfg.on_install_failure == "fail":
            raise FatalError(msg)
        add_warning(state, self.step_id, msg)
        return state
