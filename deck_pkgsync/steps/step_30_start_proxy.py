from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import FatalError
from ..lib.proxy import ProxyError, start_proxy, stop_proxy
from ..pipeline import RestoreCtx
from ..state_store import add_warning, is_acquired, set_acquired

logger = logging.getLogger(__name__)


class StartProxyStep:
    step_id = "30_start_proxy"

    def run(self, ctx: RestoreCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        if not ctx.use_proxy:
            return state

        logger.info("Configuring proxy settings...")
        try:
            session = start_proxy(
                ctx.cfg.proxy_dir,
                profile_script=ctx.cfg.proxy_profile,
                url=ctx.cfg.proxy_url,
                dry_run=ctx.dry_run,
            )
        except ProxyError as e:
            if e.started:
                set_acquired(state, "proxy_started", True)
            raise FatalError(str(e)) from e
        set_acquired(state, "proxy_started", True)

        for w in session.warnings:
            add_warning(state, self.step_id, w)
        ctx.proxy_env.update(session.env)
        state.setdefault("execution", {})["proxy"] = {"env_keys": sorted(session.env)}
        logger.info("Proxy configured and enabled successfully")
        return state


class StopProxyStep:
    """Cleanup: drop proxy variables and stop the proxy daemon."""

    step_id = "80_stop_proxy"

    def run(self, ctx: RestoreCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        if not is_acquired(state, "proxy_started"):
            return state

        logger.info("Disabling proxy...")
        ctx.proxy_env.clear()
        warnings = stop_proxy(ctx.cfg.proxy_process_pattern, dry_run=ctx.dry_run)
        for w in warnings:
            add_warning(state, self.step_id, w)
        set_acquired(state, "proxy_started", False)
        return state
