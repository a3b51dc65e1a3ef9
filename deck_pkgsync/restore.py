from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .config import SyncConfig, load_config
from .errors import FatalError
from .lib.env import PATHS
from .lib.manifest import preview, read_manifest
from .lib.steamos import looks_like_steamos
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import RestoreCtx, run_pipeline
from .prompts import banner, confirm
from .state_store import mark_step_completed, new_state, save_state
from .steps import (
    DisableReadonlyStep,
    EnableReadonlyStep,
    InstallPackagesStep,
    PostHookStep,
    PreflightStep,
    PreHookStep,
    StartProxyStep,
    StopProxyStep,
    VerifyInstallStep,
)

logger = logging.getLogger(__name__)

PROG = "deck-pkgrestore"

DEFAULT_STATE_PATH = PATHS.state_default
PREVIEW_LINES = 10


def build_steps():
    return [
        DisableReadonlyStep(),
        StartProxyStep(),
        PreHookStep(),
        InstallPackagesStep(),
        VerifyInstallStep(),
        PostHookStep(),
    ]


def build_cleanup():
    return [
        StopProxyStep(),
        EnableReadonlyStep(),
    ]


def _found(path: str) -> bool:
    return Path(path).expanduser().is_file()


def _show_plan(cfg: SyncConfig, names: list[str]) -> None:
    print(f"Package list contains {len(names)} packages:")
    for line in preview(names, PREVIEW_LINES):
        print(line)
    print()
    print("Hook scripts:")
    print(f"  Pre-hook: {'Found' if _found(cfg.pre_hook) else 'Not found'} ({cfg.pre_hook})")
    print(f"  Post-hook: {'Found' if _found(cfg.post_hook) else 'Not found'} ({cfg.post_hook})")
    print()


def _show_summary(cfg: SyncConfig, names: list[str], use_proxy: bool) -> None:
    print()
    banner("Package Installation Summary")
    print(f"- Source file: {cfg.manifest_path}")
    print(f"- Total packages to install: {len(names)}")
    print(f"- Using proxy: {'Yes' if use_proxy else 'No'}")
    print(f"- Pre-installation hook: {'Yes' if _found(cfg.pre_hook) else 'No'}")
    print(f"- Post-installation hook: {'Yes' if _found(cfg.post_hook) else 'No'}")
    print(f"- On installer failure: {cfg.on_install_failure}")
    print()


def run(
    cfg: SyncConfig,
    *,
    state_path: str = DEFAULT_STATE_PATH,
    dry_run: bool = False,
) -> Dict[str, Any]:
    """Confirm with the operator, then run the restore sequence.

    Returns the run record. Raises FatalError on any fatal failure; the
    read-only flag and proxy are put back before it propagates.
    """

    state = new_state(cfg.summary())
    state["execution"]["dry_run"] = dry_run

    banner("Steam Deck Package Restorer with Hooks")
    if not looks_like_steamos():
        logger.warning("This tool is designed for Steam Deck running SteamOS Holo")

    try:
        ctx = RestoreCtx(cfg=cfg, dry_run=dry_run)
        preflight = PreflightStep()
        state["execution"]["failed_step"] = preflight.step_id
        state = preflight.run(ctx, state)
        state["execution"].pop("failed_step")
        mark_step_completed(state, preflight.step_id)
        names = read_manifest(cfg.manifest_path)
        _show_plan(cfg, names)

        banner("Proxy Configuration")
        use_proxy = confirm("Do you want to use a proxy for package downloads?")
        logger.info("Proxy functionality enabled" if use_proxy else "No proxy will be used")
        _show_summary(cfg, names, use_proxy)

        if not confirm("Proceed with installation? This may take a long time."):
            logger.info("Installation cancelled")
            state["execution"]["cancelled"] = True
            return state

        ctx = RestoreCtx(cfg=cfg, dry_run=dry_run, use_proxy=use_proxy)
        logger.info("Starting package restoration...")
        result = run_pipeline(ctx=ctx, state=state, steps=build_steps(), cleanup=build_cleanup())
        state = result.state
        state["execution"]["summary"] = {
            "ran_steps": result.ran_steps,
            "cleanup_steps": result.cleanup_steps,
        }
        return state
    except Exception as e:
        state.setdefault("execution", {}).setdefault("errors", []).append(
            {
                "step": (state.get("execution") or {}).get("failed_step"),
                "error": str(e),
            }
        )
        raise
    finally:
        save_state(state_path, state)


def _report(state: Dict[str, Any]) -> None:
    exe = state.get("execution") or {}
    warnings = exe.get("warnings") or []
    missing = (exe.get("verify") or {}).get("missing") or []
    if warnings:
        logger.warning("Completed with %d warning(s)", len(warnings))
    if missing:
        logger.warning("Missing packages: %s", " ".join(missing))
    logger.info("Package restoration completed!")
    logger.info("Please restart your Steam Deck for all changes to take effect.")


def add_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--manifest", "-m", default=None, help="Manifest path (default: ./pkglist)")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Where to write the run record (json|yaml)")
    p.add_argument("--dry-run", action="store_true", help="Log commands without executing them")


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog=PROG)
    p.add_argument("--config", default=None, help="Path to YAML config")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    add_arguments(p)
    args = p.parse_args(argv)
    return execute(args)


def execute(args: argparse.Namespace) -> int:
    configure_logging(log_path=args.log)
    try:
        cfg = load_config(args.config).with_overrides(manifest=args.manifest)
        state = run(cfg, state_path=args.state, dry_run=bool(args.dry_run))
    except (FatalError, FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1
    except (RuntimeError, OSError):
        logger.exception("%s failed", PROG)
        return 1
    except KeyboardInterrupt:
        return 130

    if not (state.get("execution") or {}).get("cancelled"):
        _report(state)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
