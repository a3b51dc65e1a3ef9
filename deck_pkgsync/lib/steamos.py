from __future__ import annotations

import logging
from pathlib import Path

from .command import CmdResult, run_cmd
from .env import PATHS

logger = logging.getLogger(__name__)


def looks_like_steamos(*, os_release: str = PATHS.os_release, deck_home: str = PATHS.deck_home) -> bool:
    if not Path(deck_home).is_dir():
        return False
    p = Path(os_release)
    if not p.is_file():
        return False
    return "SteamOS" in p.read_text(encoding="utf-8", errors="replace")


def set_readonly(enabled: bool, *, dry_run: bool = False) -> CmdResult:
    action = "enable" if enabled else "disable"
    return run_cmd(["sudo", "steamos-readonly", action], check=False, dry_run=dry_run)
