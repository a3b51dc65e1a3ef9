from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from .command import run_cmd

logger = logging.getLogger(__name__)

HookStatus = Literal["absent", "ok", "failed"]


@dataclass(frozen=True)
class HookResult:
    path: str
    status: HookStatus
    returncode: Optional[int] = None
    made_executable: bool = False


def ensure_executable(path: Path) -> bool:
    """Add execute bits mirroring the read bits. Returns True if changed."""

    if os.access(path, os.X_OK):
        return False
    mode = path.stat().st_mode
    add = stat.S_IXUSR
    if mode & stat.S_IRGRP:
        add |= stat.S_IXGRP
    if mode & stat.S_IROTH:
        add |= stat.S_IXOTH
    path.chmod(mode | add)
    return True


def run_hook(path: str, *, dry_run: bool = False) -> HookResult:
    p = Path(path).expanduser()
    if not p.is_file():
        logger.info("No hook found at %s", path)
        return HookResult(path=path, status="absent")

    changed = False
    if not dry_run:
        try:
            changed = ensure_executable(p)
        except OSError as e:
            # Run it anyway; a hook that cannot execute reports failure through its exit code.
            logger.warning("Could not make hook %s executable: %s", path, e)
        else:
            if changed:
                logger.warning("Hook %s was not executable, made it executable", path)

    # Invoke by absolute path so "./pre_hook.sh" style defaults do not hit PATH lookup.
    r = run_cmd([str(p.resolve())], check=False, stream=True, dry_run=dry_run)
    status: HookStatus = "ok" if r.ok else "failed"
    return HookResult(path=path, status=status, returncode=r.returncode, made_executable=changed)
