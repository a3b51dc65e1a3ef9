from __future__ import annotations

import logging
from typing import Mapping, Sequence

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)

DEFAULT_INSTALLER = "paru"
DEFAULT_INSTALLER_FLAGS = ("--skipreview", "--needed", "--noconfirm")


def list_explicit() -> list[str]:
    """Explicitly-installed packages, exactly as pacman reports them."""

    r = run_cmd(["pacman", "-Qqe"])
    return [line.strip() for line in r.stdout.splitlines() if line.strip()]


def installed_names() -> set[str]:
    """All package names in the local database."""

    r = run_cmd(["pacman", "-Qq"])
    return {line.strip() for line in r.stdout.splitlines() if line.strip()}


def bulk_install(
    packages: Sequence[str],
    *,
    installer: str = DEFAULT_INSTALLER,
    flags: Sequence[str] = DEFAULT_INSTALLER_FLAGS,
    env: Mapping[str, str] | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Feed every package name to the installer on stdin in one call.

    Never raises on a non-zero exit; the caller decides what that means.
    """

    argv = [installer, *flags, "-S", "-"]
    stdin = "".join(f"{p}\n" for p in packages)
    return run_cmd(argv, check=False, env=env, input_text=stdin, stream=True, dry_run=dry_run)
