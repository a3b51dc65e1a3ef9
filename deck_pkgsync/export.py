from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .config import SyncConfig, load_config
from .errors import FatalError
from .lib.command import have_cmd
from .lib.manifest import backup_existing, preview, read_manifest, write_manifest
from .lib.pacman import list_explicit
from .lib.steamos import looks_like_steamos
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .prompts import banner, confirm

logger = logging.getLogger(__name__)

PROG = "deck-pkgexport"

PREVIEW_LINES = 5


def export_manifest(path: Path) -> list[str]:
    """Query pacman, back up any old manifest, write the new one.

    The query runs first so a failing pacman leaves the old manifest alone.
    """

    if not have_cmd("pacman"):
        raise FatalError("pacman is not available")
    if not have_cmd("paru"):
        logger.warning("paru AUR helper not found; pacman -Qqe still lists AUR packages")

    logger.info("Gathering installed packages...")
    try:
        names = list_explicit()
    except RuntimeError as e:
        raise FatalError(f"Could not query the package database: {e}") from e

    backup_existing(path)
    count = write_manifest(path, names)
    logger.info("Exported %d packages to %s", count, path)

    written = read_manifest(path)
    if not written:
        raise FatalError(f"Failed to create package list file: {path} is empty")
    return written


def run(cfg: SyncConfig) -> int:
    path = Path(cfg.export_manifest).expanduser()

    banner("Steam Deck Package List Exporter")
    if not looks_like_steamos():
        logger.warning("This tool is designed for Steam Deck running SteamOS Holo")

    print("This will export all explicitly installed packages (official + AUR) to:")
    print(f"  {path}")
    print("The file will contain one package name per line.")
    print()
    if not confirm("Continue?"):
        logger.info("Operation cancelled")
        return 0

    written = export_manifest(path)
    logger.info("Package list successfully created at %s", path)
    print("First few entries:")
    for line in preview(written, PREVIEW_LINES):
        print(line)
    logger.info("Package list export completed! Use it to reinstall packages on another system.")
    return 0


def add_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--output", "-o", default=None, help="Manifest path (default: ~/pkglist)")


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
        cfg = load_config(args.config).with_overrides(export_manifest=args.output)
        return run(cfg)
    except (FatalError, FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1
    except (RuntimeError, OSError):
        logger.exception("%s failed", PROG)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
