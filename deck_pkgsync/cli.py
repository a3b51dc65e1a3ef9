from __future__ import annotations

import argparse
from typing import Optional

from . import export, proxy_stop, restore
from .logging_utils import DEFAULT_LOG_PATH


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="deck-pkgsync")
    p.add_argument("--config", default=None, help="Path to YAML config")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")

    sub = p.add_subparsers(dest="subcmd", required=True)

    sp = sub.add_parser("export", help="Write explicitly installed packages to a manifest")
    export.add_arguments(sp)
    sp.set_defaults(func=export.execute)

    sp = sub.add_parser("restore", help="Install every package listed in a manifest")
    restore.add_arguments(sp)
    sp.set_defaults(func=restore.execute)

    sp = sub.add_parser("proxy-stop", help="Stop the proxy daemon")
    sp.set_defaults(func=proxy_stop.execute)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
