from __future__ import annotations

import argparse
import logging
from typing import Optional

from .config import load_config
from .lib.proxy import stop_proxy
from .logging_utils import DEFAULT_LOG_PATH, configure_logging

logger = logging.getLogger(__name__)

PROG = "deck-proxy-stop"


def execute(args: argparse.Namespace) -> int:
    configure_logging(log_path=args.log)
    try:
        cfg = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1
    except (RuntimeError, OSError):
        logger.exception("%s failed", PROG)
        return 1

    for w in stop_proxy(cfg.proxy_process_pattern):
        logger.warning(w)
    print(f"To drop the proxy variables from your shell: source {cfg.proxy_profile} && proxyoff")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog=PROG)
    p.add_argument("--config", default=None, help="Path to YAML config")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    return execute(p.parse_args(argv))


if __name__ == "__main__":
    raise SystemExit(main())
