from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .command import run_cmd
from .envfile import set_env_var

logger = logging.getLogger(__name__)

URL_KEY = "CLASH_URL"


class ProxyError(RuntimeError):
    def __init__(self, message: str, *, started: bool = False) -> None:
        super().__init__(message)
        # True once start.sh has been invoked, so the daemon may be running.
        self.started = started


@dataclass(frozen=True)
class ProxySession:
    env: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)


def parse_env_dump(dump: str) -> Dict[str, str]:
    """Parse `env -0` output into a dict."""

    out: Dict[str, str] = {}
    for item in dump.split("\0"):
        if not item or "=" not in item:
            continue
        k, v = item.split("=", 1)
        out[k] = v
    return out


def env_delta(before: Mapping[str, str], after: Mapping[str, str]) -> Dict[str, str]:
    return {k: v for k, v in after.items() if before.get(k) != v}


def load_proxy_env(profile_script: str, *, dry_run: bool = False) -> Dict[str, str]:
    """Source the profile script, run proxyon, and return what changed."""

    script = f"set -e; . {shlex.quote(profile_script)}; proxyon >&2; env -0"
    r = run_cmd(["bash", "-c", script], check=False, dry_run=dry_run)
    if not r.ok:
        raise ProxyError(f"Failed to enable proxy (proxyon exited {r.returncode})", started=True)
    delta = env_delta(os.environ, parse_env_dump(r.stdout))
    # Shell bookkeeping variables change on every invocation.
    for k in ("_", "SHLVL", "PWD", "OLDPWD"):
        delta.pop(k, None)
    return delta


def start_proxy(
    proxy_dir: str,
    *,
    profile_script: str,
    url: Optional[str] = None,
    dry_run: bool = False,
) -> ProxySession:
    d = Path(proxy_dir).expanduser().resolve()
    start_script = d / "start.sh"
    env_file = d / ".env"
    if not start_script.is_file():
        raise ProxyError(f"Proxy start script not found: {start_script}")
    if not env_file.is_file():
        raise ProxyError(f"Proxy environment file not found: {env_file}")

    if url:
        if dry_run:
            logger.info("Would rewrite %s in %s", URL_KEY, env_file)
        else:
            set_env_var(env_file, URL_KEY, url)

    r = run_cmd(["sudo", "bash", str(start_script)], check=False, stream=True, dry_run=dry_run)
    if not r.ok:
        raise ProxyError(f"Failed to start proxy service (exit {r.returncode})", started=True)

    warnings: List[str] = []
    env: Dict[str, str] = {}
    if Path(profile_script).is_file():
        env = load_proxy_env(profile_script, dry_run=dry_run)
        logger.info("Proxy environment loaded (%s)", ",".join(sorted(env)) or "no changes")
    else:
        msg = f"{profile_script} not found, installing without proxy variables"
        logger.warning(msg)
        warnings.append(msg)

    return ProxySession(env=env, warnings=warnings)


def find_proxy_pids(pattern: str) -> list[int]:
    r = run_cmd(["pgrep", "-f", pattern], check=False)
    pids: list[int] = []
    for tok in r.stdout.split():
        if tok.isdigit():
            pids.append(int(tok))
    return pids


def stop_proxy(pattern: str, *, dry_run: bool = False) -> List[str]:
    """Kill the proxy process. Returns warnings; never raises."""

    warnings: List[str] = []
    pids = [] if dry_run else find_proxy_pids(pattern)
    if not pids:
        logger.info("No running process matches %s", pattern)
        return warnings

    r = run_cmd(["sudo", "kill", "-9", *[str(p) for p in pids]], check=False, dry_run=dry_run)
    if r.ok:
        logger.info("Stopped proxy process(es): %s", ",".join(str(p) for p in pids))
    else:
        warnings.append(f"Failed to stop proxy process(es) {pids}: {r.stderr.strip()}")
        logger.warning(warnings[-1])
    return warnings
