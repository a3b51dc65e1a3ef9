from __future__ import annotations

import logging
import re
import shlex
from pathlib import Path

from .fsutil import atomic_write_bytes

logger = logging.getLogger(__name__)


def render_assignment(key: str, value: str) -> str:
    """KEY=value quoted for POSIX shells.

    shlex.quote wraps the value in single quotes and splices embedded single
    quotes as '"'"', so nothing inside is expanded when the file is sourced.
    """

    if not re.fullmatch(r"[A-Za-z_][A-Za-z0-9_]*", key):
        raise ValueError(f"Invalid shell variable name: {key!r}")
    return f"{key}={shlex.quote(value)}"


def set_env_var(path: str | Path, key: str, value: str) -> bool:
    """Replace every KEY= line in a shell-sourced env file, or append one.

    Other lines are kept byte-for-byte, line endings included.
    Returns True if an existing line was replaced.
    """

    p = Path(path)
    raw = p.read_bytes()
    lines = raw.splitlines(keepends=True)
    prefix = f"{key}=".encode("utf-8")
    new_line = render_assignment(key, value).encode("utf-8")

    out: list[bytes] = []
    replaced = False
    for line in lines:
        if line.startswith(prefix):
            body = line.rstrip(b"\r\n")
            out.append(new_line + line[len(body):])
            replaced = True
        else:
            out.append(line)

    if not replaced:
        if out and not out[-1].endswith((b"\n", b"\r")):
            out.append(b"\n")
        out.append(new_line + b"\n")

    atomic_write_bytes(p, b"".join(out))
    logger.info("%s %s in %s", "Rewrote" if replaced else "Appended", key, p)
    return replaced
