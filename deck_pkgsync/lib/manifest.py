from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Collection, Iterable, List, Optional

from .fsutil import atomic_write_bytes

logger = logging.getLogger(__name__)

BACKUP_TIME_FORMAT = "%Y%m%d_%H%M%S"


@dataclass(frozen=True)
class VerifyResult:
    installed: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.installed) + len(self.missing)


def read_manifest(path: str | Path) -> list[str]:
    """Return package names in file order; blank lines skipped, duplicates kept."""

    text = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


def write_manifest(path: str | Path, names: Iterable[str]) -> int:
    lines = [str(n) for n in names]
    data = "".join(f"{n}\n" for n in lines).encode("utf-8")
    atomic_write_bytes(path, data)
    return len(lines)


def backup_path_for(path: str | Path, *, now: Optional[float] = None) -> Path:
    p = Path(path)
    stamp = time.strftime(BACKUP_TIME_FORMAT, time.localtime(now))
    candidate = p.with_name(f"{p.name}_{stamp}.bak")
    n = 1
    # Two exports within the same second must not share a backup name.
    while candidate.exists():
        candidate = p.with_name(f"{p.name}_{stamp}.bak.{n}")
        n += 1
    return candidate


def backup_existing(path: str | Path, *, now: Optional[float] = None) -> Optional[Path]:
    """Move an existing manifest aside under a timestamped name."""

    p = Path(path)
    if not p.exists():
        return None
    target = backup_path_for(p, now=now)
    p.rename(target)
    logger.info("Existing manifest backed up to %s", target)
    return target


def classify(names: Iterable[str], installed: Collection[str]) -> VerifyResult:
    ok: list[str] = []
    missing: list[str] = []
    for name in names:
        if not name:
            continue
        (ok if name in installed else missing).append(name)
    return VerifyResult(installed=ok, missing=missing)


def preview(names: List[str], limit: int) -> list[str]:
    out = list(names[:limit])
    if len(names) > limit:
        out.append(f"... and {len(names) - limit} more packages")
    return out
