from __future__ import annotations

import builtins
from dataclasses import dataclass
from typing import Dict, List, Optional

import pytest

from deck_pkgsync import export, proxy_stop, restore
from deck_pkgsync.lib import hooks, pacman, proxy, steamos
from deck_pkgsync.lib.command import CmdResult


@dataclass
class Call:
    argv: List[str]
    input_text: Optional[str]
    env: Dict[str, str]
    dry_run: bool


class FakeRunner:
    """Stands in for run_cmd; answers by argv prefix, last rule wins."""

    def __init__(self) -> None:
        self.calls: List[Call] = []
        self.rules: list = []

    def on(self, prefix, *, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.rules.append((list(prefix), returncode, stdout, stderr))

    def __call__(self, argv, *, check=True, env=None, cwd=None, input_text=None, stream=False, dry_run=False):
        argv = list(argv)
        self.calls.append(Call(argv=argv, input_text=input_text, env=dict(env or {}), dry_run=dry_run))
        rc, out, err = 0, "", ""
        if not dry_run:
            for prefix, r_rc, r_out, r_err in reversed(self.rules):
                if argv[: len(prefix)] == prefix:
                    rc, out, err = r_rc, r_out, r_err
                    break
        if check and rc != 0:
            raise RuntimeError(f"Command failed ({rc}): {argv}")
        return CmdResult(argv=argv, returncode=rc, stdout=out, stderr=err)

    def find(self, *prefix: str) -> List[Call]:
        return [c for c in self.calls if c.argv[: len(prefix)] == list(prefix)]

    def ran(self, *prefix: str) -> bool:
        return bool(self.find(*prefix))

    def index(self, *prefix: str) -> int:
        for i, c in enumerate(self.calls):
            if c.argv[: len(prefix)] == list(prefix):
                return i
        raise AssertionError(f"{prefix} was never run")


@pytest.fixture
def fake_run(monkeypatch) -> FakeRunner:
    runner = FakeRunner()
    for mod in (pacman, steamos, hooks, proxy):
        monkeypatch.setattr(mod, "run_cmd", runner)
    return runner


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    for mod in (export, restore, proxy_stop):
        monkeypatch.setattr(mod, "configure_logging", lambda **kw: "test.log")
    monkeypatch.setattr(export, "looks_like_steamos", lambda: True)
    monkeypatch.setattr(restore, "looks_like_steamos", lambda: True)


@pytest.fixture
def answers(monkeypatch):
    """Feed canned replies to input(); running out counts as EOF."""

    def _set(*replies: str) -> List[str]:
        queue = list(replies)
        asked: List[str] = []

        def fake_input(prompt: str = "") -> str:
            asked.append(prompt)
            if not queue:
                raise EOFError
            return queue.pop(0)

        monkeypatch.setattr(builtins, "input", fake_input)
        return asked

    return _set
