from __future__ import annotations

from pathlib import Path

import pytest

from deck_pkgsync import cli, export, proxy_stop, restore
from deck_pkgsync.prompts import confirm


def test_subcommands_dispatch(monkeypatch):
    seen = []
    monkeypatch.setattr(cli.export, "execute", lambda args: seen.append(("export", args.output)) or 0)
    parser = cli.build_parser()
    args = parser.parse_args(["--log", "x.log", "export", "-o", "/tmp/list"])
    assert args.func(args) == 0
    assert seen == [("export", "/tmp/list")]
    assert args.log == "x.log"


def test_restore_subcommand_arguments():
    args = cli.build_parser().parse_args(["restore", "--manifest", "m", "--dry-run"])
    assert args.func is restore.execute
    assert args.manifest == "m" and args.dry_run is True and args.config is None


def test_subcommand_required():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_export_and_proxy_stop_registered():
    p = cli.build_parser()
    assert p.parse_args(["export"]).func is export.execute
    assert p.parse_args(["proxy-stop"]).func.__module__ == "deck_pkgsync.proxy_stop"


@pytest.mark.parametrize(
    "reply,expected",
    [("y", True), ("Y", True), ("yes", True), (" y", True), ("", False), ("n", False), ("sure", False)],
)
def test_confirm_only_accepts_y(reply, expected):
    assert confirm("Continue?", input_fn=lambda prompt: reply) is expected


@pytest.mark.parametrize("module", [export, restore, proxy_stop])
def test_standalone_entry_points_are_registered(module):
    pyproject = (Path(__file__).resolve().parents[1] / "pyproject.toml").read_text(encoding="utf-8")
    assert f'{module.PROG} = "{module.__name__}:main"' in pyproject
