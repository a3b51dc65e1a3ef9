from __future__ import annotations

import pytest

from deck_pkgsync import export
from deck_pkgsync.errors import FatalError
from deck_pkgsync.lib.manifest import read_manifest


@pytest.fixture
def tools(monkeypatch):
    present = {"pacman", "paru"}
    monkeypatch.setattr(export, "have_cmd", lambda name: name in present)
    return present


def test_export_writes_pacman_output_verbatim(tmp_path, fake_run, tools):
    fake_run.on(["pacman", "-Qqe"], stdout="base\nzsh\nvim\n")
    out = tmp_path / "pkglist"
    assert export.export_manifest(out) == ["base", "zsh", "vim"]
    assert out.read_text(encoding="utf-8") == "base\nzsh\nvim\n"


def test_export_twice_keeps_first_manifest_as_backup(tmp_path, fake_run, tools):
    out = tmp_path / "pkglist"
    fake_run.on(["pacman", "-Qqe"], stdout="first\n")
    export.export_manifest(out)
    fake_run.on(["pacman", "-Qqe"], stdout="second\n")
    export.export_manifest(out)

    backups = sorted(p for p in tmp_path.iterdir() if p.name != "pkglist")
    assert len(backups) == 1
    assert backups[0].name.startswith("pkglist_") and backups[0].name.endswith(".bak")
    assert read_manifest(backups[0]) == ["first"]
    assert read_manifest(out) == ["second"]


def test_query_failure_is_fatal_and_keeps_old_manifest(tmp_path, fake_run, tools):
    out = tmp_path / "pkglist"
    out.write_text("old\n", encoding="utf-8")
    fake_run.on(["pacman", "-Qqe"], returncode=1, stderr="db locked")
    with pytest.raises(FatalError, match="package database"):
        export.export_manifest(out)
    assert out.read_text(encoding="utf-8") == "old\n"
    assert [p.name for p in tmp_path.iterdir()] == ["pkglist"]


def test_missing_pacman_is_fatal(tmp_path, fake_run, tools):
    tools.discard("pacman")
    with pytest.raises(FatalError, match="pacman"):
        export.export_manifest(tmp_path / "pkglist")
    assert fake_run.calls == []


def test_missing_paru_is_only_a_warning(tmp_path, fake_run, tools, caplog):
    tools.discard("paru")
    fake_run.on(["pacman", "-Qqe"], stdout="base\n")
    export.export_manifest(tmp_path / "pkglist")
    assert any("paru" in r.getMessage() for r in caplog.records if r.levelname == "WARNING")


def test_empty_package_list_is_fatal(tmp_path, fake_run, tools):
    fake_run.on(["pacman", "-Qqe"], stdout="")
    with pytest.raises(FatalError, match="empty"):
        export.export_manifest(tmp_path / "pkglist")


def test_main_confirms_before_writing(tmp_path, fake_run, tools, answers, capsys):
    out = tmp_path / "pkglist"
    fake_run.on(["pacman", "-Qqe"], stdout="".join(f"p{i}\n" for i in range(8)))

    answers("n")
    assert export.main(["--output", str(out)]) == 0
    assert not out.exists()

    answers("Y")
    assert export.main(["--output", str(out)]) == 0
    assert len(read_manifest(out)) == 8
    assert "... and 3 more packages" in capsys.readouterr().out


def test_main_returns_1_on_fatal(tmp_path, fake_run, tools, answers):
    fake_run.on(["pacman", "-Qqe"], returncode=1)
    answers("y")
    assert export.main(["--output", str(tmp_path / "pkglist")]) == 1


def test_main_returns_1_when_manifest_dir_is_unwritable(tmp_path, fake_run, tools, answers):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    fake_run.on(["pacman", "-Qqe"], stdout="base\n")
    answers("y")
    assert export.main(["--output", str(blocker / "pkglist")]) == 1
