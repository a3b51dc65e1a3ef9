from __future__ import annotations

from pathlib import Path

import pytest

from deck_pkgsync.config import SyncConfig, load_config


def test_defaults_without_config_file():
    cfg = load_config(None)
    assert cfg.manifest == "./pkglist"
    assert cfg.export_manifest == "~/pkglist"
    assert cfg.installer == "paru"
    assert cfg.installer_flags == ["--skipreview", "--needed", "--noconfirm"]
    assert cfg.on_install_failure == "warn"
    assert cfg.manage_readonly is True
    assert cfg.proxy_dir == "./clash"
    assert cfg.proxy_url is None
    assert cfg.proxy_profile == "/etc/profile.d/clash.sh"
    assert cfg.proxy_process_pattern == "clash-linux-a"


def test_yaml_values_are_applied(tmp_path):
    p = tmp_path / "deck.yaml"
    p.write_text(
        """
manifest: ~/lists/pkglist
hooks:
  pre: /opt/hooks/pre.sh
installer:
  command: yay
  flags: [--needed, --noconfirm]
  on_failure: FAIL
readonly:
  manage: false
proxy:
  url: "https://x.example/sub?a=1&b='2'"
""",
        encoding="utf-8",
    )
    cfg = load_config(str(p))
    assert cfg.manifest_path == Path("~/lists/pkglist").expanduser()
    assert cfg.pre_hook == "/opt/hooks/pre.sh"
    assert cfg.post_hook == "./post_hook.sh"
    assert cfg.installer == "yay"
    assert cfg.installer_flags == ["--needed", "--noconfirm"]
    assert cfg.on_install_failure == "fail"
    assert cfg.manage_readonly is False
    assert cfg.proxy_url == "https://x.example/sub?a=1&b='2'"


def test_unknown_policy_rejected(tmp_path):
    p = tmp_path / "deck.yml"
    p.write_text("installer:\n  on_failure: retry\n", encoding="utf-8")
    with pytest.raises(ValueError, match="on_failure"):
        load_config(str(p))


@pytest.mark.parametrize(
    "body",
    [
        "- a\n- b\n",
        "hooks: [pre, post]\n",
        "installer:\n  flags: --needed\n",
        "readonly:\n  manage: \"false\"\n",
    ],
)
def test_malformed_config_rejected(tmp_path, body):
    p = tmp_path / "deck.yaml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(p))


def test_missing_or_non_yaml_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))
    j = tmp_path / "deck.json"
    j.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError, match="YAML"):
        load_config(str(j))


def test_overrides_ignore_none_and_do_not_mutate():
    base = SyncConfig(raw={"manifest": "a"})
    assert base.with_overrides(manifest=None).manifest == "a"
    changed = base.with_overrides(manifest="b")
    assert changed.manifest == "b"
    assert base.manifest == "a"
