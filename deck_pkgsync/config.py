from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .lib.env import PATHS
from .lib.pacman import DEFAULT_INSTALLER, DEFAULT_INSTALLER_FLAGS

INSTALL_FAILURE_POLICIES = ("warn", "fail")


@dataclass(frozen=True)
class SyncConfig:
    raw: Dict[str, Any]

    def _section(self, name: str) -> Dict[str, Any]:
        sec = self.raw.get(name) or {}
        if not isinstance(sec, dict):
            raise ValueError(f"config: {name} must be a mapping")
        return sec

    @property
    def manifest(self) -> str:
        return str(self.raw.get("manifest") or PATHS.restore_manifest)

    @property
    def manifest_path(self) -> Path:
        return Path(self.manifest).expanduser()

    @property
    def export_manifest(self) -> str:
        return str(self.raw.get("export_manifest") or PATHS.export_manifest)

    @property
    def pre_hook(self) -> str:
        return str(self._section("hooks").get("pre") or PATHS.pre_hook)

    @property
    def post_hook(self) -> str:
        return str(self._section("hooks").get("post") or PATHS.post_hook)

    @property
    def installer(self) -> str:
        return str(self._section("installer").get("command") or DEFAULT_INSTALLER)

    @property
    def installer_flags(self) -> List[str]:
        flags = self._section("installer").get("flags")
        if flags is None:
            return list(DEFAULT_INSTALLER_FLAGS)
        if not isinstance(flags, list):
            raise ValueError("config: installer.flags must be a list")
        return [str(f) for f in flags]

    @property
    def on_install_failure(self) -> str:
        policy = str(self._section("installer").get("on_failure") or "warn").lower()
        if policy not in INSTALL_FAILURE_POLICIES:
            raise ValueError(
                f"config: installer.on_failure must be one of {', '.join(INSTALL_FAILURE_POLICIES)}, got {policy!r}"
            )
        return policy

    @property
    def manage_readonly(self) -> bool:
        manage = self._section("readonly").get("manage", True)
        if not isinstance(manage, bool):
            raise ValueError(f"config: readonly.manage must be true or false, got {manage!r}")
        return manage

    @property
    def proxy_dir(self) -> str:
        return str(self._section("proxy").get("dir") or PATHS.proxy_dir)

    @property
    def proxy_url(self) -> Optional[str]:
        url = self._section("proxy").get("url")
        return str(url) if url else None

    @property
    def proxy_profile(self) -> str:
        return str(self._section("proxy").get("profile_script") or PATHS.proxy_profile)

    @property
    def proxy_process_pattern(self) -> str:
        return str(self._section("proxy").get("process_pattern") or "clash-linux-a")

    def with_overrides(self, **values: Any) -> "SyncConfig":
        """Return a copy with top-level keys replaced (None values ignored)."""

        raw = dict(self.raw)
        for k, v in values.items():
            if v is not None:
                raw[k] = v
        return SyncConfig(raw=raw)

    def validate(self) -> "SyncConfig":
        # Touch every property so malformed values fail before anything runs.
        for name in (
            "manifest",
            "export_manifest",
            "pre_hook",
            "post_hook",
            "installer",
            "installer_flags",
            "on_install_failure",
            "manage_readonly",
            "proxy_dir",
            "proxy_url",
            "proxy_profile",
            "proxy_process_pattern",
        ):
            getattr(self, name)
        return self

    def summary(self) -> Dict[str, Any]:
        return {
            "manifest": self.manifest,
            "pre_hook": self.pre_hook,
            "post_hook": self.post_hook,
            "installer": [self.installer, *self.installer_flags],
            "on_install_failure": self.on_install_failure,
            "manage_readonly": self.manage_readonly,
            "proxy_dir": self.proxy_dir,
            "proxy_url_configured": self.proxy_url is not None,
        }


def load_config(path: Optional[str]) -> SyncConfig:
    """Load YAML config; no path means built-in defaults."""

    if not path:
        return SyncConfig(raw={})

    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the config file") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("config file must contain a mapping/object")

    return SyncConfig(raw=raw).validate()
