from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    export_manifest: str = "~/pkglist"
    restore_manifest: str = "./pkglist"
    pre_hook: str = "./pre_hook.sh"
    post_hook: str = "./post_hook.sh"
    proxy_dir: str = "./clash"
    proxy_profile: str = "/etc/profile.d/clash.sh"
    os_release: str = "/etc/os-release"
    deck_home: str = "/home/deck"
    state_default: str = "~/.local/state/deck-pkgsync/last_restore.json"
    log_default: str = "~/.local/state/deck-pkgsync/deck-pkgsync.log"


PATHS = Paths()
