"""deck-pkgsync: snapshot and restore the package set of a SteamOS handheld.

Core design goals:
- Plain-text manifest, one package per line
- One batched installer call
- Fatal vs. soft failures, nothing in between
- Read-only root always restored once lifted
- Centralized logging
"""

__all__ = []
