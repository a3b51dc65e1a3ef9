from __future__ import annotations


class FatalError(RuntimeError):
    """A precondition failed; the run must stop with exit code 1."""
