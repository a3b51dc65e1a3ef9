from __future__ import annotations

from typing import Callable, Optional


def confirm(question: str, *, input_fn: Optional[Callable[[str], str]] = None) -> bool:
    """Ask a yes/no question; only an answer starting with y/Y confirms."""

    try:
        reply = (input_fn or input)(f"{question} (y/N): ")
    except EOFError:
        print()
        return False
    reply = reply.strip()
    return bool(reply) and reply[0] in "yY"


def banner(title: str) -> None:
    print("=====================================")
    print(title)
    print("=====================================")
