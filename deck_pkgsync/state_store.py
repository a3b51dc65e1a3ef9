from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def _yaml():
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("YAML run record requested but PyYAML is not available. Use a .json path.") from e
    return yaml


def load_state(path: str) -> Dict[str, Any]:
    p = Path(path).expanduser()
    if not p.exists():
        return {}

    if _detect_format(p) in {"yaml", "yml"}:
        data = _yaml().safe_load(p.read_text(encoding="utf-8")) or {}
    else:
        data = json.loads(p.read_text(encoding="utf-8"))

    if not isinstance(data, dict):
        raise ValueError(f"Run record must be an object/dict, got {type(data)}")

    return data


def save_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)

    if _detect_format(p) in {"yaml", "yml"}:
        p.write_text(_yaml().safe_dump(state, sort_keys=False) + "\n", encoding="utf-8")
    else:
        p.write_text(json.dumps(state, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    logger.info("Run record saved to %s", p)


def new_state(config_summary: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "version": 1,
        "config": dict(config_summary),
        "execution": {
            "current_step": None,
            "completed_steps": [],
            "warnings": [],
            "errors": [],
            "acquired": {"readonly_disabled": False, "proxy_started": False},
        },
    }


def mark_step_completed(state: Dict[str, Any], step_id: str) -> None:
    exe = state.setdefault("execution", {})
    completed = exe.setdefault("completed_steps", [])
    if step_id not in completed:
        completed.append(step_id)


def add_warning(state: Dict[str, Any], step_id: str, message: str) -> None:
    """Record a soft failure: logged, remembered, execution continues."""

    logger.warning(message)
    state.setdefault("execution", {}).setdefault("warnings", []).append({"step": step_id, "message": message})


def set_acquired(state: Dict[str, Any], name: str, value: bool) -> None:
    state.setdefault("execution", {}).setdefault("acquired", {})[name] = value


def is_acquired(state: Dict[str, Any], name: str) -> bool:
    return bool(((state.get("execution") or {}).get("acquired") or {}).get(name))
