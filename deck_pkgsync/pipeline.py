from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, Sequence

from .config import SyncConfig
from .state_store import add_warning, mark_step_completed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RestoreCtx:
    cfg: SyncConfig
    dry_run: bool = False
    use_proxy: bool = False
    # Filled by the proxy step, consumed by the install step.
    proxy_env: Dict[str, str] = field(default_factory=dict)


class Step(Protocol):
    """A single step of the restore sequence."""

    step_id: str

    def run(self, ctx: RestoreCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]
    cleanup_steps: List[str]


def run_pipeline(
    *,
    ctx: RestoreCtx,
    state: Dict[str, Any],
    steps: Sequence[Step],
    cleanup: Sequence[Step] = (),
) -> PipelineResult:
    """Run steps in order; cleanup steps run afterwards on every path.

    A step raising stops the sequence. Cleanup steps are expected to record
    their own failures as warnings; one that raises anyway is downgraded to a
    warning so the remaining cleanup still runs.
    """

    ran: List[str] = []
    cleaned: List[str] = []

    try:
        for step in steps:
            state.setdefault("execution", {})["current_step"] = step.step_id
            logger.info("Running step %s", step.step_id)
            try:
                state = step.run(ctx, state)
            except Exception:
                state.setdefault("execution", {})["failed_step"] = step.step_id
                raise
            mark_step_completed(state, step.step_id)
            ran.append(step.step_id)
    finally:
        for step in cleanup:
            state.setdefault("execution", {})["current_step"] = step.step_id
            try:
                state = step.run(ctx, state)
            except Exception as e:
                add_warning(state, step.step_id, f"Cleanup step {step.step_id} failed: {e}")
            else:
                mark_step_completed(state, step.step_id)
            cleaned.append(step.step_id)
        state.setdefault("execution", {})["current_step"] = None

    return PipelineResult(state=state, ran_steps=ran, cleanup_steps=cleaned)
