"""Ordered multi-system steps with fatal and best-effort semantics.

There are no compensations and no retries. A fatal step that fails stops the
run; a best-effort step that fails is logged as ``saga_step_failed`` and the
run continues. Anything left behind is accepted drift, found through those
log records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from logging_lib import get_logger


logger = get_logger("application.tenancy.saga")


@dataclass(frozen=True)
class SagaStep:
    name: str
    action: Callable[[], Any]
    fatal: bool = False
    # Not-found during a teardown step means the resource is already gone
    tolerate: tuple = ()


@dataclass
class SagaResult:
    saga: str
    completed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    aborted_at: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.failed and self.aborted_at is None


def run_saga(saga: str, steps: List[SagaStep], *, tenant_id: Optional[str] = None) -> SagaResult:
    """Run ``steps`` in order and never raise."""

    result = SagaResult(saga=saga)

    for step in steps:
        try:
            step.action()
        except step.tolerate as exc:  # type: ignore[misc]
            logger.info(
                "saga_step_skipped",
                saga=saga,
                step=step.name,
                tenant_id=tenant_id,
                reason=type(exc).__name__,
            )
            result.completed.append(step.name)
            continue
        except Exception as exc:  # noqa: BLE001 - sagas log and continue
            logger.error(
                "saga_step_failed",
                saga=saga,
                step=step.name,
                tenant_id=tenant_id,
                fatal=step.fatal,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            result.failed.append(step.name)
            if step.fatal:
                result.aborted_at = step.name
                break
            continue

        result.completed.append(step.name)

    logger.info(
        "saga_finished",
        saga=saga,
        tenant_id=tenant_id,
        completed=len(result.completed),
        failed=result.failed,
        aborted_at=result.aborted_at,
    )
    return result
