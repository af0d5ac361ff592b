"""Run single pipeline steps and record typed outcomes."""

from __future__ import annotations

from typing import Callable

from core.errors import TiffpressError
from core.logging_config import get_logger
from core.types import StepOutcome, StepSeverity

_LOGGER = get_logger(__name__)


def attempt_step(
    step: str,
    severity: StepSeverity,
    action: Callable[[], None],
    **log_fields: object,
) -> StepOutcome:
    """Run one step, converting tool and filesystem errors into an outcome.

    Fatal failures are logged as errors and recoverable ones as warnings;
    callers decide what to do next from the returned outcome.

    Args:
        step: Step identifier.
        severity: Whether a failure should stop the pipeline.
        action: Zero-argument callable performing the step.
        **log_fields: Context attached to log events.

    Returns:
        Outcome describing success or failure.
    """
    try:
        action()
    except (TiffpressError, OSError) as error:
        if severity == "fatal":
            _LOGGER.error("step_failed", step=step, error=str(error), **log_fields)
        else:
            _LOGGER.warning("step_failed", step=step, error=str(error), **log_fields)
        return StepOutcome(step=step, ok=False, severity=severity, detail=str(error))
    _LOGGER.debug("step_succeeded", step=step, **log_fields)
    return StepOutcome(step=step, ok=True, severity=severity)
