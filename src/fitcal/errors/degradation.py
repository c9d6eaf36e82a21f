"""Run an operation and fall back to a default value if it raises."""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from fitcal.errors.logger import ErrorLogger
from fitcal.errors.taxonomy import create_error_from_exception

logger = logging.getLogger(__name__)

T = TypeVar("T")


def with_graceful_degradation(
    operation: Callable[[], T],
    fallback: T,
    context: str = "operation",
    error_logger: Optional[ErrorLogger] = None,
) -> T:
    """Return ``operation()``, or ``fallback`` when it raises.

    The exception is classified into a CalorieTrackingError and recorded in
    ``error_logger`` when one is given.

    Args:
        operation: Zero-argument callable
        fallback: Value returned on failure
        context: Short description used in the log entry
        error_logger: Error log receiving the classified error

    Returns:
        The operation's result or the fallback
    """
    try:
        return operation()
    except Exception as exc:
        error = create_error_from_exception(exc, context)
        if error_logger is not None:
            error_logger.log(error)
        logger.warning(
            "Graceful degradation applied for %s: %s", context, error.details.message
        )
        return fallback
