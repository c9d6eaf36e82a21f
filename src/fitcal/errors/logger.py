"""Bounded in-memory error log.

An ErrorLogger is owned by the application root (the CLI creates one per
invocation, tests create their own) and passed to the components that
report errors. It is not thread-safe; hosts running several threads must
serialize calls to ``log``.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from datetime import datetime
from typing import Union

from fitcal.errors.taxonomy import (
    CalorieTrackingError,
    ErrorCategory,
    ErrorDetails,
    ErrorSeverity,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ERRORS = 100

_SEVERITY_LEVELS = {
    ErrorSeverity.CRITICAL: logging.ERROR,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.LOW: logging.INFO,
}


class ErrorLogger:
    """Keeps the most recent errors, newest first."""

    def __init__(self, max_errors: int = DEFAULT_MAX_ERRORS):
        self.max_errors = max_errors
        self._errors: deque[ErrorDetails] = deque(maxlen=max_errors)

    def __len__(self) -> int:
        return len(self._errors)

    def log(self, error: Union[CalorieTrackingError, ErrorDetails]) -> None:
        """Record an error and echo it to the logging stream for its severity."""
        details = error.details if isinstance(error, CalorieTrackingError) else error
        # appendleft on a bounded deque drops the oldest entry from the right
        self._errors.appendleft(details)

        logger.log(
            _SEVERITY_LEVELS[details.severity],
            "%s ERROR [%s/%s]: %s",
            details.severity.value,
            details.category.value,
            details.code,
            details.message,
        )

    def get_recent_errors(self, count: int = 10) -> list[ErrorDetails]:
        return list(self._errors)[:count]

    def get_errors_by_category(self, category: ErrorCategory) -> list[ErrorDetails]:
        return [details for details in self._errors if details.category is category]

    def clear_errors(self) -> None:
        self._errors.clear()

    def restore(self, exported: str) -> int:
        """Load entries from an ``export_errors`` report, keeping their order.

        Restored entries are not echoed to the logging stream.

        Returns:
            Number of entries retained

        Raises:
            ValueError: if ``exported`` is not a report of error entries
        """
        report = json.loads(exported)
        items = report.get("errors", []) if isinstance(report, dict) else None
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise ValueError("Error log report must be an object with a list of error entries")
        try:
            entries = [ErrorDetails.from_dict(item) for item in items]
        except TypeError as exc:
            raise ValueError(f"Malformed error log entry: {exc}") from exc
        # Report is newest first; append from the oldest so order survives
        for details in reversed(entries):
            self._errors.appendleft(details)
        return len(self._errors)

    def export_errors(self) -> str:
        """JSON report of every retained error."""
        report = {
            "timestamp": datetime.now().isoformat(),
            "totalErrors": len(self._errors),
            "errors": [details.to_dict() for details in self._errors],
        }
        return json.dumps(report, indent=2)
