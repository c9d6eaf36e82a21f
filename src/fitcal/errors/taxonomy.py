"""Error categories, severities and the structured CalorieTrackingError.

Every failure that crosses a component boundary is a CalorieTrackingError.
The helpers below tag category and severity where the failure happens;
``create_error_from_exception`` classifies foreign exceptions caught at a
boundary.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class ErrorCategory(Enum):
    VALIDATION = "VALIDATION"
    STORAGE = "STORAGE"
    CALCULATION = "CALCULATION"
    NETWORK = "NETWORK"
    UNKNOWN = "UNKNOWN"


class ErrorSeverity(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


DEFAULT_CODE = "UNKNOWN_ERROR"
DEFAULT_USER_MESSAGE = "An unexpected error occurred"
DEFAULT_SUGGESTION = "Please try again later"


@dataclass
class ErrorDetails:
    """Structured description of a failure."""

    category: ErrorCategory
    severity: ErrorSeverity
    code: str
    message: str
    user_message: str
    suggestion: str
    retryable: bool
    timestamp: datetime = field(default_factory=datetime.now)
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form used by error exports."""
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "userMessage": self.user_message,
            "suggestion": self.suggestion,
            "retryable": self.retryable,
            "timestamp": self.timestamp.isoformat(),
            "context": {key: _jsonable(value) for key, value in self.context.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ErrorDetails":
        """Rebuild details from an exported entry."""
        return cls(
            category=ErrorCategory(data.get("category", ErrorCategory.UNKNOWN.value)),
            severity=ErrorSeverity(data.get("severity", ErrorSeverity.MEDIUM.value)),
            code=data.get("code", DEFAULT_CODE),
            message=data.get("message", ""),
            user_message=data.get("userMessage", DEFAULT_USER_MESSAGE),
            suggestion=data.get("suggestion", DEFAULT_SUGGESTION),
            retryable=bool(data.get("retryable", True)),
            timestamp=datetime.fromisoformat(data["timestamp"])
            if data.get("timestamp")
            else datetime.now(),
            context=dict(data.get("context") or {}),
        )


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return repr(value)


class CalorieTrackingError(Exception):
    """Exception carrying ErrorDetails.

    Only ``message`` is required; the rest default to an UNKNOWN, MEDIUM,
    retryable error with generic user-facing text.
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        code: str = DEFAULT_CODE,
        user_message: str = DEFAULT_USER_MESSAGE,
        suggestion: str = DEFAULT_SUGGESTION,
        retryable: bool = True,
        context: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.details = ErrorDetails(
            category=category,
            severity=severity,
            code=code,
            message=message,
            user_message=user_message,
            suggestion=suggestion,
            retryable=retryable,
            context=dict(context or {}),
        )

    @property
    def message(self) -> str:
        return self.details.message

    @property
    def category(self) -> ErrorCategory:
        return self.details.category

    @property
    def code(self) -> str:
        return self.details.code

    @property
    def retryable(self) -> bool:
        return self.details.retryable


# Category defaults: (code, severity, user message, suggestion)
_CATEGORY_DEFAULTS = {
    ErrorCategory.STORAGE: (
        "STORAGE_ERROR",
        ErrorSeverity.MEDIUM,
        "Unable to access device storage",
        "Please check your device storage and try again",
    ),
    ErrorCategory.VALIDATION: (
        "VALIDATION_ERROR",
        ErrorSeverity.LOW,
        "Invalid data provided",
        "Please check your input and try again",
    ),
    ErrorCategory.CALCULATION: (
        "CALCULATION_ERROR",
        ErrorSeverity.MEDIUM,
        "Error during calculation",
        "Please verify your data and try again",
    ),
    ErrorCategory.NETWORK: (
        "NETWORK_ERROR",
        ErrorSeverity.MEDIUM,
        "Network connection issue",
        "Please check your internet connection and try again",
    ),
    ErrorCategory.UNKNOWN: (
        DEFAULT_CODE,
        ErrorSeverity.MEDIUM,
        DEFAULT_USER_MESSAGE,
        DEFAULT_SUGGESTION,
    ),
}

# Keyword rules checked in order against the lower-cased message
_KEYWORD_RULES = (
    (("storage", "asyncstorage"), ErrorCategory.STORAGE),
    (("validation", "invalid"), ErrorCategory.VALIDATION),
    (("calculation", "overflow", "math"), ErrorCategory.CALCULATION),
    (("network", "timeout"), ErrorCategory.NETWORK),
)


def classify_exception(error: BaseException) -> ErrorCategory:
    """Pick a category for a foreign exception.

    Message keywords decide first, so ``ValueError("math domain error")`` is
    a calculation failure. The exception type is the fallback when no
    keyword matches.
    """
    if isinstance(error, CalorieTrackingError):
        return error.category

    message = str(error).lower()
    for keywords, category in _KEYWORD_RULES:
        if any(keyword in message for keyword in keywords):
            return category

    if isinstance(error, (TimeoutError, ConnectionError)):
        return ErrorCategory.NETWORK
    if isinstance(error, (sqlite3.Error, OSError)):
        return ErrorCategory.STORAGE
    if isinstance(error, ArithmeticError):
        return ErrorCategory.CALCULATION
    if isinstance(error, (ValueError, TypeError)):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


def create_error_from_exception(
    error: BaseException,
    context: str = "unknown",
) -> CalorieTrackingError:
    """Wrap a foreign exception in a CalorieTrackingError."""
    if isinstance(error, CalorieTrackingError):
        return error

    category = classify_exception(error)
    code, severity, user_message, suggestion = _CATEGORY_DEFAULTS[category]
    return CalorieTrackingError(
        message=str(error) or type(error).__name__,
        category=category,
        severity=severity,
        code=code,
        user_message=user_message,
        suggestion=suggestion,
        retryable=category is not ErrorCategory.VALIDATION,
        context={"original_error": type(error).__name__, "context": context},
    )


def create_validation_error(field_name: str, value: Any, requirement: str) -> CalorieTrackingError:
    """Validation failure for a single field."""
    return CalorieTrackingError(
        message=f"Validation failed for {field_name}: {requirement}",
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.LOW,
        code="VALIDATION_ERROR",
        user_message=f"Invalid {field_name}",
        suggestion=f"Please ensure {field_name} {requirement}",
        retryable=False,
        context={"field": field_name, "value": value, "requirement": requirement},
    )


def create_calculation_error(
    operation: str,
    details: str,
    context: Optional[dict[str, Any]] = None,
) -> CalorieTrackingError:
    """Numeric or logic failure inside the calorie engine."""
    return CalorieTrackingError(
        message=f"Calculation error in {operation}: {details}",
        category=ErrorCategory.CALCULATION,
        severity=ErrorSeverity.MEDIUM,
        code="CALCULATION_ERROR",
        user_message="Error during calculation",
        suggestion="Please verify your data and try again",
        context={"operation": operation, "details": details, **(context or {})},
    )


def create_storage_error(
    code: str,
    message: str,
    user_message: str,
    suggestion: str,
    severity: ErrorSeverity = ErrorSeverity.HIGH,
    retryable: bool = True,
    context: Optional[dict[str, Any]] = None,
) -> CalorieTrackingError:
    """Failure reading or writing the key-value store."""
    return CalorieTrackingError(
        message=message,
        category=ErrorCategory.STORAGE,
        severity=severity,
        code=code,
        user_message=user_message,
        suggestion=suggestion,
        retryable=retryable,
        context=context,
    )


_USER_TITLES = {
    ErrorCategory.VALIDATION: "Input Error",
    ErrorCategory.STORAGE: "Storage Error",
    ErrorCategory.CALCULATION: "Calculation Error",
    ErrorCategory.NETWORK: "Connection Error",
}


def format_error_for_user(error: CalorieTrackingError) -> dict[str, Any]:
    """Title, message, suggestion and retry hint for display."""
    details = error.details
    return {
        "title": _USER_TITLES.get(details.category, "Unexpected Error"),
        "message": details.user_message,
        "suggestion": details.suggestion,
        "canRetry": details.retryable,
    }
