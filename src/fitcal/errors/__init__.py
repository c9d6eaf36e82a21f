"""Error taxonomy, retry, error log and graceful degradation."""

from fitcal.errors.degradation import with_graceful_degradation
from fitcal.errors.logger import ErrorLogger
from fitcal.errors.retry import (
    DEFAULT_RETRY_CONFIGS,
    OperationResult,
    RetryConfig,
    is_retryable,
    retry_operation,
)
from fitcal.errors.taxonomy import (
    CalorieTrackingError,
    ErrorCategory,
    ErrorDetails,
    ErrorSeverity,
    classify_exception,
    create_calculation_error,
    create_error_from_exception,
    create_storage_error,
    create_validation_error,
    format_error_for_user,
)

__all__ = [
    "ErrorCategory",
    "ErrorSeverity",
    "ErrorDetails",
    "CalorieTrackingError",
    "classify_exception",
    "create_error_from_exception",
    "create_validation_error",
    "create_calculation_error",
    "create_storage_error",
    "format_error_for_user",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIGS",
    "OperationResult",
    "is_retryable",
    "retry_operation",
    "ErrorLogger",
    "with_graceful_degradation",
]
