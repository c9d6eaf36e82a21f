"""Tests for the error taxonomy, error log and graceful degradation."""

from __future__ import annotations

import json
import math
import sqlite3

import pytest

from fitcal.errors import (
    CalorieTrackingError,
    ErrorCategory,
    ErrorLogger,
    ErrorSeverity,
    with_graceful_degradation,
)
from fitcal.errors.taxonomy import (
    ErrorDetails,
    classify_exception,
    create_calculation_error,
    create_error_from_exception,
    create_storage_error,
    create_validation_error,
    format_error_for_user,
)


class TestCalorieTrackingError:
    """Tests for the structured exception."""

    def test_defaults(self) -> None:
        error = CalorieTrackingError("something broke")
        assert str(error) == "something broke"
        assert error.category is ErrorCategory.UNKNOWN
        assert error.details.severity is ErrorSeverity.MEDIUM
        assert error.code == "UNKNOWN_ERROR"
        assert error.details.user_message == "An unexpected error occurred"
        assert error.retryable

    def test_details_dict(self) -> None:
        error = create_storage_error(
            code="STORAGE_WRITE_ERROR",
            message="write failed",
            user_message="Unable to save data",
            suggestion="Try again",
            context={"key": "workouts", "error": OSError("disk full")},
        )
        data = error.details.to_dict()
        assert data["category"] == "STORAGE"
        assert data["severity"] == "HIGH"
        assert data["userMessage"] == "Unable to save data"
        assert data["context"]["key"] == "workouts"
        # Non-JSON values are stored as their repr
        assert "disk full" in data["context"]["error"]
        json.dumps(data)

    def test_details_round_trip_through_export_form(self) -> None:
        details = create_validation_error("age", 5, "be at least 13").details
        restored = ErrorDetails.from_dict(details.to_dict())
        assert restored.category is ErrorCategory.VALIDATION
        assert restored.code == details.code
        assert restored.timestamp == details.timestamp


class TestClassification:
    """Exceptions are classified by message keywords, then by type."""

    @pytest.mark.parametrize(
        "error, category",
        [
            (TimeoutError("slow"), ErrorCategory.NETWORK),
            (ConnectionError("refused"), ErrorCategory.NETWORK),
            (sqlite3.OperationalError("database is locked"), ErrorCategory.STORAGE),
            (OSError("disk full"), ErrorCategory.STORAGE),
            (ZeroDivisionError("division by zero"), ErrorCategory.CALCULATION),
            (ValueError("bad"), ErrorCategory.VALIDATION),
            (TypeError("bad"), ErrorCategory.VALIDATION),
        ],
    )
    def test_by_type(self, error: Exception, category: ErrorCategory) -> None:
        assert classify_exception(error) is category

    @pytest.mark.parametrize(
        "message, category",
        [
            ("AsyncStorage quota exceeded", ErrorCategory.STORAGE),
            ("invalid input", ErrorCategory.VALIDATION),
            ("math domain problem", ErrorCategory.CALCULATION),
            ("network unreachable", ErrorCategory.NETWORK),
            ("request timeout", ErrorCategory.NETWORK),
            ("something odd", ErrorCategory.UNKNOWN),
        ],
    )
    def test_by_message(self, message: str, category: ErrorCategory) -> None:
        assert classify_exception(RuntimeError(message)) is category

    def test_message_wins_over_type(self) -> None:
        assert classify_exception(ValueError("storage value")) is ErrorCategory.STORAGE
        assert classify_exception(ValueError("calculation overflow")) is ErrorCategory.CALCULATION

    def test_math_domain_error_is_retryable_calculation(self) -> None:
        try:
            math.sqrt(-1)
        except ValueError as exc:
            error = create_error_from_exception(exc, "bmi")
        assert error.category is ErrorCategory.CALCULATION
        assert error.retryable

    def test_wrapping(self) -> None:
        error = create_error_from_exception(RuntimeError("storage unavailable"), "load profile")
        assert error.category is ErrorCategory.STORAGE
        assert error.code == "STORAGE_ERROR"
        assert error.details.user_message == "Unable to access device storage"
        assert error.details.context == {"original_error": "RuntimeError", "context": "load profile"}

    def test_validation_is_not_retryable(self) -> None:
        assert not create_error_from_exception(ValueError("nope")).retryable

    def test_existing_error_is_returned_unchanged(self) -> None:
        error = create_calculation_error("bmi", "height is zero")
        assert create_error_from_exception(error) is error


class TestHelpers:
    """Tests for category-specific constructors and user formatting."""

    def test_validation_error(self) -> None:
        error = create_validation_error("weight", 20, "be at least 30 kg")
        assert error.message == "Validation failed for weight: be at least 30 kg"
        assert error.details.severity is ErrorSeverity.LOW
        assert error.details.user_message == "Invalid weight"
        assert not error.retryable

    def test_calculation_error(self) -> None:
        error = create_calculation_error("calculate", "overflow", {"met": 4.5})
        assert error.category is ErrorCategory.CALCULATION
        assert error.details.context["met"] == 4.5
        assert error.retryable

    @pytest.mark.parametrize(
        "error, title",
        [
            (create_validation_error("age", 5, "be 13+"), "Input Error"),
            (create_calculation_error("op", "bad"), "Calculation Error"),
            (CalorieTrackingError("x", category=ErrorCategory.NETWORK), "Connection Error"),
            (CalorieTrackingError("x"), "Unexpected Error"),
        ],
    )
    def test_format_for_user(self, error: CalorieTrackingError, title: str) -> None:
        formatted = format_error_for_user(error)
        assert formatted["title"] == title
        assert formatted["canRetry"] == error.retryable
        assert formatted["message"] == error.details.user_message


class TestErrorLogger:
    """Tests for the bounded error log."""

    def test_newest_first(self, error_logger) -> None:
        error_logger.log(CalorieTrackingError("first"))
        error_logger.log(CalorieTrackingError("second"))
        assert [d.message for d in error_logger.get_recent_errors()] == ["second", "first"]

    def test_retains_at_most_100(self, error_logger) -> None:
        for index in range(101):
            error_logger.log(CalorieTrackingError(f"error {index}"))

        assert len(error_logger) == 100
        messages = [d.message for d in error_logger.get_recent_errors(100)]
        assert messages[0] == "error 100"
        assert "error 0" not in messages

    def test_recent_count(self, error_logger) -> None:
        for index in range(15):
            error_logger.log(CalorieTrackingError(f"error {index}"))
        assert len(error_logger.get_recent_errors()) == 10
        assert len(error_logger.get_recent_errors(3)) == 3

    def test_filter_by_category(self, error_logger) -> None:
        error_logger.log(create_validation_error("age", 5, "be 13+"))
        error_logger.log(create_calculation_error("op", "bad"))
        found = error_logger.get_errors_by_category(ErrorCategory.VALIDATION)
        assert [d.code for d in found] == ["VALIDATION_ERROR"]

    def test_accepts_details(self, error_logger) -> None:
        error_logger.log(CalorieTrackingError("raw").details)
        assert len(error_logger) == 1

    def test_clear(self, error_logger) -> None:
        error_logger.log(CalorieTrackingError("x"))
        error_logger.clear_errors()
        assert len(error_logger) == 0

    def test_export(self, error_logger) -> None:
        error_logger.log(create_validation_error("age", 5, "be 13+"))
        report = json.loads(error_logger.export_errors())
        assert report["totalErrors"] == 1
        assert report["errors"][0]["code"] == "VALIDATION_ERROR"
        assert "timestamp" in report

    def test_restore_keeps_order(self, error_logger) -> None:
        error_logger.log(CalorieTrackingError("older"))
        error_logger.log(CalorieTrackingError("newer"))

        restored = ErrorLogger()
        assert restored.restore(error_logger.export_errors()) == 2
        assert [d.message for d in restored.get_recent_errors()] == ["newer", "older"]

    @pytest.mark.parametrize(
        "exported",
        ["[]", '{"errors": {}}', '{"errors": ["oops"]}', '{"errors": [{"timestamp": 5}]}'],
    )
    def test_restore_rejects_wrong_shape(self, exported: str) -> None:
        restored = ErrorLogger()
        with pytest.raises(ValueError):
            restored.restore(exported)
        assert len(restored) == 0

    def test_routes_by_severity(self, error_logger, caplog) -> None:
        with caplog.at_level("INFO", logger="fitcal.errors.logger"):
            error_logger.log(create_storage_error("E", "high", "u", "s"))
            error_logger.log(create_validation_error("age", 5, "be 13+"))

        levels = [record.levelname for record in caplog.records]
        assert levels == ["ERROR", "INFO"]

    def test_instances_are_independent(self) -> None:
        first, second = ErrorLogger(), ErrorLogger()
        first.log(CalorieTrackingError("x"))
        assert len(second) == 0


class TestGracefulDegradation:
    """Tests for with_graceful_degradation."""

    def test_returns_result(self) -> None:
        assert with_graceful_degradation(lambda: 42, 0) == 42

    def test_returns_fallback_and_logs(self, error_logger) -> None:
        def explode():
            raise ZeroDivisionError("division by zero")

        assert with_graceful_degradation(explode, -1, "divide", error_logger) == -1
        details = error_logger.get_recent_errors()[0]
        assert details.category is ErrorCategory.CALCULATION
        assert details.context["context"] == "divide"
