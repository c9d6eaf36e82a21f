"""JSON persistence over a key-value store with retries and size limits."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

from fitcal.errors.logger import ErrorLogger
from fitcal.errors.retry import (
    DEFAULT_RETRY_CONFIGS,
    OperationResult,
    RetryConfig,
    SleepFunc,
    retry_operation,
)
from fitcal.errors.taxonomy import (
    CalorieTrackingError,
    ErrorCategory,
    ErrorSeverity,
    create_storage_error,
)
from fitcal.storage.backends import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAYLOAD_CHARS = 10240


class StorageKey:
    """Keys of the persisted schema."""

    USER_PROFILE = "userProfile"
    WORKOUTS = "workouts"
    EXERCISE_TYPES = "exerciseTypes"
    EXERCISE_CATEGORIES = "exerciseCategories"
    MAX_RECORDS = "maxRecords"
    WORKOUT_RETENTION_WEEKS = "workoutRetentionWeeks"
    SELECTED_THEME = "selectedTheme"


class SafeAsyncStorage:
    """Retrying JSON accessor for a KeyValueStore.

    Every method returns an OperationResult instead of raising. Failed
    operations are recorded in ``error_logger`` when one is given.
    """

    def __init__(
        self,
        store: KeyValueStore,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIGS["storage"],
        max_payload_chars: int = DEFAULT_MAX_PAYLOAD_CHARS,
        error_logger: Optional[ErrorLogger] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.store = store
        self.retry_config = retry_config
        self.max_payload_chars = max_payload_chars
        self.error_logger = error_logger
        self._sleep = sleep

    async def get_item(self, key: str, purge_corrupted: bool = False) -> OperationResult[Any]:
        """Load and decode the JSON value stored under ``key``.

        A missing key succeeds with ``data=None``. Undecodable data fails
        with code PARSE_ERROR; with ``purge_corrupted`` the key is removed.
        """

        async def _read() -> Any:
            try:
                raw = await self.store.get_item(key)
            except Exception as exc:
                raise create_storage_error(
                    code="STORAGE_READ_ERROR",
                    message=f"Failed to read data for key: {key}",
                    user_message="Unable to load data",
                    suggestion="Please check your device storage and try again",
                    severity=ErrorSeverity.MEDIUM,
                    context={"key": key, "original_error": repr(exc)},
                ) from exc

            if raw is None:
                return None
            try:
                return json.loads(raw)
            except (json.JSONDecodeError, TypeError) as exc:
                raise create_storage_error(
                    code="PARSE_ERROR",
                    message=f"Failed to parse stored data for key: {key}",
                    user_message="Stored data is corrupted",
                    suggestion="The app will reset this data. Please re-enter your information.",
                    severity=ErrorSeverity.MEDIUM,
                    retryable=False,
                    context={"key": key, "parse_error": str(exc)},
                ) from exc

        result = await self._run(_read, f"get_item({key})")
        if (
            purge_corrupted
            and not result.success
            and result.error is not None
            and result.error.code == "PARSE_ERROR"
        ):
            logger.warning("Removing corrupted data stored under %s", key)
            removed = await self.remove_item(key)
            result.warnings.extend(removed.warnings)
        return result

    async def set_item(
        self,
        key: str,
        value: Any,
        max_chars: Optional[int] = None,
    ) -> OperationResult[None]:
        """Encode ``value`` as JSON and store it under ``key``.

        Payloads longer than ``max_chars`` (default ``max_payload_chars``)
        fail with DATA_TOO_LARGE without touching the store. Length counts
        characters, so non-ASCII text is not inflated by escapes.
        """
        limit = self.max_payload_chars if max_chars is None else max_chars

        async def _write() -> None:
            try:
                serialized = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
            except (TypeError, ValueError) as exc:
                raise CalorieTrackingError(
                    message=f"Data for key {key} is not JSON serializable",
                    category=ErrorCategory.VALIDATION,
                    severity=ErrorSeverity.MEDIUM,
                    code="SERIALIZATION_ERROR",
                    user_message="Unable to save data",
                    suggestion="Please check your input and try again",
                    retryable=False,
                    context={"key": key, "original_error": str(exc)},
                ) from exc

            if len(serialized) > limit:
                raise create_storage_error(
                    code="DATA_TOO_LARGE",
                    message=f"Data too large for key: {key}",
                    user_message="Data is too large to save",
                    suggestion="Please reduce the amount of data or contact support",
                    retryable=False,
                    context={"key": key, "size": len(serialized)},
                )

            try:
                await self.store.set_item(key, serialized)
            except Exception as exc:
                raise create_storage_error(
                    code="STORAGE_WRITE_ERROR",
                    message=f"Failed to save data for key: {key}",
                    user_message="Unable to save data",
                    suggestion="Please check your device storage and try again",
                    context={"key": key, "original_error": repr(exc)},
                ) from exc

        return await self._run(_write, f"set_item({key})")

    async def remove_item(self, key: str) -> OperationResult[None]:
        """Delete ``key``; removing a missing key succeeds."""

        async def _remove() -> None:
            try:
                await self.store.remove_item(key)
            except Exception as exc:
                raise create_storage_error(
                    code="STORAGE_REMOVE_ERROR",
                    message=f"Failed to remove data for key: {key}",
                    user_message="Unable to delete data",
                    suggestion="Please check your device storage and try again",
                    severity=ErrorSeverity.MEDIUM,
                    context={"key": key, "original_error": repr(exc)},
                ) from exc

        return await self._run(_remove, f"remove_item({key})")

    async def _run(self, operation, name: str) -> OperationResult:
        result = await retry_operation(operation, self.retry_config, name, sleep=self._sleep)
        if not result.success and result.error is not None and self.error_logger is not None:
            self.error_logger.log(result.error)
        return result
