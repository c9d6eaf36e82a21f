"""Workout history persistence with record-count and age limits."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from fitcal.config.settings import TrackingConfig
from fitcal.errors.retry import OperationResult
from fitcal.storage.safe_storage import SafeAsyncStorage, StorageKey
from fitcal.tracking.records import WorkoutRecord

logger = logging.getLogger(__name__)


class WorkoutStore:
    """Reads and writes the ``workouts`` list.

    ``maxRecords`` and ``workoutRetentionWeeks`` stored by the app override
    the limits in ``TrackingConfig``.
    """

    def __init__(self, storage: SafeAsyncStorage, config: Optional[TrackingConfig] = None):
        self.storage = storage
        self.config = config or TrackingConfig()

    async def list_workouts(self) -> OperationResult[list[WorkoutRecord]]:
        """Load all records, newest first.

        Corrupted lists are purged and read as empty; malformed entries
        are skipped with a warning.
        """
        result = await self.storage.get_item(StorageKey.WORKOUTS, purge_corrupted=True)
        if not result.success:
            if result.error is not None and result.error.code == "PARSE_ERROR":
                return OperationResult(
                    success=True,
                    data=[],
                    warnings=result.warnings + ["Stored workouts were corrupted and have been reset"],
                )
            return OperationResult(
                success=False,
                error=result.error,
                retry_count=result.retry_count,
                warnings=result.warnings,
            )

        records: list[WorkoutRecord] = []
        warnings = list(result.warnings)
        raw = result.data if isinstance(result.data, list) else []
        for index, item in enumerate(raw):
            try:
                records.append(WorkoutRecord.from_dict(item))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed workout record %d: %s", index, exc)
                warnings.append(f"Skipped malformed workout record {index + 1}")

        records.sort(key=lambda record: record.performed_at, reverse=True)
        return OperationResult(
            success=True,
            data=records,
            retry_count=result.retry_count,
            warnings=warnings,
        )

    async def save_workout(self, record: WorkoutRecord) -> OperationResult[list[WorkoutRecord]]:
        """Add ``record`` (replacing one with the same id) and apply the limits."""
        loaded = await self.list_workouts()
        if not loaded.success:
            return loaded

        records = [existing for existing in loaded.data if existing.id != record.id]
        records.insert(0, record)
        records.sort(key=lambda item: item.performed_at, reverse=True)
        kept = await self._apply_limits(records)
        return await self._write(kept, loaded.warnings)

    async def delete_workout(self, record_id: str) -> OperationResult[list[WorkoutRecord]]:
        loaded = await self.list_workouts()
        if not loaded.success:
            return loaded
        records = [record for record in loaded.data if record.id != record_id]
        return await self._write(records, loaded.warnings)

    async def prune(self, now: Optional[datetime] = None) -> OperationResult[int]:
        """Drop records beyond the count limit or older than the retention window.

        Returns:
            OperationResult whose data is the number of removed records
        """
        loaded = await self.list_workouts()
        if not loaded.success:
            return OperationResult(success=False, error=loaded.error, warnings=loaded.warnings)

        kept = await self._apply_limits(loaded.data, now)
        removed = len(loaded.data) - len(kept)
        if removed == 0:
            return OperationResult(success=True, data=0, warnings=loaded.warnings)

        written = await self._write(kept, loaded.warnings)
        if not written.success:
            return OperationResult(success=False, error=written.error, warnings=written.warnings)
        return OperationResult(success=True, data=removed, warnings=written.warnings)

    async def get_exercise_categories(self) -> dict[str, str]:
        """Exercise name to category map saved by the app ({} if unavailable)."""
        result = await self.storage.get_item(StorageKey.EXERCISE_CATEGORIES)
        if result.success and isinstance(result.data, dict):
            return {str(name): str(category) for name, category in result.data.items()}
        return {}

    async def _limits(self) -> tuple[int, int]:
        max_records = await self._stored_int(StorageKey.MAX_RECORDS, self.config.max_records)
        weeks = await self._stored_int(
            StorageKey.WORKOUT_RETENTION_WEEKS, self.config.retention_weeks
        )
        return max_records, weeks

    async def _stored_int(self, key: str, default: int) -> int:
        result = await self.storage.get_item(key)
        value: Any = result.data if result.success else None
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
            return int(value)
        return default

    async def _apply_limits(
        self,
        records: list[WorkoutRecord],
        now: Optional[datetime] = None,
    ) -> list[WorkoutRecord]:
        max_records, weeks = await self._limits()
        cutoff = (now or datetime.now()) - timedelta(weeks=weeks)
        recent = [record for record in records if record.performed_at >= cutoff]
        return recent[:max_records]

    async def _write(
        self,
        records: list[WorkoutRecord],
        warnings: list[str],
    ) -> OperationResult[list[WorkoutRecord]]:
        result = await self.storage.set_item(
            StorageKey.WORKOUTS,
            [record.to_dict() for record in records],
            max_chars=self.config.max_payload_chars,
        )
        return OperationResult(
            success=result.success,
            data=records if result.success else None,
            error=result.error,
            retry_count=result.retry_count,
            warnings=warnings + result.warnings,
        )
