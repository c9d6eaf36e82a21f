"""Tests for profile persistence."""

from __future__ import annotations

import json

import pytest

from fitcal.errors import ErrorCategory
from fitcal.profiles import ProfileStore, UserProfile


@pytest.fixture
def profile_store(storage, error_logger) -> ProfileStore:
    return ProfileStore(storage, error_logger)


class TestProfileStore:
    """Tests for ProfileStore load and save."""

    @pytest.mark.asyncio
    async def test_load_without_profile(self, profile_store) -> None:
        result = await profile_store.load()
        assert result.success
        assert result.profile is None

    @pytest.mark.asyncio
    async def test_save_then_load(self, profile_store, male_profile) -> None:
        saved = await profile_store.save(male_profile)
        assert saved.success

        loaded = await profile_store.load()
        assert loaded.success
        assert loaded.profile == saved.profile
        assert loaded.validation.is_valid

    @pytest.mark.asyncio
    async def test_save_stamps_updated_at(self, profile_store, male_profile) -> None:
        male_profile.updated_at = "2020-01-01T00:00:00"
        result = await profile_store.save(male_profile)
        assert result.profile.updated_at != "2020-01-01T00:00:00"

    @pytest.mark.asyncio
    async def test_save_rejects_invalid_profile(
        self, profile_store, memory_store, error_logger
    ) -> None:
        result = await profile_store.save(UserProfile(age=10, sex="male", weight=70, height=175))

        assert not result.success
        assert "Age must be at least 13 years" in result.validation.errors
        assert result.error == "Invalid profile"
        assert memory_store.set_calls == 0
        assert error_logger.get_errors_by_category(ErrorCategory.VALIDATION)

    @pytest.mark.asyncio
    async def test_load_reports_validation_issues(self, profile_store, memory_store) -> None:
        await memory_store.set_item(
            "userProfile", json.dumps({"age": 10, "sex": "male", "weight": 70, "height": 175})
        )
        result = await profile_store.load()

        assert result.success
        assert result.profile.age == 10
        assert not result.validation.is_valid

    @pytest.mark.asyncio
    async def test_corrupted_profile_is_removed(self, profile_store, memory_store) -> None:
        await memory_store.set_item("userProfile", "{oops")
        result = await profile_store.load()

        assert not result.success
        assert result.error == "Stored data is corrupted"
        assert memory_store.keys() == []

    @pytest.mark.asyncio
    async def test_storage_failure(self, profile_store, memory_store) -> None:
        memory_store.failures = 10
        result = await profile_store.load()

        assert not result.success
        assert result.error == "Unable to load data"
        assert result.retry_count == 3
