"""Loading and saving the user profile under the ``userProfile`` key."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from fitcal.errors.degradation import with_graceful_degradation
from fitcal.errors.logger import ErrorLogger
from fitcal.errors.taxonomy import create_validation_error
from fitcal.profiles.models import UserProfile
from fitcal.profiles.validation import ValidationResult, validate_user_profile
from fitcal.storage.safe_storage import SafeAsyncStorage, StorageKey

logger = logging.getLogger(__name__)

_VALIDATION_FALLBACK = ValidationResult(is_valid=False, errors=["Profile validation failed"])


@dataclass
class ProfileResult:
    """Outcome of a profile load or save."""

    success: bool
    profile: Optional[UserProfile] = None
    validation: ValidationResult = field(
        default_factory=lambda: ValidationResult(is_valid=False)
    )
    error: Optional[str] = None  # user-facing message
    retry_count: int = 0


class ProfileStore:
    """Profile persistence on top of SafeAsyncStorage."""

    def __init__(self, storage: SafeAsyncStorage, error_logger: Optional[ErrorLogger] = None):
        self.storage = storage
        self.error_logger = error_logger

    def _validate(self, profile: UserProfile) -> ValidationResult:
        return with_graceful_degradation(
            lambda: validate_user_profile(profile),
            _VALIDATION_FALLBACK,
            "profile validation",
            self.error_logger,
        )

    async def load(self) -> ProfileResult:
        """Load the stored profile.

        No stored profile is a normal state for new users and succeeds with
        ``profile=None``. Corrupted data is removed and reported as an error.
        """
        result = await self.storage.get_item(StorageKey.USER_PROFILE, purge_corrupted=True)
        if not result.success:
            return ProfileResult(
                success=False,
                error=result.error.details.user_message if result.error else None,
                retry_count=result.retry_count,
            )

        if not isinstance(result.data, dict):
            return ProfileResult(success=True, retry_count=result.retry_count)

        profile = UserProfile.from_dict(result.data)
        validation = self._validate(profile)
        if not validation.is_valid:
            logger.warning("Loaded profile has validation issues: %s", validation.errors)

        return ProfileResult(
            success=True,
            profile=profile,
            validation=validation,
            retry_count=result.retry_count,
        )

    async def save(self, profile: UserProfile) -> ProfileResult:
        """Validate and persist ``profile``, stamping ``updated_at``."""
        validation = self._validate(profile)
        if not validation.is_valid:
            error = create_validation_error("profile", profile.to_dict(), ", ".join(validation.errors))
            if self.error_logger is not None:
                self.error_logger.log(error)
            return ProfileResult(
                success=False,
                validation=validation,
                error=error.details.user_message,
            )

        profile.updated_at = datetime.now().isoformat()
        result = await self.storage.set_item(StorageKey.USER_PROFILE, profile.to_dict())
        return ProfileResult(
            success=result.success,
            profile=profile if result.success else None,
            validation=validation,
            error=result.error.details.user_message if result.error else None,
            retry_count=result.retry_count,
        )
