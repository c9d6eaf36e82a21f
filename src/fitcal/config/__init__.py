"""Configuration management."""

from fitcal.config.settings import (
    CalculationConfig,
    LoggingConfig,
    RetryOverride,
    RetrySettings,
    Settings,
    StorageConfig,
    TrackingConfig,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "StorageConfig",
    "RetryOverride",
    "RetrySettings",
    "LoggingConfig",
    "CalculationConfig",
    "TrackingConfig",
    "get_settings",
    "reload_settings",
]
