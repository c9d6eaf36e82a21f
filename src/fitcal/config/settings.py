"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".fitcal"


def _default_db_path() -> Path:
    """Return the default key-value database path."""
    return _default_config_dir() / "fitcal.db"


@dataclass
class StorageConfig:
    """Key-value storage configuration."""

    path: Path = field(default_factory=_default_db_path)
    max_payload_chars: int = 10240  # serialized JSON ceiling per key


@dataclass
class RetryOverride:
    """Optional overrides for one of the default retry configs."""

    max_attempts: Optional[int] = None
    base_delay_ms: Optional[int] = None
    max_delay_ms: Optional[int] = None
    backoff_multiplier: Optional[float] = None


@dataclass
class RetrySettings:
    """Retry overrides keyed by operation type."""

    storage: RetryOverride = field(default_factory=RetryOverride)
    calculation: RetryOverride = field(default_factory=RetryOverride)


@dataclass
class LoggingConfig:
    """Error log configuration."""

    max_errors: int = 100
    level: str = "WARNING"


@dataclass
class CalculationConfig:
    """Thresholds for calorie engine warnings."""

    long_duration_minutes: float = 180.0
    high_calorie_threshold: float = 2000.0


@dataclass
class TrackingConfig:
    """Workout history retention defaults."""

    max_records: int = 100
    retention_weeks: int = 12
    max_payload_chars: int = 1_048_576  # ceiling for the whole workouts list


@dataclass
class Settings:
    """Main application settings."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    retry: RetrySettings = field(default_factory=RetrySettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    calculation: CalculationConfig = field(default_factory=CalculationConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.fitcal/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse storage config
        if "storage" in data:
            storage_data = data["storage"]
            if "path" in storage_data:
                settings.storage.path = Path(storage_data["path"]).expanduser()
            if "max_payload_chars" in storage_data:
                settings.storage.max_payload_chars = int(
                    storage_data["max_payload_chars"]
                )

        # Parse retry overrides
        if "retry" in data:
            retry_data = data["retry"] or {}
            for name in ("storage", "calculation"):
                if name in retry_data:
                    setattr(
                        settings.retry, name, _parse_retry_override(retry_data[name])
                    )

        # Parse logging config
        if "logging" in data:
            log_data = data["logging"]
            if "max_errors" in log_data:
                settings.logging.max_errors = int(log_data["max_errors"])
            if "level" in log_data:
                settings.logging.level = str(log_data["level"]).upper()

        # Parse calculation thresholds
        if "calculation" in data:
            calc_data = data["calculation"]
            if "long_duration_minutes" in calc_data:
                settings.calculation.long_duration_minutes = float(
                    calc_data["long_duration_minutes"]
                )
            if "high_calorie_threshold" in calc_data:
                settings.calculation.high_calorie_threshold = float(
                    calc_data["high_calorie_threshold"]
                )

        # Parse tracking defaults
        if "tracking" in data:
            track_data = data["tracking"]
            if "max_records" in track_data:
                settings.tracking.max_records = int(track_data["max_records"])
            if "retention_weeks" in track_data:
                settings.tracking.retention_weeks = int(track_data["retention_weeks"])
            if "max_payload_chars" in track_data:
                settings.tracking.max_payload_chars = int(track_data["max_payload_chars"])

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.fitcal/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "storage": {
                "path": str(self.storage.path),
                "max_payload_chars": self.storage.max_payload_chars,
            },
            "retry": {
                "storage": _dump_retry_override(self.retry.storage),
                "calculation": _dump_retry_override(self.retry.calculation),
            },
            "logging": {
                "max_errors": self.logging.max_errors,
                "level": self.logging.level,
            },
            "calculation": {
                "long_duration_minutes": self.calculation.long_duration_minutes,
                "high_calorie_threshold": self.calculation.high_calorie_threshold,
            },
            "tracking": {
                "max_records": self.tracking.max_records,
                "retention_weeks": self.tracking.retention_weeks,
                "max_payload_chars": self.tracking.max_payload_chars,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def _parse_retry_override(data: Optional[dict[str, Any]]) -> RetryOverride:
    data = data or {}
    override = RetryOverride()
    if "max_attempts" in data:
        override.max_attempts = int(data["max_attempts"])
    if "base_delay_ms" in data:
        override.base_delay_ms = int(data["base_delay_ms"])
    if "max_delay_ms" in data:
        override.max_delay_ms = int(data["max_delay_ms"])
    if "backoff_multiplier" in data:
        override.backoff_multiplier = float(data["backoff_multiplier"])
    return override


def _dump_retry_override(override: RetryOverride) -> dict[str, Any]:
    return {
        key: value
        for key, value in (
            ("max_attempts", override.max_attempts),
            ("base_delay_ms", override.base_delay_ms),
            ("max_delay_ms", override.max_delay_ms),
            ("backoff_multiplier", override.backoff_multiplier),
        )
        if value is not None
    }


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings
