"""Feature flag helpers for runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Literal, TypedDict, cast


FeatureFlagKey = Literal[
    "seed_mock_data",
    "feature_alert_fanout_enabled",
    "feature_analytics_enabled",
    "feature_status_notifications_enabled",
]


class FeatureFlagValues(TypedDict):
    seed_mock_data: bool
    feature_alert_fanout_enabled: bool
    feature_analytics_enabled: bool
    feature_status_notifications_enabled: bool


@dataclass(frozen=True)
class FeatureFlagDefinition:
    env_var: str
    default: bool


_FEATURE_FLAG_DEFINITIONS: Dict[FeatureFlagKey, FeatureFlagDefinition] = {
    "seed_mock_data": FeatureFlagDefinition("SEED_MOCK_DATA", True),
    "feature_alert_fanout_enabled": FeatureFlagDefinition("FEATURE_ALERT_FANOUT_ENABLED", True),
    "feature_analytics_enabled": FeatureFlagDefinition("FEATURE_ANALYTICS_ENABLED", True),
    "feature_status_notifications_enabled": FeatureFlagDefinition("FEATURE_STATUS_NOTIFICATIONS_ENABLED", True),
}


def _normalize_bool(value: str | None, default: bool = True) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


@lru_cache(maxsize=None)
def get_feature_flags() -> FeatureFlagValues:
    """Return the cached feature flag state sourced from the environment."""
    values: Dict[FeatureFlagKey, bool] = {}
    for key, definition in _FEATURE_FLAG_DEFINITIONS.items():
        values[key] = _normalize_bool(os.getenv(definition.env_var), default=definition.default)
    return cast(FeatureFlagValues, values)


def is_feature_enabled(flag: FeatureFlagKey) -> bool:
    """Return whether the supplied feature flag evaluates to true."""
    return get_feature_flags()[flag]


def seed_mock_data_enabled() -> bool:
    """Whether a fresh storage is populated with the demo users/incidents/resources."""
    return is_feature_enabled("seed_mock_data")


def alert_fanout_enabled() -> bool:
    """Toggle per-user notifications when an alert is broadcast."""
    return is_feature_enabled("feature_alert_fanout_enabled")


def analytics_enabled() -> bool:
    """Toggle the analytics endpoints."""
    return is_feature_enabled("feature_analytics_enabled")


def status_notifications_enabled() -> bool:
    """Toggle notifications on incident status and assignment changes."""
    return is_feature_enabled("feature_status_notifications_enabled")


def refresh_feature_flag_cache() -> None:
    """Invalidate cached feature flag values (useful for tests)."""
    get_feature_flags.cache_clear()
