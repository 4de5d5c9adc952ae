"""Process-wide engine settings.

Set once at startup and immutable afterwards. Values come from ``RPGBOARD_*``
environment variables, falling back to the defaults below.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, model_validator

_ENV_PREFIX = "RPGBOARD_"

_settings_instance = None


class EngineSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Bayesian prior: expected corpus-wide mean and weight in phantom reviews
    prior_mean: float = 3.0
    prior_weight: float = Field(default=5.0, ge=0)

    # Inclusive rating scale
    rating_min: float = 1.0
    rating_max: float = 5.0

    # Ranking cache staleness policy; None keeps entries until invalidated
    cache_enabled: bool = True
    cache_ttl_seconds: float | None = Field(default=None, gt=0)

    # StatsProjector refresh interval; 0 recomputes on every read
    stats_refresh_seconds: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def check_scale(self):
        if self.rating_min >= self.rating_max:
            raise ValueError("rating_min must be lower than rating_max")
        if not self.rating_min <= self.prior_mean <= self.rating_max:
            raise ValueError("prior_mean must lie within the rating scale")
        return self


def _from_environment() -> EngineSettings:
    values = {}
    for field_name in EngineSettings.model_fields:
        raw = os.environ.get(f"{_ENV_PREFIX}{field_name.upper()}")
        if raw is not None and raw != "":
            values[field_name] = raw
    return EngineSettings(**values)


def get_settings() -> EngineSettings:
    """Return the process-wide settings (singleton).

    Read from the environment on first access.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = _from_environment()
    return _settings_instance


def reset_settings():
    """Forget the loaded settings (useful for testing)."""
    global _settings_instance
    _settings_instance = None
