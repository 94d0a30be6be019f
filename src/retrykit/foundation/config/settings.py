"""Retry options and environment-based defaults.

Options is the read-only configuration of one retry session. Its baseline
comes from RetrySettings, which pydantic-settings loads from RETRYKIT_*
environment variables.

Example:
    >>> opts = new_default_options(with_jitter(0.25), with_error_logging(True))
    >>> opts.units, opts.jitter, opts.log_errors
    (1.0, 0.25, True)

    # Or with environment variables:
    # RETRYKIT_UNITS=0.5
    # RETRYKIT_ATTEMPT_TIMEOUT=10
"""

from __future__ import annotations

from functools import lru_cache
from typing import Callable, Self

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, PositiveFloat
from pydantic_settings import BaseSettings, SettingsConfigDict


class Options(BaseModel):
    """Configuration for a retry session.

    Attributes:
        units: Base tick interval in seconds
        jitter: Upper bound of random delay added to each tick (0 = none)
        attempt_timeout: Per-attempt deadline in seconds (0 = none)
        log_errors: Log the first occurrence of each expected error
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        json_schema_extra={
            "title": "Retry Options",
            "examples": [{"units": 1.0, "jitter": 0.5, "attempt_timeout": 5.0, "log_errors": True}],
        },
    )

    units: PositiveFloat = Field(default=1.0, description="Base tick interval in seconds")
    jitter: NonNegativeFloat = Field(default=0.0, description="Jitter bound in seconds")
    attempt_timeout: NonNegativeFloat = Field(default=0.0, description="Per-attempt deadline in seconds")
    log_errors: bool = Field(default=False, description="Log first occurrence of expected errors")

    def with_(self, **changes: float | bool) -> Self:
        """Validated copy with changes applied."""
        return type(self).model_validate({**self.model_dump(), **changes})


Option = Callable[[Options], Options]


def with_units(units: float) -> Option:
    return lambda o: o.with_(units=units)


def with_jitter(jitter: float) -> Option:
    return lambda o: o.with_(jitter=jitter)


def with_attempt_timeout(timeout: float) -> Option:
    return lambda o: o.with_(attempt_timeout=timeout)


def with_error_logging(enabled: bool) -> Option:
    return lambda o: o.with_(log_errors=enabled)


class RetrySettings(BaseSettings):
    """Default retry configuration from environment."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    units: PositiveFloat = Field(default=1.0, description="Base tick interval in seconds")
    jitter: NonNegativeFloat = 0.0
    attempt_timeout: NonNegativeFloat = 0.0
    log_errors: bool = False

    def to_options(self) -> Options:
        return Options(**self.model_dump())


@lru_cache(maxsize=1)
def get_settings() -> RetrySettings:
    """Get the global settings instance (cached)."""
    return RetrySettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()


def new_default_options(*opts: Option) -> Options:
    """Baseline options from settings, with opts applied in order."""
    options = get_settings().to_options()
    for opt in opts:
        options = opt(options)
    return options
