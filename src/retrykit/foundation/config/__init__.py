"""Configuration for retry sessions."""

from .settings import (
    Option,
    Options,
    RetrySettings,
    clear_settings_cache,
    get_settings,
    new_default_options,
    with_attempt_timeout,
    with_error_logging,
    with_jitter,
    with_units,
)

__all__ = [
    "Options", "Option", "new_default_options",
    "with_units", "with_jitter", "with_attempt_timeout", "with_error_logging",
    "RetrySettings", "get_settings", "clear_settings_cache",
]
