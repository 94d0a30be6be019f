"""Retry loop and delay strategies.

Example:
    >>> from retrykit.runtime.retry import retry, new_constant_ticker
    >>> from retrykit.foundation.config import new_default_options, with_jitter
    >>>
    >>> opts = new_default_options(with_jitter(0.5))
    >>> retry(ping, 30.0, new_constant_ticker(opts), opts)
"""

from .backoff import (
    BaseTicker,
    ConstantTicker,
    ExponentialTicker,
    LinearTicker,
    Ticker,
    new_constant_ticker,
    new_exponential_ticker,
    new_linear_ticker,
)
from .loop import aretry, aretry_with_context, retry, retry_with_context
from .retryer import Retryer, StrategyRetryer, constant, exponential, linear

__all__ = [
    # Tickers
    "Ticker", "BaseTicker", "ConstantTicker", "ExponentialTicker", "LinearTicker",
    "new_constant_ticker", "new_exponential_ticker", "new_linear_ticker",
    # Loop
    "retry", "retry_with_context", "aretry", "aretry_with_context",
    # Retryers
    "Retryer", "StrategyRetryer", "constant", "exponential", "linear",
]
