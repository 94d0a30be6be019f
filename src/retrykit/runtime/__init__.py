"""Runtime - retry loop, tickers, and concurrency primitives."""
