"""Tests for the retry loop.

Validates:
- Success after any number of expected errors
- Plain and unexpected errors end the session on the first attempt
- Overall deadline appends the timeout sentinel
- Stop signal ends the session cleanly
- Context cancellation and per-attempt timeouts
- First-occurrence logging of expected errors
"""

from __future__ import annotations

import logging
import time

import pytest

from retrykit import (
    Context,
    ErrorSet,
    ExpectedError,
    Options,
    background,
    constant,
    expected,
    exponential,
    linear,
    new_constant_ticker,
    new_default_options,
    retry,
    retry_with_context,
    unexpected,
    with_units,
)
from retrykit.runtime.retry import ConstantTicker, ExponentialTicker, LinearTicker

FAST = Options(units=0.01)


def always(err: Exception):
    def op() -> None:
        raise err
    return op


class TestRetry:
    def test_no_error(self) -> None:
        assert retry(lambda: None, 2.0, new_constant_ticker(FAST), FAST) is None

    def test_returns_operation_value(self) -> None:
        assert retry(lambda: 42, 2.0, new_constant_ticker(FAST), FAST) == 42

    def test_succeeds_after_expected_errors(self) -> None:
        calls: list[int] = []

        def flaky() -> str:
            calls.append(1)
            if len(calls) < 4:
                raise ExpectedError(ConnectionError(f"transient {len(calls)}"))
            return "ok"

        assert retry(flaky, 5.0, new_constant_ticker(FAST), FAST) == "ok"
        assert len(calls) == 4

    def test_plain_error_is_fatal(self) -> None:
        calls: list[int] = []

        def op() -> None:
            calls.append(1)
            raise ValueError("test")

        with pytest.raises(ErrorSet) as exc_info:
            retry(op, 2.0, new_constant_ticker(FAST), FAST)
        assert str(exc_info.value) == "1 error(s) occurred:\n\ttest"
        assert len(calls) == 1

    def test_unexpected_error_is_fatal(self) -> None:
        cause = KeyError("missing")
        with pytest.raises(ErrorSet) as exc_info:
            retry(always(unexpected(cause)), 2.0, new_constant_ticker(FAST), FAST)
        assert len(exc_info.value) == 1
        assert exc_info.value.matches(cause)

    def test_expected_errors_precede_fatal(self) -> None:
        outcomes = iter([expected(OSError("a")), expected(OSError("a")), expected(OSError("b")), RuntimeError("c")])

        def op() -> None:
            raise next(outcomes)

        with pytest.raises(ErrorSet) as exc_info:
            retry(op, 5.0, new_constant_ticker(FAST), FAST)
        assert str(exc_info.value) == "3 error(s) occurred:\n\ta\n\tb\n\tc"

    def test_expected_error_string(self) -> None:
        ticker = new_constant_ticker(new_default_options())
        with pytest.raises(ErrorSet) as exc_info:
            retry(always(expected(ValueError("test"))), 2.0, ticker, Options())
        assert str(exc_info.value) == "2 error(s) occurred:\n\ttest\n\ttimeout"
        assert exc_info.value.timed_out

    def test_timeout_counts_distinct_expected_messages(self) -> None:
        n = [0]

        def op() -> None:
            n[0] += 1
            raise ExpectedError(OSError(f"e{n[0] % 3}"))

        start = time.monotonic()
        with pytest.raises(ErrorSet) as exc_info:
            retry(op, 0.2, new_constant_ticker(FAST), FAST)
        assert time.monotonic() - start < 2.0
        errs = exc_info.value
        assert str(errs).endswith("\n\ttimeout")
        assert len(errs) == len({str(e) for e in errs if str(e) != "timeout"}) + 1

    def test_stop_ends_session_without_error(self) -> None:
        ticker = ConstantTicker(Options(units=30.0))

        def op() -> None:
            ticker.stop()
            raise ExpectedError(OSError("retry me"))

        start = time.monotonic()
        assert retry(op, 60.0, ticker, ticker.options) is None
        assert time.monotonic() - start < 5.0

    def test_stop_after_session_does_not_block(self) -> None:
        ticker = new_constant_ticker(FAST)
        assert retry(lambda: "done", 1.0, ticker, FAST) == "done"
        ticker.stop()
        ticker.stop()

    def test_defaults_when_ticker_and_options_omitted(self) -> None:
        assert retry(lambda: 1, 1.0) == 1

    def test_base_exceptions_propagate(self) -> None:
        def op() -> None:
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            retry(op, 1.0, new_constant_ticker(FAST), FAST)


class TestRetryWithContext:
    def test_context_canceled_before_first_attempt(self) -> None:
        ctx = background()
        ctx.cancel()

        def op(c: Context) -> None:
            c.check()

        with pytest.raises(ErrorSet) as exc_info:
            retry_with_context(ctx, op, 2.0, new_constant_ticker(FAST), FAST)
        assert str(exc_info.value) == "1 error(s) occurred:\n\tcontext canceled"

    def test_limit_attempt(self) -> None:
        calls: list[int] = []

        def op(c: Context) -> str:
            calls.append(1)
            if len(calls) == 2:
                return "ok"
            c.done().wait()
            c.check()
            return "unreachable"

        opts = Options(units=0.01, attempt_timeout=0.001)
        assert retry_with_context(background(), op, 2.0, new_constant_ticker(opts), opts) == "ok"
        assert len(calls) == 2

    def test_each_attempt_gets_fresh_context(self) -> None:
        seen: list[Context] = []

        def op(c: Context) -> str:
            seen.append(c)
            if len(seen) < 3:
                raise ExpectedError(OSError("again"))
            return "ok"

        root = background()
        assert retry_with_context(root, op, 2.0, new_constant_ticker(FAST), FAST) == "ok"
        assert len({id(c) for c in seen}) == 3
        assert all(c.cancelled for c in seen)
        assert not root.cancelled

    def test_cancel_during_wait_fails_session(self) -> None:
        ctx = background()

        def op(c: Context) -> None:
            ctx.cancel()
            raise ExpectedError(OSError("flaky"))

        slow = Options(units=30.0)
        start = time.monotonic()
        with pytest.raises(ErrorSet) as exc_info:
            retry_with_context(ctx, op, 60.0, new_constant_ticker(slow), slow)
        assert time.monotonic() - start < 5.0
        assert str(exc_info.value) == "2 error(s) occurred:\n\tflaky\n\tcontext canceled"

    def test_outer_deadline_is_not_retried(self) -> None:
        def op(c: Context) -> None:
            c.done().wait()
            c.check()

        opts = Options(units=0.01, attempt_timeout=10.0)
        with pytest.raises(ErrorSet) as exc_info:
            retry_with_context(background().with_timeout(0.02), op, 5.0, new_constant_ticker(opts), opts)
        assert str(exc_info.value) == "1 error(s) occurred:\n\tcontext deadline exceeded"


class TestLogging:
    def test_logs_first_occurrence_only(self, caplog: pytest.LogCaptureFixture) -> None:
        outcomes = iter([expected(OSError("a")), expected(OSError("a")), expected(OSError("b"))])

        def op() -> str:
            err = next(outcomes, None)
            if err is not None:
                raise err
            return "ok"

        opts = Options(units=0.01, log_errors=True)
        with caplog.at_level(logging.INFO, logger="retrykit.retry"):
            assert retry(op, 5.0, new_constant_ticker(opts), opts) == "ok"
        messages = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
        assert messages == ["retrying error: a", "retrying error: b"]

    def test_silent_when_disabled(self, caplog: pytest.LogCaptureFixture) -> None:
        outcomes = iter([expected(OSError("a"))])

        def op() -> str:
            if (err := next(outcomes, None)) is not None:
                raise err
            return "ok"

        with caplog.at_level(logging.INFO, logger="retrykit.retry"):
            retry(op, 5.0, new_constant_ticker(FAST), FAST)
        assert not [r for r in caplog.records if r.levelno >= logging.INFO]


class TestRetryers:
    @pytest.mark.parametrize("factory,ticker_type", [
        (constant, ConstantTicker), (exponential, ExponentialTicker), (linear, LinearTicker),
    ])
    def test_factories(self, factory, ticker_type) -> None:
        r = factory(1.0, with_units(0.001))
        assert r.options.units == 0.001
        assert isinstance(r.ticker(), ticker_type)
        assert r.ticker() is not r.ticker()

    def test_retryer_retries(self) -> None:
        calls: list[int] = []

        def flaky() -> str:
            calls.append(1)
            if len(calls) < 3:
                raise ExpectedError(OSError("nope"))
            return "ok"

        assert linear(2.0, with_units(0.001)).retry(flaky) == "ok"

    def test_retryer_with_context(self) -> None:
        r = constant(1.0, with_units(0.01))
        assert r.retry_with_context(background(), lambda c: "late" if c.cancelled else "ok") == "ok"
