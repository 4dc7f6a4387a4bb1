"""Tests for error classification and user-facing messages."""

from __future__ import annotations

from circuitbreaker import CircuitBreaker, CircuitBreakerError

from verifyai.resilience.errors import (
    AnalysisError,
    AnalysisInProgressError,
    ErrorClass,
    InputRejectedError,
    InsufficientCreditsError,
    ModelCallError,
    classify_error,
    is_retryable,
    user_message_for,
)


class _StatusCodeError(Exception):
    """Exception with a status_code attribute."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


# ── classify_error ───────────────────────────────────────────


def test_classify_status_codes() -> None:
    """status_code wins over message text."""
    assert classify_error(_StatusCodeError("x", 429)) == ErrorClass.TRANSIENT
    assert classify_error(_StatusCodeError("x", 401)) == ErrorClass.CLIENT
    assert classify_error(_StatusCodeError("x", 503)) == ErrorClass.SERVER


def test_classify_timeout_type() -> None:
    assert classify_error(TimeoutError()) == ErrorClass.TIMEOUT


def test_classify_open_circuit() -> None:
    breaker = CircuitBreaker(name="test_errors_breaker")
    err = CircuitBreakerError(breaker)
    assert classify_error(err) == ErrorClass.CIRCUIT_OPEN


def test_classify_string_fallbacks() -> None:
    assert (
        classify_error(Exception("rate limit exceeded"))
        == ErrorClass.TRANSIENT
    )
    assert (
        classify_error(Exception("connection refused"))
        == ErrorClass.TRANSIENT
    )
    assert (
        classify_error(Exception("request timed out after 60s"))
        == ErrorClass.TIMEOUT
    )
    assert (
        classify_error(Exception("upstream returned 502"))
        == ErrorClass.SERVER
    )
    assert (
        classify_error(Exception("401 invalid api key"))
        == ErrorClass.CLIENT
    )


def test_classify_unknown() -> None:
    assert classify_error(Exception("mystery")) == ErrorClass.UNKNOWN


# ── is_retryable ─────────────────────────────────────────────


def test_is_retryable() -> None:
    assert is_retryable(_StatusCodeError("", 500)) is True
    assert is_retryable(TimeoutError()) is True
    assert is_retryable(_StatusCodeError("", 400)) is False
    assert is_retryable(Exception("mystery")) is False


# ── user-facing errors ───────────────────────────────────────


def test_every_class_has_generic_message() -> None:
    for error_class in ErrorClass:
        message = user_message_for(error_class)
        assert message
        assert "try again" in message.lower()


def test_model_call_error_carries_class_and_message() -> None:
    err = ModelCallError("boom", ErrorClass.TRANSIENT)
    assert err.error_class == ErrorClass.TRANSIENT
    assert err.user_message == user_message_for(ErrorClass.TRANSIENT)
    assert isinstance(err, AnalysisError)


def test_input_rejected_message_is_reason() -> None:
    err = InputRejectedError("Minimum 50 characters required.")
    assert err.user_message == "Minimum 50 characters required."


def test_insufficient_credits_fields() -> None:
    err = InsufficientCreditsError(1, 2)
    assert (err.balance, err.cost) == (1, 2)
    assert "credits" in err.user_message.lower()


def test_in_progress_message() -> None:
    assert "already running" in AnalysisInProgressError("k").user_message
