"""Error taxonomy and classification for the analysis flow.

Input rejections and model-call failures are the only analysis-stage
errors a user ever sees. Parse failures are recovered by the fallback
report and consistency violations are repaired silently, so neither
appears here.
"""

from __future__ import annotations

import asyncio
from enum import Enum


class ErrorClass(Enum):
    TRANSIENT = "transient"  # 429, network errors, retryable
    SERVER = "server"  # 500, 502, 503, retryable
    TIMEOUT = "timeout"  # deadline exceeded, retryable with backoff
    CLIENT = "client"  # 400, 401, 403, do NOT retry
    CIRCUIT_OPEN = "circuit_open"  # breaker tripped, retry later
    UNKNOWN = "unknown"  # unclassified, do NOT retry


class AnalysisError(Exception):
    """Base class for user-visible analysis failures."""

    user_message = "Analysis failed. Please try again."


class InputRejectedError(AnalysisError):
    """Submission rejected before any model call (e.g. text too short)."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.user_message = reason


class InsufficientCreditsError(AnalysisError):
    """Balance below the per-analysis cost."""

    user_message = "Insufficient credits."

    def __init__(self, balance: int, cost: int) -> None:
        super().__init__(f"balance {balance} < cost {cost}")
        self.balance = balance
        self.cost = cost


class AnalysisInProgressError(AnalysisError):
    """A submission for this session is already running."""

    user_message = (
        "An analysis is already running. Wait for it to finish."
    )


class ModelCallError(AnalysisError):
    """Every model in the chain failed; no report was produced."""

    def __init__(
        self, message: str, error_class: ErrorClass = ErrorClass.UNKNOWN
    ) -> None:
        super().__init__(message)
        self.error_class = error_class
        self.user_message = user_message_for(error_class)


_USER_MESSAGES: dict[ErrorClass, str] = {
    ErrorClass.TRANSIENT: (
        "The analysis service is busy. Please try again in a moment."
    ),
    ErrorClass.SERVER: (
        "The analysis service is temporarily unavailable. "
        "Please try again."
    ),
    ErrorClass.TIMEOUT: (
        "The analysis timed out. Please try again."
    ),
    ErrorClass.CLIENT: (
        "Analysis failed. Please check your API key or try again."
    ),
    ErrorClass.CIRCUIT_OPEN: (
        "The analysis service is recovering from errors. "
        "Please try again shortly."
    ),
}


def user_message_for(error_class: ErrorClass) -> str:
    """Generic, retry-suggesting message for a failure category."""
    return _USER_MESSAGES.get(error_class, AnalysisError.user_message)


def classify_error(error: Exception) -> ErrorClass:
    """Classify an error to determine handling strategy.

    Checks structured attributes first (status_code), falls back
    to string matching for untyped exceptions.
    """
    if type(error).__name__ == "CircuitBreakerError":
        return ErrorClass.CIRCUIT_OPEN

    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        if status_code == 429:
            return ErrorClass.TRANSIENT
        if 400 <= status_code < 500:
            return ErrorClass.CLIENT
        if 500 <= status_code < 600:
            return ErrorClass.SERVER

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorClass.TIMEOUT

    msg = str(error).lower()

    if "timeout" in msg or "timed out" in msg:
        return ErrorClass.TIMEOUT
    if "429" in msg or "rate limit" in msg or "rate_limit" in msg:
        return ErrorClass.TRANSIENT
    if any(code in msg for code in ("500", "502", "503", "504")):
        return ErrorClass.SERVER
    if "econnrefused" in msg or "connection" in msg:
        return ErrorClass.TRANSIENT
    if any(code in msg for code in ("400", "401", "403", "404")):
        return ErrorClass.CLIENT

    return ErrorClass.UNKNOWN


_RETRYABLE = frozenset({
    ErrorClass.TRANSIENT,
    ErrorClass.SERVER,
    ErrorClass.TIMEOUT,
    ErrorClass.CIRCUIT_OPEN,
})


def is_retryable(error: Exception) -> bool:
    """Return True if the error category supports retry."""
    return classify_error(error) in _RETRYABLE
