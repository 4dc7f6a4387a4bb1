"""One forensic audit request against one model.

Each model gets its own circuit breaker; rate limits are retried with
jittered backoff and never count against the breaker.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import litellm
from circuitbreaker import (  # pyright: ignore[reportUnknownVariableType]
    CircuitBreaker,
    CircuitBreakerError,
)
from litellm.exceptions import RateLimitError as LitellmRateLimitError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from verifyai.constants import (
    CB_LLM_FAILURE_THRESHOLD,
    CB_LLM_RECOVERY_TIMEOUT,
    RETRY_INITIAL_WAIT,
    RETRY_MAX_ATTEMPTS,
    RETRY_MAX_WAIT,
)
from verifyai.prompts import AnalysisPrompts, ModelParameters

logger = logging.getLogger(__name__)

# litellm stubs have partially unknown types, so use a typed alias
if TYPE_CHECKING:
    _acompletion: Callable[..., Coroutine[Any, Any, Any]]
else:
    _acompletion = litellm.acompletion

_TRUNCATED_FINISH_REASON = "length"


@dataclass(frozen=True)
class ModelResponse:
    """Raw audit text plus the usage metadata the provider reported."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int
    finish_reason: str | None = None

    @property
    def truncated(self) -> bool:
        """The provider stopped at max_tokens, so the JSON is cut off."""
        return self.finish_reason == _TRUNCATED_FINISH_REASON


def _counts_as_outage(
    thrown_type: type, thrown_value: BaseException
) -> bool:
    # 429s are backpressure from a healthy provider
    return not issubclass(thrown_type, LitellmRateLimitError)


_breaker_registry: dict[str, CircuitBreaker] = {}  # pyright: ignore[reportUnknownVariableType]


def _breaker_for(model: str) -> CircuitBreaker:  # pyright: ignore[reportUnknownParameterType]
    breaker = _breaker_registry.get(model)
    if breaker is None:
        breaker = CircuitBreaker(  # pyright: ignore[reportUnknownMemberType]
            failure_threshold=CB_LLM_FAILURE_THRESHOLD,
            recovery_timeout=CB_LLM_RECOVERY_TIMEOUT,
            expected_exception=_counts_as_outage,
            name=f"audit_{model}",
        )
        _breaker_registry[model] = breaker
    return breaker


@retry(
    stop=stop_after_attempt(RETRY_MAX_ATTEMPTS),
    wait=wait_exponential_jitter(
        initial=RETRY_INITIAL_WAIT, max=RETRY_MAX_WAIT
    ),
    retry=retry_if_exception_type(LitellmRateLimitError),
    reraise=True,
)
async def request_audit(
    model: str,
    prompts: AnalysisPrompts,
    params: ModelParameters,
    timeout: int,
) -> ModelResponse:
    """Send one audit to ``model`` and return the raw response text.

    Raises CircuitBreakerError without calling the provider when the
    model's breaker is open. Provider errors propagate unchanged for
    the caller to classify.
    """
    breaker = _breaker_for(model)
    if breaker.opened:  # pyright: ignore[reportUnknownMemberType]
        raise CircuitBreakerError(breaker)  # pyright: ignore[reportUnknownArgumentType]
    with breaker:  # pyright: ignore[reportUnknownMemberType]
        response: Any = await _acompletion(
            model=model,
            messages=prompts.as_messages(),
            timeout=timeout,
            **params.completion_kwargs(),
        )

    usage: Any = getattr(response, "usage", None)
    choice: Any = response.choices[0]
    result = ModelResponse(
        content=str(choice.message.content or ""),
        model=model,
        input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
        output_tokens=getattr(usage, "completion_tokens", 0) or 0,
        finish_reason=getattr(choice, "finish_reason", None),
    )

    if result.truncated:
        # The report will almost certainly fail to parse
        logger.warning(
            "event=audit_truncated model=%s output_tokens=%d"
            " max_tokens=%d",
            model,
            result.output_tokens,
            params.max_tokens,
        )
    logger.debug(
        "event=audit_response model=%s input_tokens=%d"
        " output_tokens=%d chars=%d",
        model,
        result.input_tokens,
        result.output_tokens,
        len(result.content),
    )
    return result
