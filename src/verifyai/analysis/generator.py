"""Model-call collaborator: prompts in, raw response text out."""

from __future__ import annotations

import logging
from typing import Protocol

from circuitbreaker import CircuitBreakerError

from verifyai.analysis._llm_call import request_audit
from verifyai.config import Settings
from verifyai.prompts import AnalysisPrompts
from verifyai.resilience.errors import (
    ErrorClass,
    ModelCallError,
    classify_error,
)

logger = logging.getLogger(__name__)


class ReportGenerator(Protocol):
    """Single-method capability wrapping the external model.

    Implementations return the raw response text (possibly malformed)
    or raise ModelCallError. Test doubles script arbitrary strings.
    """

    async def generate(self, prompts: AnalysisPrompts) -> str: ...


class LiteLLMReportGenerator:
    """Calls the configured model chain through litellm.

    Models are tried in order; a failing or circuit-open model falls
    through to the next. When every model fails, ModelCallError is
    raised with the classification of the last failure.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or Settings()

    async def generate(self, prompts: AnalysisPrompts) -> str:
        settings = self._settings
        last_class = ErrorClass.UNKNOWN
        for model in settings.litellm_model_chain:
            try:
                result = await request_audit(
                    model,
                    prompts,
                    settings.model_parameters,
                    settings.llm_timeout_seconds,
                )
                return result.content
            except CircuitBreakerError:
                logger.warning(
                    "event=circuit_open model=%s component=generator",
                    model,
                )
                last_class = ErrorClass.CIRCUIT_OPEN
                continue
            except Exception as exc:
                last_class = classify_error(exc)
                logger.warning(
                    "event=model_call_failed model=%s error_class=%s",
                    model,
                    last_class.value,
                    exc_info=True,
                )
                continue

        raise ModelCallError(
            "all models in the chain failed", error_class=last_class
        )
