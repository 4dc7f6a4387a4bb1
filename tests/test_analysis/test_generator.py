"""Tests for the litellm-backed report generator and audit call."""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from circuitbreaker import CircuitBreakerError, CircuitBreakerMonitor
from litellm.exceptions import RateLimitError as LitellmRateLimitError
from tenacity import wait_none

from verifyai.analysis._llm_call import (
    _breaker_registry,
    request_audit,
)
from verifyai.analysis.generator import LiteLLMReportGenerator
from verifyai.config import Settings
from verifyai.constants import AnalysisContext
from verifyai.prompts import ModelParameters, build_prompts
from verifyai.resilience.errors import ErrorClass, ModelCallError

_ACOMPLETION = "verifyai.analysis._llm_call._acompletion"


@pytest.fixture(autouse=True)
def _reset_breakers() -> None:
    """Reset circuit breakers between tests."""
    _breaker_registry.clear()
    for cb in CircuitBreakerMonitor.get_circuits():
        cb.reset()  # type: ignore[union-attr]


@pytest.fixture(autouse=True)
def _disable_retry_wait() -> Any:
    """Disable tenacity wait time for fast tests."""
    original_wait = request_audit.retry.wait  # type: ignore[union-attr]
    request_audit.retry.wait = wait_none()  # type: ignore[union-attr]
    yield
    request_audit.retry.wait = original_wait  # type: ignore[union-attr]


def _mock_response(
    content: str | None, finish_reason: str = "stop"
) -> Any:
    """Build a mock litellm response with usage metadata."""
    msg = type("Msg", (), {"content": content})()
    choice = type(
        "Choice", (), {"message": msg, "finish_reason": finish_reason}
    )()
    usage = type(
        "Usage",
        (),
        {"prompt_tokens": 900, "completion_tokens": 400},
    )()
    return type(
        "Response", (), {"choices": [choice], "usage": usage}
    )()


def _settings(*models: str, **kwargs: Any) -> Settings:
    return Settings(
        litellm_model_chain=list(models) or ["groq/test-model"],
        **kwargs,
    )


def _rate_limit() -> LitellmRateLimitError:
    return LitellmRateLimitError(
        message="Rate limit exceeded",
        model="test",
        llm_provider="groq",
    )


_PROMPTS = build_prompts("x" * 60, AnalysisContext.GENERAL)


async def _audit(model: str = "m", **params: Any) -> Any:
    return await request_audit(
        model, _PROMPTS, ModelParameters(**params), 10
    )


class TestRequestAudit:
    async def test_returns_content_and_usage(self) -> None:
        mock = AsyncMock(return_value=_mock_response('{"score": 1}'))
        with patch(_ACOMPLETION, new=mock):
            result = await _audit()
        assert result.content == '{"score": 1}'
        assert result.input_tokens == 900
        assert result.output_tokens == 400
        assert result.truncated is False
        kwargs = mock.call_args.kwargs
        assert kwargs["messages"] == _PROMPTS.as_messages()
        assert kwargs["timeout"] == 10
        assert "response_format" not in kwargs

    async def test_json_mode_requests_object(self) -> None:
        mock = AsyncMock(return_value=_mock_response("{}"))
        with patch(_ACOMPLETION, new=mock):
            await _audit(json_mode=True)
        assert mock.call_args.kwargs["response_format"] == {
            "type": "json_object"
        }

    async def test_none_content_becomes_empty(self) -> None:
        mock = AsyncMock(return_value=_mock_response(None))
        with patch(_ACOMPLETION, new=mock):
            result = await _audit()
        assert result.content == ""

    async def test_truncation_logged(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        mock = AsyncMock(
            return_value=_mock_response('{"score": 9', "length")
        )
        with (
            patch(_ACOMPLETION, new=mock),
            caplog.at_level(logging.WARNING),
        ):
            result = await _audit(max_tokens=5)
        assert result.truncated is True
        assert "event=audit_truncated" in caplog.text

    async def test_retries_on_rate_limit_then_succeeds(self) -> None:
        mock = AsyncMock(
            side_effect=[_rate_limit(), _rate_limit(), _mock_response("ok")]
        )
        with patch(_ACOMPLETION, new=mock):
            result = await _audit()
        assert result.content == "ok"
        assert mock.call_count == 3

    async def test_circuit_opens_after_threshold(self) -> None:
        with patch(
            _ACOMPLETION,
            new_callable=AsyncMock,
            side_effect=ConnectionError("API down"),
        ):
            for _ in range(5):
                with pytest.raises(ConnectionError):
                    await _audit()
            with pytest.raises(CircuitBreakerError):
                await _audit()

    async def test_breakers_are_per_model(self) -> None:
        with patch(
            _ACOMPLETION,
            new_callable=AsyncMock,
            side_effect=ConnectionError("API down"),
        ):
            for _ in range(5):
                with pytest.raises(ConnectionError):
                    await _audit("primary")
            with pytest.raises(ConnectionError):
                await _audit("backup")

    async def test_rate_limits_do_not_open_circuit(self) -> None:
        mock = AsyncMock(side_effect=_rate_limit())
        with patch(_ACOMPLETION, new=mock):
            for _ in range(3):
                with pytest.raises(LitellmRateLimitError):
                    await _audit()
        # 3 calls x 3 attempts, none short-circuited
        assert mock.call_count == 9


class TestLiteLLMReportGenerator:
    async def test_sends_prompts_and_parameters(self) -> None:
        mock = AsyncMock(return_value=_mock_response("raw text"))
        with patch(_ACOMPLETION, new=mock):
            raw = await LiteLLMReportGenerator(_settings()).generate(
                _PROMPTS
            )
        assert raw == "raw text"
        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "groq/test-model"
        assert kwargs["temperature"] == 0.3
        assert kwargs["top_p"] == 0.9
        assert kwargs["max_tokens"] == 8192
        assert kwargs["messages"][0] == {
            "role": "system",
            "content": _PROMPTS.system,
        }
        assert kwargs["messages"][1]["content"] == _PROMPTS.user

    async def test_falls_through_to_next_model(self) -> None:
        mock = AsyncMock(
            side_effect=[ConnectionError("refused"), _mock_response("b")]
        )
        with patch(_ACOMPLETION, new=mock):
            raw = await LiteLLMReportGenerator(
                _settings("primary", "backup")
            ).generate(_PROMPTS)
        assert raw == "b"
        assert [c.kwargs["model"] for c in mock.call_args_list] == [
            "primary",
            "backup",
        ]

    async def test_all_models_fail(self) -> None:
        mock = AsyncMock(side_effect=TimeoutError())
        with patch(_ACOMPLETION, new=mock):
            with pytest.raises(ModelCallError) as info:
                await LiteLLMReportGenerator(
                    _settings("a", "b")
                ).generate(_PROMPTS)
        assert info.value.error_class == ErrorClass.TIMEOUT
        assert "timed out" in info.value.user_message

    async def test_open_circuit_reported(self) -> None:
        generator = LiteLLMReportGenerator(_settings("flaky"))
        with patch(
            _ACOMPLETION,
            new_callable=AsyncMock,
            side_effect=ConnectionError("API down"),
        ):
            for _ in range(5):
                with pytest.raises(ModelCallError):
                    await generator.generate(_PROMPTS)
            with pytest.raises(ModelCallError) as info:
                await generator.generate(_PROMPTS)
        assert info.value.error_class == ErrorClass.CIRCUIT_OPEN
