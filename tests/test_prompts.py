"""Tests for prompt construction."""

from __future__ import annotations

import pytest

from verifyai.constants import AnalysisContext, Verdict
from verifyai.prompts import (
    CONTEXT_GUIDANCE,
    SYSTEM_PROMPT,
    ModelParameters,
    build_analysis_prompt,
    build_prompts,
    render_report_schema,
)

TEXT = "The committee reviewed every proposal in detail before voting."


class TestSystemPrompt:
    def test_mentions_every_verdict(self) -> None:
        for verdict in Verdict:
            assert verdict.value in SYSTEM_PROMPT

    def test_mentions_score_ranges(self) -> None:
        assert "50" in SYSTEM_PROMPT


class TestReportSchema:
    def test_wire_field_names_present(self) -> None:
        schema = render_report_schema(AnalysisContext.GENERAL)
        for field in (
            '"score"',
            '"confidence"',
            '"verdict"',
            '"plain_language_meaning"',
            '"pattern_insights"',
            '"key_observations"',
            '"sentence_variance"',
            '"lexical_density"',
            '"burstiness"',
            '"ai_patterns"',
            '"human_signals"',
            '"forensic_deep_dive"',
            '"connective_tissue_count"',
            '"humanization_roadmap"',
            '"verdict_bullets"',
            '"recommendations"',
            '"heatmap_annotations"',
            '"start_index"',
            '"end_index"',
            '"tooltip_explanation"',
        ):
            assert field in schema

    def test_placeholders_substituted(self) -> None:
        schema = render_report_schema(AnalysisContext.MARKETING)
        assert "$" not in schema
        assert Verdict.LIKELY_AI.value in schema
        assert "MARKETING recommendation" in schema


class TestBuildPrompts:
    @pytest.mark.parametrize("context", list(AnalysisContext))
    def test_context_guidance_included(
        self, context: AnalysisContext
    ) -> None:
        prompt = build_analysis_prompt(TEXT, context)
        assert CONTEXT_GUIDANCE[context] in prompt
        assert f"{context.value} context text" in prompt

    def test_text_embedded_verbatim(self) -> None:
        text = 'Quotes "inside" and {braces} survive.' * 3
        assert text in build_analysis_prompt(text, AnalysisContext.HR)

    def test_pair(self) -> None:
        prompts = build_prompts(TEXT, AnalysisContext.EDUCATION)
        assert prompts.system == SYSTEM_PROMPT
        assert TEXT in prompts.user
        assert "Return ONLY the JSON object" in prompts.user

    def test_short_text_not_rejected(self) -> None:
        # Length checks belong to the caller.
        assert build_prompts("hi", AnalysisContext.GENERAL).user

    def test_messages(self) -> None:
        prompts = build_prompts(TEXT, AnalysisContext.GENERAL)
        system, user = prompts.as_messages()
        assert system == {"role": "system", "content": SYSTEM_PROMPT}
        assert user["role"] == "user"


class TestModelParameters:
    def test_defaults(self) -> None:
        assert ModelParameters().completion_kwargs() == {
            "temperature": 0.3,
            "top_p": 0.9,
            "max_tokens": 8192,
        }

    def test_json_mode(self) -> None:
        kwargs = ModelParameters(json_mode=True).completion_kwargs()
        assert kwargs["response_format"] == {"type": "json_object"}
