"""Tests for model-output sanitization."""

from __future__ import annotations

from verifyai.analysis.sanitizer import sanitize_response


class TestSanitizeResponse:
    def test_plain_object_unchanged(self) -> None:
        assert sanitize_response('{"score": 80}') == '{"score": 80}'

    def test_json_fence_removed(self) -> None:
        raw = '```json\n{"score": 80}\n```'
        assert sanitize_response(raw) == '{"score": 80}'

    def test_uppercase_and_bare_fences_removed(self) -> None:
        assert sanitize_response('```JSON\n{"a": 1}```') == '{"a": 1}'
        assert sanitize_response('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_surrounding_prose_trimmed(self) -> None:
        raw = 'Here is the report:\n{"score": 80}\nHope it helps!'
        assert sanitize_response(raw) == '{"score": 80}'

    def test_keeps_outermost_braces(self) -> None:
        raw = 'x {"a": {"b": 1}} y'
        assert sanitize_response(raw) == '{"a": {"b": 1}}'

    def test_no_braces_returns_trimmed_text(self) -> None:
        assert sanitize_response("  no json here  ") == "no json here"

    def test_reversed_braces_returns_trimmed_text(self) -> None:
        assert sanitize_response(" } oops { ") == "} oops {"

    def test_empty_input(self) -> None:
        assert sanitize_response("") == ""

    def test_whitespace_only(self) -> None:
        assert sanitize_response("   \n\t ") == ""

    def test_idempotent(self) -> None:
        raw = 'Sure!\n```json\n{"score": 1, "x": "}"}\n```\nBye'
        once = sanitize_response(raw)
        assert sanitize_response(once) == once
