"""Tests for the structured analysis audit logger."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from verifyai.constants import ERROR_TRUNCATION_CHARS
from verifyai.logger import AUDIT_LOGGER_NAME, AnalysisLogger


def _records(caplog: pytest.LogCaptureFixture) -> list[dict[str, object]]:
    return [
        json.loads(r.getMessage())
        for r in caplog.records
        if r.name == "verifyai.audit"
    ]


class TestAnalysisLogger:
    def test_creates_log_dir(self, tmp_path: Path) -> None:
        log_dir = tmp_path / "nested" / "logs"
        AnalysisLogger(log_dir=log_dir)
        assert log_dir.is_dir()

    def test_analysis_line(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        audit = AnalysisLogger(log_dir=tmp_path)
        with caplog.at_level(logging.INFO, logger="verifyai.audit"):
            audit.log_analysis(
                request_id="abc",
                context="HR",
                text_length=120,
                score=82,
                verdict="AI-Assisted (Hybrid)",
                used_fallback=False,
                duration_ms=12.5,
            )
        (entry,) = _records(caplog)
        assert entry["type"] == "analysis"
        assert entry["request_id"] == "abc"
        assert entry["text_length"] == 120
        assert entry["used_fallback"] is False
        assert "timestamp" in entry

    def test_error_truncated(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        audit = AnalysisLogger(log_dir=tmp_path)
        with caplog.at_level(logging.INFO, logger="verifyai.audit"):
            audit.log_error("abc", "save_analysis", "x" * 1000)
        (entry,) = _records(caplog)
        assert entry["type"] == "error"
        assert entry["component"] == "save_analysis"
        assert len(str(entry["error"])) == ERROR_TRUNCATION_CHARS

    def test_file_follows_latest_log_dir(self, tmp_path: Path) -> None:
        first = AnalysisLogger(log_dir=tmp_path / "a")
        AnalysisLogger(log_dir=tmp_path / "a")
        second = AnalysisLogger(log_dir=tmp_path / "b")
        audit = logging.getLogger(AUDIT_LOGGER_NAME)
        files = [
            h.baseFilename
            for h in audit.handlers
            if isinstance(h, logging.FileHandler)
        ]
        assert files == [str(tmp_path / "b" / "analysis.log")]

        second.log_error("abc", "model_call", "boom")
        first.log_error("def", "model_call", "boom")
        lines = (tmp_path / "b" / "analysis.log").read_text().splitlines()
        assert [json.loads(x)["request_id"] for x in lines] == [
            "abc",
            "def",
        ]
