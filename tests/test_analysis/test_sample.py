"""Tests for the built-in sample report."""

from __future__ import annotations

from verifyai.analysis.consistency import enforce_consistency
from verifyai.analysis.sample import SAMPLE_TEXT, sample_report
from verifyai.constants import AnnotationLabel, Confidence, Verdict


class TestSampleReport:
    def test_headline(self) -> None:
        report = sample_report()
        assert report.score == 98.5
        assert report.confidence == Confidence.HIGH
        assert report.verdict == Verdict.LIKELY_AI

    def test_one_annotation_per_sentence(self) -> None:
        report = sample_report()
        assert len(report.heatmap_annotations) == 6
        for anno in report.heatmap_annotations:
            span = SAMPLE_TEXT[anno.start_index : anno.end_index]
            assert span.endswith(".")
            assert anno.label == AnnotationLabel.AI_PATTERN

    def test_already_consistent(self) -> None:
        report = sample_report()
        assert enforce_consistency(report, SAMPLE_TEXT) == report

    def test_cached(self) -> None:
        assert sample_report() is sample_report()
