"""Markdown export: full report with an annotated heatmap."""

from __future__ import annotations

from datetime import UTC, datetime

from verifyai.analysis.schemas import Report
from verifyai.export.heatmap import build_heatmap_segments


def _bullets(items: list[str]) -> list[str]:
    if not items:
        return ["- _None_"]
    return [f"- {item}" for item in items]


def export_report_markdown(report: Report, source_text: str) -> str:
    """Render a report as a single Markdown document."""
    parts: list[str] = []

    parts.append("---")
    parts.append(f"generated: {datetime.now(UTC).isoformat()}")
    parts.append(f"score: {report.score:g}")
    parts.append(f"verdict: {report.verdict}")
    parts.append(f"confidence: {report.confidence}")
    parts.append("---\n")

    parts.append("# Forensic Authorship Report\n")
    parts.append(
        f"**{report.verdict}** — {report.score:g}% AI probability "
        f"({report.confidence} confidence)\n"
    )
    parts.append(report.plain_language_meaning + "\n")
    parts.append(report.pattern_insights + "\n")

    parts.append("## Key Observations\n")
    parts.extend(_bullets(report.key_observations))
    parts.append("")

    stats = report.stats
    parts.append("## Statistics\n")
    parts.append("| Metric | Result | Interpretation |")
    parts.append("|---|---|---|")
    for name, reading in (
        ("Sentence variance", stats.sentence_variance),
        ("Lexical density", stats.lexical_density),
        ("Burstiness", stats.burstiness),
    ):
        parts.append(
            f"| {name} | {reading.result} | {reading.interpretation} |"
        )
    parts.append("")
    parts.append(stats.insight + "\n")

    parts.append("## Evidence\n")
    parts.append("### AI patterns\n")
    parts.extend(_bullets(report.evidence.ai_patterns))
    parts.append("\n### Human signals\n")
    parts.extend(_bullets(report.evidence.human_signals))
    parts.append("")
    parts.append(report.evidence.dominance_explanation + "\n")

    dive = report.forensic_deep_dive
    friction = dive.turing_friction
    parts.append("## Forensic Deep Dive\n")
    parts.append(
        f"- **Structural monotony:** {dive.structural_monotony.label}. "
        f"{dive.structural_monotony.description}"
    )
    parts.append(
        f"- **Fact verification:** {dive.fact_verification.status}. "
        f"{dive.fact_verification.insight}"
    )
    tokens = ", ".join(friction.detected_tokens) or "none"
    parts.append(
        f"- **Turing friction:** {friction.connective_tissue_count} "
        f"connectives ({tokens}). {friction.explanation}"
    )
    parts.append("")

    parts.append("## Verdict\n")
    parts.extend(_bullets(report.verdict_bullets))
    parts.append("\n## Humanization Roadmap\n")
    parts.extend(
        f"{i}. {tip}"
        for i, tip in enumerate(report.humanization_roadmap, 1)
    )
    parts.append("\n## Recommendations\n")
    parts.extend(_bullets(report.recommendations))
    parts.append("")

    parts.append("## Heatmap\n")
    parts.append(_render_heatmap(report, source_text))
    return "\n".join(parts)


def _render_heatmap(report: Report, source_text: str) -> str:
    """Bold each annotated span and footnote its tooltip."""
    body: list[str] = []
    notes: list[str] = []
    for seg in build_heatmap_segments(
        source_text, report.heatmap_annotations
    ):
        if seg.annotation is None:
            body.append(seg.text)
            continue
        n = len(notes) + 1
        body.append(f"**{seg.text}**[^{n}]")
        notes.append(
            f"[^{n}]: {seg.annotation.label} "
            f"({seg.annotation.color}) — {seg.annotation.tooltip_title}: "
            f"{seg.annotation.tooltip_explanation}"
        )
    return "".join(body) + "\n\n" + "\n".join(notes) + "\n"
