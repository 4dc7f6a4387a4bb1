"""Deserialize sanitized model output into a Report.

The loosely-typed JSON document never leaves this module: callers get
either a structurally valid ``Report`` or a ``ParseFailure``.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, cast

from pydantic import ValidationError

from verifyai.analysis.schemas import Annotation, Report
from verifyai.constants import (
    LABEL_COLORS,
    RAW_PREVIEW_CHARS,
    AnnotationColor,
    AnnotationLabel,
    Confidence,
    Verdict,
    verdict_for_score,
)

logger = logging.getLogger(__name__)

_SCORE_HINT_RE = re.compile(r'"score"\s*:\s*"?(-?\d+(?:\.\d+)?)')

_SEQUENCE_FIELDS = (
    "key_observations",
    "humanization_roadmap",
    "verdict_bullets",
    "recommendations",
    "heatmap_annotations",
)


class ParseFailure(Exception):
    """Model output could not be turned into a Report.

    Expected and recoverable: the pipeline routes it to the fallback
    builder. Carries the raw model text, the underlying error and a
    best-effort score hint scraped from the raw text.
    """

    def __init__(self, raw_text: str, error: str) -> None:
        super().__init__(error)
        self.raw_text = raw_text
        self.error = error
        self.score_hint = extract_score_hint(raw_text)


def extract_score_hint(raw: str) -> float | None:
    """Find a ``"score": N`` pair in otherwise unparsable text."""
    match = _SCORE_HINT_RE.search(raw or "")
    if match is None:
        return None
    value = float(match.group(1))
    return value if math.isfinite(value) else None


def parse_report(sanitized: str, raw_text: str | None = None) -> Report:
    """Strictly deserialize a sanitized response into a Report.

    Raises ParseFailure on malformed JSON, a non-object payload, or a
    payload missing required fields. The returned report is not yet
    checked against the cross-field invariants.
    """
    raw = sanitized if raw_text is None else raw_text
    try:
        data: Any = json.loads(sanitized)
    except (ValueError, TypeError, RecursionError) as exc:
        # ValueError covers JSONDecodeError and the int digit limit
        logger.warning(
            "event=report_parse_failed reason=invalid_json"
            " response_len=%d preview=%r",
            len(raw),
            raw[:RAW_PREVIEW_CHARS],
        )
        raise ParseFailure(raw, f"invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        logger.warning(
            "event=report_parse_failed reason=not_an_object type=%s",
            type(data).__name__,
        )
        raise ParseFailure(
            raw, f"expected a JSON object, got {type(data).__name__}"
        )

    normalized = _normalize(cast(dict[str, Any], data))
    try:
        return Report.model_validate(normalized)
    except ValidationError as exc:
        fields = sorted(
            {".".join(str(p) for p in e["loc"]) for e in exc.errors()}
        )
        logger.warning(
            "event=report_parse_failed reason=schema fields=%s",
            ",".join(fields),
        )
        raise ParseFailure(raw, f"schema mismatch: {exc}") from exc
    except OverflowError as exc:
        logger.warning(
            "event=report_parse_failed reason=number_out_of_range"
        )
        raise ParseFailure(raw, f"number out of range: {exc}") from exc


def _normalize(data: dict[str, Any]) -> dict[str, Any]:
    """Coerce tolerable deviations so only real gaps fail validation."""
    out = dict(data)

    for name in _SEQUENCE_FIELDS:
        if out.get(name) is None:
            out[name] = []

    if "confidence" in out and not _is_member(
        out["confidence"], Confidence
    ):
        logger.warning(
            "event=confidence_coerced value=%r", out["confidence"]
        )
        out["confidence"] = Confidence.MEDIUM

    score = _as_float(out.get("score"))
    if (
        score is not None
        and "verdict" in out
        and not _is_member(out["verdict"], Verdict)
    ):
        logger.warning("event=verdict_coerced value=%r", out["verdict"])
        out["verdict"] = verdict_for_score(score)

    out["heatmap_annotations"] = _extract_annotations(
        out["heatmap_annotations"]
    )
    return out


def _extract_annotations(raw: Any) -> list[Annotation]:
    """Validate annotation entries one by one, dropping bad ones."""
    if not isinstance(raw, list):
        logger.warning(
            "event=annotations_not_a_list type=%s", type(raw).__name__
        )
        return []

    annotations: list[Annotation] = []
    dropped = 0
    for raw_item in cast(list[Any], raw):
        if not isinstance(raw_item, dict):
            dropped += 1
            continue
        item = dict(cast(dict[str, Any], raw_item))
        label = item.get("label")
        if (
            _is_member(label, AnnotationLabel)
            and not _is_member(item.get("color"), AnnotationColor)
        ):
            item["color"] = LABEL_COLORS[AnnotationLabel(label)]
        try:
            annotations.append(Annotation.model_validate(item))
        except ValidationError:
            dropped += 1
    if dropped:
        logger.warning(
            "event=annotations_dropped_at_parse dropped=%d kept=%d",
            dropped,
            len(annotations),
        )
    return annotations


def _is_member(value: Any, enum_cls: type[Any]) -> bool:
    return isinstance(value, str) and value in {
        m.value for m in enum_cls
    }


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return result if math.isfinite(result) else None
