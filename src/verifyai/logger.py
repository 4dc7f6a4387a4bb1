"""Audit trail of analyses, one JSON object per line."""

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from verifyai.constants import ERROR_TRUNCATION_CHARS
from verifyai.logging_config import LOG_DATEFMT, LOG_FORMAT

__all__ = [
    "AUDIT_LOGGER_NAME",
    "AnalysisLogger",
    "LOG_DATEFMT",
    "LOG_FORMAT",
]

AUDIT_LOGGER_NAME = "verifyai.audit"
AUDIT_FILE_NAME = "analysis.log"


class AnalysisLogger:
    """Structured JSON logger with request_id correlation.

    Writes to ``<log_dir>/analysis.log``: one ``analysis`` line per
    completed report and one ``error`` line per failed model call or
    persistence write. The submitted text is never logged, only its
    length.
    """

    def __init__(self, log_dir: Path, level: str = "INFO") -> None:
        self._log_dir = log_dir
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger(AUDIT_LOGGER_NAME)
        self._logger.setLevel(getattr(logging, level.upper()))
        self._attach_file_handler(log_dir / AUDIT_FILE_NAME)

    def _attach_file_handler(self, path: Path) -> None:
        # The logger is process-wide; keep exactly one file handler,
        # pointing at the most recently configured directory.
        target = os.path.abspath(path)
        for handler in list(self._logger.handlers):
            if not isinstance(handler, logging.FileHandler):
                continue
            if handler.baseFilename == target:
                return
            self._logger.removeHandler(handler)
            handler.close()
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(message)s"))
        self._logger.addHandler(handler)

    def _write(self, level: int, record_type: str, **fields: Any) -> None:
        entry = {
            "type": record_type,
            "timestamp": datetime.now(UTC).isoformat(),
            **fields,
        }
        self._logger.log(level, json.dumps(entry, default=str))

    def log_analysis(
        self,
        request_id: str,
        context: str,
        text_length: int,
        score: float,
        verdict: str,
        used_fallback: bool,
        duration_ms: float,
    ) -> None:
        self._write(
            logging.INFO,
            "analysis",
            request_id=request_id,
            context=context,
            text_length=text_length,
            score=score,
            verdict=verdict,
            used_fallback=used_fallback,
            duration_ms=duration_ms,
        )

    def log_error(
        self,
        request_id: str,
        component: str,
        error: str,
    ) -> None:
        self._write(
            logging.ERROR,
            "error",
            request_id=request_id,
            component=component,
            error=error[:ERROR_TRUNCATION_CHARS],
        )
