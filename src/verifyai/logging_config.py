"""Process-wide logging setup, done in two steps around the litellm import.

litellm reads ``LITELLM_LOG`` when it is imported and attaches its own
StreamHandlers, so entry points call ``setup_logging()`` first and
``cleanup_third_party_handlers()`` once every import has run. Both are
no-ops after their first call.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Same variable Settings.log_level reads; Settings is not loaded yet
# when the first step runs.
LOG_LEVEL_ENV = "LOG_LEVEL"

_LITELLM_LOGGERS = ("LiteLLM", "LiteLLM Router", "LiteLLM Proxy")

# Capped at WARNING: provider clients log every request at INFO, and
# request bodies contain the submitted text.
_SUPPRESSED_LOGGERS = (
    *_LITELLM_LOGGERS,
    "httpx",
    "httpcore",
    "openai",
    "aiosqlite",
    "sqlalchemy.engine",
)

_phase1_done = False
_phase2_done = False


def _resolve_level(level: str | None) -> int:
    name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger before litellm is imported.

    ``level`` defaults to ``$LOG_LEVEL`` and then INFO; an unknown
    name falls back to INFO.
    """
    global _phase1_done  # noqa: PLW0603
    if _phase1_done:
        return
    _phase1_done = True

    os.environ.setdefault("LITELLM_LOG", "WARNING")

    logging.basicConfig(
        level=_resolve_level(level),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    for name in _SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def cleanup_third_party_handlers() -> None:
    """Drop the handlers litellm attached at import time.

    Without this every litellm message is printed twice, once by its
    own handler and once through root.
    """
    global _phase2_done  # noqa: PLW0603
    if _phase2_done:
        return
    _phase2_done = True

    for name in _LITELLM_LOGGERS:
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True
