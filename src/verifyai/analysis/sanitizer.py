"""Strip markdown fences and surrounding prose from model output."""

from __future__ import annotations

import re

_FENCE_RE = re.compile(r"```(?:json|JSON)?")


def sanitize_response(raw: str) -> str:
    """Isolate the outermost JSON object in a raw model response.

    Removes every code-fence marker, then slices from the first ``{``
    to the last ``}``. When no such span exists the trimmed text is
    returned unchanged so the parser fails explicitly. Never raises.
    """
    if not raw:
        return ""
    text = _FENCE_RE.sub("", raw).strip()
    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last != -1 and first < last:
        return text[first : last + 1]
    return text
