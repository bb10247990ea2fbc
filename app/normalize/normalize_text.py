from __future__ import annotations

import re

# Word characters, whitespace and . , ! ? ; : ( ) - @ survive; everything else is dropped.
_DISALLOWED_RE = re.compile(r"[^\w\s.,!?;:()\-@]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(raw_text: str | None) -> str:
    """Clean extracted document text into a single-line, analysis-ready string.

    Characters are removed before whitespace is collapsed so the function is
    idempotent.
    """
    if not raw_text:
        return ""
    cleaned = _DISALLOWED_RE.sub("", raw_text)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()
