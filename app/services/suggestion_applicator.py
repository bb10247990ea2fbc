from __future__ import annotations

from app.schemas.analysis import Suggestion


def _append_line(resume_text: str, addition: str) -> str:
    return f"{resume_text}\n{addition}"


def apply_suggestion(resume_text: str, suggestion: Suggestion) -> str:
    """Return resume text with one suggestion applied.

    replace: first occurrence of originalText is swapped, otherwise no-op.
    add: suggestedText appended as a new line (applying twice appends twice).
    enhance: like replace when originalText is found, otherwise appended.
    """
    original = suggestion.original_text
    found = bool(original) and original in resume_text

    if suggestion.type == "replace":
        if not found:
            return resume_text
        return resume_text.replace(original, suggestion.suggested_text, 1)

    if suggestion.type == "add":
        return _append_line(resume_text, suggestion.suggested_text)

    if suggestion.type == "enhance":
        if found:
            return resume_text.replace(original, suggestion.suggested_text, 1)
        return _append_line(resume_text, suggestion.suggested_text)

    return resume_text


def record_applied(applied_ids: list[str], suggestion_id: str) -> list[str]:
    """New applied-id list with ``suggestion_id`` appended once; the input is untouched."""
    if suggestion_id in applied_ids:
        return list(applied_ids)
    return [*applied_ids, suggestion_id]
