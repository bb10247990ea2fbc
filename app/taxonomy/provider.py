from __future__ import annotations

from typing import Protocol


class KeywordVocabulary(Protocol):
    def technical_keywords(self) -> tuple[str, ...]:
        """Return curated technical skill names, lowercase, in reference order."""

    def soft_skill_keywords(self) -> tuple[str, ...]:
        """Return curated soft skill names, lowercase, in reference order."""

    def stopwords(self) -> frozenset[str]:
        """Return generic words never treated as keywords."""
