from __future__ import annotations

import json
from pathlib import Path

from .provider import KeywordVocabulary


class LocalVocabulary(KeywordVocabulary):
    def __init__(self, keywords_path: str | Path | None = None) -> None:
        path = Path(keywords_path) if keywords_path else Path(__file__).with_name("keywords.json")
        raw = self._load(path)
        self._technical = self._clean_list(raw.get("technical", []))
        self._soft = self._clean_list(raw.get("soft_skills", []))
        self._stopwords = frozenset(self._clean_list(raw.get("stopwords", [])))

    @staticmethod
    def _load(path: Path) -> dict:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        if not isinstance(raw, dict):
            raise ValueError(f"Keyword vocabulary '{path}' must be a JSON object.")
        return raw

    @staticmethod
    def _clean_list(values: list) -> tuple[str, ...]:
        seen: set[str] = set()
        clean: list[str] = []
        for value in values:
            normalized = str(value).strip().lower()
            if normalized and normalized not in seen:
                seen.add(normalized)
                clean.append(normalized)
        return tuple(clean)

    def technical_keywords(self) -> tuple[str, ...]:
        return self._technical

    def soft_skill_keywords(self) -> tuple[str, ...]:
        return self._soft

    def stopwords(self) -> frozenset[str]:
        return self._stopwords
