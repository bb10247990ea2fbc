from __future__ import annotations

import re
from functools import lru_cache
from typing import Literal

from app.core.analysis_config import get_analysis_value
from app.taxonomy import KeywordVocabulary, get_default_vocabulary

KeywordKind = Literal["technical", "soft_skill", "general"]

_NON_WORD_RE = re.compile(r"[^\w\s]")


def _min_token_length() -> int:
    return int(get_analysis_value("keywords.min_token_length", 4))


def job_description_tokens(
    job_description: str,
    *,
    vocabulary: KeywordVocabulary | None = None,
) -> list[str]:
    """Lowercased job description tokens after length and stopword filtering.

    Duplicates are kept: the length of this list is the score denominator base.
    """
    vocab = vocabulary or get_default_vocabulary()
    stopwords = vocab.stopwords()
    min_length = _min_token_length()
    lowered = _NON_WORD_RE.sub(" ", (job_description or "").lower())
    return [
        token
        for token in lowered.split()
        if len(token) >= min_length and token not in stopwords
    ]


def extract_candidate_keywords(
    job_description: str,
    *,
    vocabulary: KeywordVocabulary | None = None,
) -> list[str]:
    """Ordered, duplicate-free keyword universe for matching.

    Technical vocabulary first, then soft skills, then raw job tokens in
    first-seen order.
    """
    vocab = vocabulary or get_default_vocabulary()
    seen: set[str] = set()
    universe: list[str] = []
    for keyword in (
        *vocab.technical_keywords(),
        *vocab.soft_skill_keywords(),
        *job_description_tokens(job_description, vocabulary=vocab),
    ):
        if keyword in seen:
            continue
        seen.add(keyword)
        universe.append(keyword)
    return universe


def classify_keyword(keyword: str, *, vocabulary: KeywordVocabulary | None = None) -> KeywordKind:
    vocab = vocabulary or get_default_vocabulary()
    normalized = (keyword or "").strip().lower()
    if normalized in vocab.technical_keywords():
        return "technical"
    if normalized in vocab.soft_skill_keywords():
        return "soft_skill"
    return "general"


@lru_cache(maxsize=2048)
def _whole_word_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)


def count_whole_word(keyword: str, text: str) -> int:
    if not keyword or not text:
        return 0
    return len(_whole_word_pattern(keyword.lower()).findall(text))
