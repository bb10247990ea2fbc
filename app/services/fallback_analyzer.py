from __future__ import annotations

from collections import Counter
import logging
import math
import random
import uuid
from typing import Sequence

from app.core.analysis_config import get_analysis_value
from app.features.keyword_extractor import (
    classify_keyword,
    count_whole_word,
    extract_candidate_keywords,
    job_description_tokens,
)
from app.schemas.analysis import (
    AnalysisResult,
    Category,
    ContextualInsights,
    Impact,
    KeywordMatch,
    Suggestion,
    SuggestionType,
)
from app.taxonomy import KeywordVocabulary

logger = logging.getLogger(__name__)

_DEFAULT_LOCATIONS = ("Skills section", "Experience section", "Summary section", "Projects section")
_SUGGESTION_TYPES: tuple[SuggestionType, ...] = ("add", "enhance", "replace")
_IMPACTS: tuple[Impact, ...] = ("high", "medium", "low")
_CATEGORIES: tuple[Category, ...] = ("skills", "experience", "keywords", "formatting")


def fallback_insights() -> ContextualInsights:
    """Fixed insights for deterministic results, built fresh for every result."""
    return ContextualInsights(
        resume_strengths=["Well-structured format", "Clear experience presentation"],
        improvement_areas=["Keyword optimization", "ATS compatibility"],
        overall_tone="professional",
        experience_level="mid-level",
    )


def _cfg_int(path: str, default: int) -> int:
    try:
        return int(get_analysis_value(path, default))
    except (TypeError, ValueError):
        return default


def _cfg_float(path: str, default: float) -> float:
    try:
        return float(get_analysis_value(path, default))
    except (TypeError, ValueError):
        return default


def _locations() -> tuple[str, ...]:
    raw = get_analysis_value("fallback.locations", None)
    if isinstance(raw, list):
        clean = tuple(str(item).strip() for item in raw if str(item).strip())
        if clean:
            return clean
    return _DEFAULT_LOCATIONS


def _display_keyword(keyword: str) -> str:
    return keyword[:1].upper() + keyword[1:]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_match_score(matched_weight: int, total_job_keywords: int) -> int:
    """Overlap score with the encouraging floor applied."""
    floor = _cfg_int("fallback.score_floor", 25)
    ceiling = _cfg_int("fallback.score_ceiling", 100)
    factor = _cfg_float("fallback.weight_factor", 0.1)
    denominator = max(total_job_keywords * factor, 1)
    raw_score = min(ceiling, _round_half_up(matched_weight / denominator * 100))
    return max(floor, raw_score)


def build_fallback_suggestions(
    missing_keywords: Sequence[str],
    *,
    rng: random.Random,
) -> list[Suggestion]:
    limit = _cfg_int("fallback.suggestion_limit", 4)
    locations = _locations()
    batch = uuid.uuid4().hex[:12]
    suggestions: list[Suggestion] = []
    for index, keyword in enumerate(missing_keywords[:limit]):
        location = rng.choice(locations)
        suggestions.append(
            Suggestion(
                id=f"fallback_{index}_{batch}",
                type=rng.choice(_SUGGESTION_TYPES),
                keyword=keyword,
                location=location,
                original_text=f"[Original text from {location.lower()}]",
                suggested_text=f"[Enhanced text including {keyword}]",
                reason=f'Adding "{keyword}" will improve ATS matching as it appears in the job description',
                impact=rng.choice(_IMPACTS),
                category=rng.choice(_CATEGORIES),
            )
        )
    return suggestions


def fallback_analyze(
    resume_text: str,
    job_description: str,
    *,
    rng: random.Random | None = None,
    vocabulary: KeywordVocabulary | None = None,
) -> AnalysisResult:
    """Score a resume against a job description with plain whole-word matching.

    Used whenever the language-model analyzer is unavailable. Never raises for
    string inputs; an empty job description yields the floor score.
    """
    resume_lower = (resume_text or "").lower()
    job_lower = (job_description or "").lower()
    rng = rng or random.Random()

    matched: list[KeywordMatch] = []
    missing: list[str] = []
    for keyword in extract_candidate_keywords(job_lower, vocabulary=vocabulary):
        job_matches = count_whole_word(keyword, job_lower)
        if job_matches == 0:
            continue
        resume_matches = count_whole_word(keyword, resume_lower)
        if resume_matches > 0:
            matched.append(KeywordMatch(keyword=_display_keyword(keyword), count=resume_matches))
        else:
            missing.append(_display_keyword(keyword))

    # sorted() is stable: equal counts keep discovery order
    matched = sorted(matched, key=lambda item: item.count, reverse=True)

    total_job_keywords = len(job_description_tokens(job_lower, vocabulary=vocabulary))
    matched_weight = sum(item.count for item in matched)
    match_score = compute_match_score(matched_weight, total_job_keywords)

    suggestions = build_fallback_suggestions(missing, rng=rng)

    kinds = Counter(classify_keyword(item.keyword, vocabulary=vocabulary) for item in matched)
    logger.info(
        "fallback_analysis_completed score=%s matched=%s matched_technical=%s matched_soft=%s missing=%s job_tokens=%s",
        match_score,
        len(matched),
        kinds["technical"],
        kinds["soft_skill"],
        len(missing),
        total_job_keywords,
    )

    return AnalysisResult(
        match_score=match_score,
        matched_keywords=matched[: _cfg_int("fallback.matched_limit", 8)],
        missing_keywords=missing[: _cfg_int("fallback.missing_limit", 6)],
        suggestions=suggestions,
        contextual_insights=fallback_insights(),
        resume_text=resume_text or "",
    )
