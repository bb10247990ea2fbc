from .keyword_extractor import (
    classify_keyword,
    count_whole_word,
    extract_candidate_keywords,
    job_description_tokens,
)

__all__ = [
    "classify_keyword",
    "count_whole_word",
    "extract_candidate_keywords",
    "job_description_tokens",
]
