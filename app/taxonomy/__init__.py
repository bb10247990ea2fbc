from functools import lru_cache

from .local_taxonomy import LocalVocabulary
from .provider import KeywordVocabulary


@lru_cache(maxsize=1)
def get_default_vocabulary() -> KeywordVocabulary:
    return LocalVocabulary()


__all__ = ["KeywordVocabulary", "LocalVocabulary", "get_default_vocabulary"]
