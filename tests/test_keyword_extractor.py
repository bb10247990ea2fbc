import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.keyword_extractor import (  # noqa: E402
    classify_keyword,
    count_whole_word,
    extract_candidate_keywords,
    job_description_tokens,
)
from app.taxonomy import get_default_vocabulary  # noqa: E402


class KeywordExtractorTests(unittest.TestCase):
    def test_tokens_drop_short_words_and_stopwords_but_keep_duplicates(self):
        tokens = job_description_tokens("We WILL hire a Python dev with Python, SQL and their Docker skills.")
        self.assertEqual(tokens, ["hire", "python", "python", "docker", "skills"])

    def test_tokens_split_on_punctuation(self):
        self.assertEqual(job_description_tokens("Node.js/TypeScript"), ["node", "typescript"])

    def test_empty_job_description_has_no_tokens(self):
        self.assertEqual(job_description_tokens(""), [])

    def test_candidate_universe_is_ordered_and_unique(self):
        vocab = get_default_vocabulary()
        universe = extract_candidate_keywords("Python and Kubernetes plus Rust, Rust, Elixir")
        expected_prefix = list(vocab.technical_keywords()) + list(vocab.soft_skill_keywords())
        self.assertEqual(universe[: len(expected_prefix)], expected_prefix)
        self.assertEqual(universe[len(expected_prefix):], ["plus", "rust", "elixir"])
        self.assertEqual(len(universe), len(set(universe)))

    def test_classify_keyword(self):
        self.assertEqual(classify_keyword("Docker"), "technical")
        self.assertEqual(classify_keyword("Problem Solving"), "soft_skill")
        self.assertEqual(classify_keyword("warehouse"), "general")

    def test_count_whole_word_is_case_insensitive_and_bounded(self):
        text = "Python python PYTHON pythonic cpython"
        self.assertEqual(count_whole_word("python", text), 3)
        self.assertEqual(count_whole_word("java", "JavaScript and Java"), 1)

    def test_count_whole_word_escapes_regex_characters(self):
        self.assertEqual(count_whole_word("node.js", "node.js and nodexjs"), 1)
        self.assertEqual(count_whole_word("", "anything"), 0)
        self.assertEqual(count_whole_word("python", ""), 0)


if __name__ == "__main__":
    unittest.main()
