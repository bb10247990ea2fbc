import json
import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.taxonomy import get_default_vocabulary  # noqa: E402
from app.taxonomy.local_taxonomy import LocalVocabulary  # noqa: E402


class VocabularyTests(unittest.TestCase):
    def test_default_vocabulary_lists(self):
        vocab = get_default_vocabulary()
        self.assertEqual(vocab.technical_keywords()[:3], ("javascript", "python", "java"))
        self.assertIn("node.js", vocab.technical_keywords())
        self.assertIn("problem solving", vocab.soft_skill_keywords())
        self.assertIn("leadership", vocab.soft_skill_keywords())
        self.assertEqual(
            vocab.stopwords(),
            frozenset(
                {"this", "that", "with", "from", "they", "have", "will", "been", "your", "their", "would", "should", "could"}
            ),
        )

    def test_custom_file_is_lowercased_and_deduplicated(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "keywords.json"
            path.write_text(
                json.dumps({"technical": ["Rust", "rust", " Go "], "soft_skills": ["Empathy"], "stopwords": ["THE"]}),
                encoding="utf-8",
            )
            vocab = LocalVocabulary(path)
        self.assertEqual(vocab.technical_keywords(), ("rust", "go"))
        self.assertEqual(vocab.soft_skill_keywords(), ("empathy",))
        self.assertEqual(vocab.stopwords(), frozenset({"the"}))


if __name__ == "__main__":
    unittest.main()
