import os
import random
import sys
import unittest
from pathlib import Path

os.environ.setdefault("ANALYTICS_ENABLED", "0")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.keyword_extractor import count_whole_word  # noqa: E402
from app.services.fallback_analyzer import (  # noqa: E402
    _round_half_up,
    compute_match_score,
    fallback_analyze,
    fallback_insights,
)

LOCATIONS = {"Skills section", "Experience section", "Summary section", "Projects section"}

SAMPLE_PAIRS = [
    ("I have experience with JavaScript and React.", "Looking for a developer skilled in JavaScript, React, and Leadership."),
    ("", ""),
    ("Python Python python Django AWS mentoring", "Python engineer: Django, Flask, AWS, Docker. Mentoring juniors. Python!"),
    ("Node.js backend, node.js services, PostgreSQL", "Node.js and PostgreSQL developer with Redis"),
    ("Leadership, problem solving and time management.", "We value problem solving, leadership, agile and scrum."),
    ("Random text ### with $$$ symbols", "!!! ??? ..."),
    ("Only resume keywords: kubernetes terraform", ""),
    ("", "Senior Java engineer with Spring and Kafka"),
]


class FallbackAnalyzerTests(unittest.TestCase):
    def test_reference_scenario(self):
        result = fallback_analyze(
            "I have experience with JavaScript and React.",
            "Looking for a developer skilled in JavaScript, React, and Leadership.",
            rng=random.Random(1),
        )
        matched = [(item.keyword, item.count) for item in result.matched_keywords]
        self.assertIn(("Javascript", 1), matched)
        self.assertIn(("React", 1), matched)
        self.assertIn("Leadership", result.missing_keywords)
        self.assertEqual(result.missing_keywords, ["Leadership", "Looking", "Developer", "Skilled"])
        # 2 matched occurrences against 6 job tokens: 2 / max(0.6, 1) * 100, capped at 100
        self.assertEqual(result.match_score, 100)
        self.assertEqual(result.resume_text, "I have experience with JavaScript and React.")

    def test_empty_job_description_returns_floor(self):
        result = fallback_analyze("Experienced Python developer", "")
        self.assertEqual(result.match_score, 25)
        self.assertEqual(result.matched_keywords, [])
        self.assertEqual(result.missing_keywords, [])
        self.assertEqual(result.suggestions, [])

    def test_never_raises_and_score_within_bounds(self):
        for resume, job in SAMPLE_PAIRS:
            result = fallback_analyze(resume, job, rng=random.Random(0))
            self.assertGreaterEqual(result.match_score, 25)
            self.assertLessEqual(result.match_score, 100)

    def test_matched_keywords_occur_in_both_texts(self):
        for resume, job in SAMPLE_PAIRS:
            result = fallback_analyze(resume, job)
            for item in result.matched_keywords:
                keyword = item.keyword.lower()
                self.assertGreaterEqual(count_whole_word(keyword, job), 1, msg=keyword)
                self.assertEqual(count_whole_word(keyword, resume), item.count, msg=keyword)

    def test_missing_keywords_occur_only_in_job_description(self):
        for resume, job in SAMPLE_PAIRS:
            result = fallback_analyze(resume, job)
            for keyword in result.missing_keywords:
                self.assertGreaterEqual(count_whole_word(keyword.lower(), job), 1, msg=keyword)
                self.assertEqual(count_whole_word(keyword.lower(), resume), 0, msg=keyword)

    def test_matched_keywords_sorted_and_unique(self):
        for resume, job in SAMPLE_PAIRS:
            result = fallback_analyze(resume, job)
            counts = [item.count for item in result.matched_keywords]
            self.assertEqual(counts, sorted(counts, reverse=True))
            normalized = [item.keyword.lower() for item in result.matched_keywords]
            self.assertEqual(len(normalized), len(set(normalized)))

    def test_ties_keep_discovery_order(self):
        tied = fallback_analyze("python javascript", "python javascript")
        self.assertEqual([item.keyword for item in tied.matched_keywords], ["Javascript", "Python"])

        weighted = fallback_analyze("python python javascript", "python javascript")
        self.assertEqual(
            [(item.keyword, item.count) for item in weighted.matched_keywords],
            [("Python", 2), ("Javascript", 1)],
        )

    def test_regex_characters_in_vocabulary_match_literally(self):
        result = fallback_analyze("Built node.js services", "Node.js developer")
        self.assertIn("Node.js", [item.keyword for item in result.matched_keywords])

    def test_presentation_truncation(self):
        matched_terms = "javascript python java react typescript angular vue sql mysql docker"
        missing_terms = "kubernetes terraform jenkins html css sass bootstrap"
        result = fallback_analyze(matched_terms, f"{matched_terms} {missing_terms}", rng=random.Random(5))
        self.assertEqual(len(result.matched_keywords), 8)
        self.assertEqual(len(result.missing_keywords), 6)
        self.assertEqual(result.missing_keywords[0], "Kubernetes")
        self.assertEqual(len(result.suggestions), 4)

    def test_score_scales_with_matched_weight(self):
        filler = " ".join(f"word{i}" for i in range(49))
        job = f"python {filler}"
        self.assertEqual(fallback_analyze("I know python", job).match_score, 25)
        self.assertEqual(fallback_analyze("python python python", job).match_score, 60)
        missing = fallback_analyze("python", job).missing_keywords
        self.assertEqual(missing, ["Word0", "Word1", "Word2", "Word3", "Word4", "Word5"])

    def test_compute_match_score(self):
        self.assertEqual(compute_match_score(0, 0), 25)
        self.assertEqual(compute_match_score(5, 100), 50)
        self.assertEqual(compute_match_score(40, 10), 100)
        self.assertEqual(compute_match_score(1, 100), 25)

    def test_round_half_up(self):
        self.assertEqual(_round_half_up(62.5), 63)
        self.assertEqual(_round_half_up(2.5), 3)
        self.assertEqual(_round_half_up(2.49), 2)

    def test_suggestions_use_fixed_enumerations(self):
        result = fallback_analyze("Nothing relevant here", "Kubernetes Terraform Jenkins Golang Kafka", rng=random.Random(11))
        self.assertEqual(len(result.suggestions), 4)
        self.assertEqual([s.keyword for s in result.suggestions], result.missing_keywords[:4])
        ids = [s.id for s in result.suggestions]
        self.assertEqual(len(ids), len(set(ids)))
        for suggestion in result.suggestions:
            self.assertIn(suggestion.location, LOCATIONS)
            self.assertIn(suggestion.type, {"add", "enhance", "replace"})
            self.assertIn(suggestion.impact, {"high", "medium", "low"})
            self.assertIn(suggestion.category, {"skills", "experience", "keywords", "formatting"})
            self.assertEqual(suggestion.original_text, f"[Original text from {suggestion.location.lower()}]")
            self.assertEqual(suggestion.suggested_text, f"[Enhanced text including {suggestion.keyword}]")
            self.assertIn(suggestion.keyword, suggestion.reason)

    def test_seeded_random_source_is_reproducible(self):
        def metadata(seed: int):
            result = fallback_analyze("nothing", "Kubernetes Terraform Jenkins Golang", rng=random.Random(seed))
            return [(s.type, s.location, s.impact, s.category) for s in result.suggestions]

        self.assertEqual(metadata(42), metadata(42))

    def test_fixed_contextual_insights(self):
        result = fallback_analyze("resume", "job description")
        self.assertEqual(result.contextual_insights, fallback_insights())
        insights = result.contextual_insights.model_dump(by_alias=True)
        self.assertEqual(insights["resumeStrengths"], ["Well-structured format", "Clear experience presentation"])
        self.assertEqual(insights["improvementAreas"], ["Keyword optimization", "ATS compatibility"])
        self.assertEqual(insights["overallTone"], "professional")
        self.assertEqual(insights["experienceLevel"], "mid-level")

    def test_results_do_not_share_insight_lists(self):
        first = fallback_analyze("python", "python")
        first.contextual_insights.resume_strengths.append("Edited by caller")
        first.contextual_insights.improvement_areas.clear()

        second = fallback_analyze("java", "java")
        self.assertEqual(
            second.contextual_insights.resume_strengths,
            ["Well-structured format", "Clear experience presentation"],
        )
        self.assertEqual(second.contextual_insights.improvement_areas, ["Keyword optimization", "ATS compatibility"])
        self.assertIsNot(first.contextual_insights, second.contextual_insights)

    def test_completion_log_reports_keyword_kinds(self):
        with self.assertLogs("app.services.fallback_analyzer", level="INFO") as logs:
            fallback_analyze(
                "JavaScript, React and leadership",
                "JavaScript React leadership communication",
            )
        line = next(item for item in logs.output if "fallback_analysis_completed" in item)
        self.assertIn("matched=3", line)
        self.assertIn("matched_technical=2", line)
        self.assertIn("matched_soft=1", line)

    def test_serializes_with_camel_case_field_names(self):
        payload = fallback_analyze("python", "python").model_dump(by_alias=True)
        self.assertEqual(
            set(payload),
            {"matchScore", "matchedKeywords", "missingKeywords", "suggestions", "contextualInsights", "resumeText"},
        )


if __name__ == "__main__":
    unittest.main()
