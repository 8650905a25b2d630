import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from interview_coach.features.field_classifier import InvalidInputError  # noqa: E402
from interview_coach.features.question_bank import (  # noqa: E402
    build_question_set,
    clamp_question_count,
    normalize_question,
    templates_for,
)


class QuestionBankTests(unittest.TestCase):
    def test_intern_field_returns_requested_number_of_unique_questions(self):
        question_set = build_question_set("Marketing Intern", 5)
        self.assertEqual(question_set.category, "intern")
        self.assertEqual(len(question_set.questions), 5)
        self.assertEqual(len(set(question_set.questions)), 5)
        for question in question_set.questions:
            self.assertTrue(question.endswith("?"))
            self.assertIn(question, templates_for("intern", "Marketing Intern"))

    def test_length_never_exceeds_available_templates(self):
        available = templates_for("generic", "Registered Nurse")
        question_set = build_question_set("Registered Nurse", 50)
        self.assertEqual(question_set.category, "generic")
        self.assertEqual(len(question_set.questions), len(available))
        self.assertEqual(sorted(question_set.questions), sorted(available))

    def test_generic_templates_interpolate_the_field(self):
        questions = templates_for("generic", "Chef")
        self.assertTrue(any("Chef" in question for question in questions))
        self.assertFalse(any("{field}" in question for question in questions))

    def test_selection_is_deterministic_for_identical_inputs(self):
        first = build_question_set("Software Engineer", 7)
        second = build_question_set("  software   engineer ", 7)
        self.assertEqual(first.questions, second.questions)

    def test_seed_replaces_selection_key_deterministically(self):
        seeded = build_question_set("Software Engineer", 20, seed=42)
        again = build_question_set("Software Engineer", 20, seed=42)
        self.assertEqual(seeded.questions, again.questions)
        self.assertEqual(sorted(seeded.questions), sorted(templates_for("software", "Software Engineer")))

    def test_blank_field_is_rejected(self):
        with self.assertRaises(InvalidInputError):
            build_question_set("   ", 3)

    def test_clamp_question_count(self):
        cases = [
            (5, 5),
            ("5", 5),
            (3.6, 4),
            (-5, 1),
            (50, 20),
            (0, 7),
            ("abc", 7),
            (None, 7),
            (float("inf"), 20),
        ]
        for raw, expected in cases:
            with self.subTest(raw=raw):
                self.assertEqual(clamp_question_count(raw), expected)

    def test_normalize_question_appends_question_mark(self):
        self.assertEqual(normalize_question("Explain the  JVM heap."), "Explain the JVM heap?")
        self.assertEqual(normalize_question('"Why Java?"'), "Why Java?")
        self.assertEqual(normalize_question("   "), "")


if __name__ == "__main__":
    unittest.main()
