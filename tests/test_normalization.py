import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from prepscore.normalize.headers import classify_header, section_patterns  # noqa: E402
from prepscore.normalize.jd import keyword_histogram, parse_job_description  # noqa: E402
from prepscore.normalize.text import (  # noqa: E402
    lemmatize,
    normalize_text,
    strip_declaration,
    tokenize,
)
from tests.resume_samples import INDIAN_RESUME  # noqa: E402


class NormalizeTextTests(unittest.TestCase):
    def test_normalization_is_idempotent(self):
        messy = "\n\n  Jane   Doe \r\n\r\n\n  Ｆｕｌｌ   width  text\t\n\n"
        once = normalize_text(messy)
        twice = normalize_text(once.text)
        self.assertEqual(once, twice)
        self.assertEqual(once.lines, ("Jane Doe", "", "", "Full width text"))

    def test_empty_input_yields_empty_text(self):
        for value in ("", None, "   \n\t\n"):
            normalized = normalize_text(value)
            self.assertEqual(normalized.tokens, ())
            self.assertTrue(normalized.is_empty())
            self.assertEqual(normalized.token_count, 0)

    def test_tokens_drop_stopwords_and_keep_percentages(self):
        tokens = tokenize("Improved throughput by 35% while managing 12 services")
        self.assertEqual(tokens, ["improv", "throughput", "35%", "manag", "12", "service"])

    def test_lemmatize_is_conservative(self):
        self.assertEqual(lemmatize("running"), "run")
        self.assertEqual(lemmatize("stopped"), "stop")
        self.assertEqual(lemmatize("called"), "call")
        self.assertEqual(lemmatize("studies"), "study")
        self.assertEqual(lemmatize("skills"), "skill")
        self.assertEqual(lemmatize("class"), "class")
        self.assertEqual(lemmatize("status"), "status")
        self.assertEqual(lemmatize("bus"), "bus")

    def test_token_counts_are_sorted(self):
        counts = normalize_text("docker kubernetes Docker").token_counts()
        self.assertEqual(list(counts), ["docker", "kubernete"])
        self.assertEqual(counts["docker"], 2)


class SectionSliceTests(unittest.TestCase):
    def test_slice_stops_at_next_recognized_header(self):
        normalized = normalize_text("Jane Doe\nSkills\nPython, SQL\nEducation\nB.S. Physics, 2010")
        self.assertEqual(normalized.slice(section_patterns("skills")), "Python, SQL")

    def test_slice_keeps_inline_content_after_colon(self):
        normalized = normalize_text("Skills: Python, Go\nDocker\nProjects\nSomething")
        self.assertEqual(normalized.slice(section_patterns("skills")), "Python, Go\nDocker")

    def test_missing_section_returns_none(self):
        normalized = normalize_text("Jane Doe\nPython developer")
        self.assertIsNone(normalized.slice(section_patterns("education")))

    def test_headers_are_recognized_in_several_languages(self):
        self.assertEqual(classify_header("Experiencia laboral").language, "spanish")
        self.assertEqual(classify_header("Compétences techniques").section, "skills")
        self.assertEqual(classify_header("Berufserfahrung").language, "german")
        self.assertEqual(classify_header("शिक्षा").section, "education")
        self.assertIsNone(classify_header("Built five services with a team of experienced engineers"))


class DeclarationTests(unittest.TestCase):
    def test_strip_declaration_cuts_trailing_block(self):
        stripped = strip_declaration(INDIAN_RESUME)
        self.assertNotIn("hereby", stripped)
        self.assertNotIn("Signature", stripped)
        self.assertTrue(stripped.endswith("English, Hindi, Marathi"))

    def test_text_without_declaration_is_unchanged(self):
        text = "Jane Doe\nSkills\nPython"
        self.assertEqual(strip_declaration(text), text)


class JobDescriptionTests(unittest.TestCase):
    def test_keyword_histogram_counts_lemmas_and_keeps_surface_labels(self):
        frequencies, labels = keyword_histogram("Kubernetes at scale. Kubernetes operators, 5 years, 30%.")
        self.assertEqual(frequencies["kubernete"], 2)
        self.assertEqual(labels["kubernete"], "kubernetes")
        self.assertNotIn("5", frequencies)
        self.assertNotIn("30%", frequencies)

    def test_preferred_skills_follow_nice_to_have_markers(self):
        jd = parse_job_description(
            "Frontend Engineer\n"
            "Requirements:\n"
            "- React and TypeScript\n"
            "Nice to have:\n"
            "- GraphQL\n"
            "- Jest\n"
        )
        self.assertEqual(jd.role, "frontend")
        self.assertEqual(jd.required_skills, ["React", "TypeScript"])
        self.assertEqual(jd.preferred_skills, ["GraphQL", "Jest"])


if __name__ == "__main__":
    unittest.main()
