import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from prepscore.features.format_detector import detect_format, has_image_marker  # noqa: E402
from prepscore.normalize.text import normalize_text  # noqa: E402
from tests.resume_samples import (  # noqa: E402
    EUROPASS_RESUME,
    INDIAN_RESUME,
    TEMPLATE_RESUME,
    WESTERN_RESUME,
)


def _detect(text: str, raw: bytes = b""):
    return detect_format(raw, normalize_text(text))


class FormatDetectorTests(unittest.TestCase):
    def test_western_resume_with_summary_and_standard_order(self):
        fmt = _detect(WESTERN_RESUME)
        self.assertEqual(fmt.kind, "western")
        self.assertEqual(fmt.confidence, 35)
        self.assertTrue(fmt.indicators.has_summary)
        self.assertEqual(fmt.indicators.language, "english")
        self.assertEqual(
            fmt.indicators.section_order,
            ["summary", "experience", "education", "skills", "projects"],
        )

    def test_indian_resume_with_declaration_and_markers(self):
        fmt = _detect(INDIAN_RESUME)
        self.assertEqual(fmt.kind, "indian")
        self.assertGreaterEqual(fmt.confidence, 60)
        self.assertTrue(fmt.indicators.has_declaration)
        self.assertEqual(
            fmt.indicators.indian_markers,
            ["father's name", "marital status", "permanent address", "languages known"],
        )

    def test_europass_resume_with_personal_information_block(self):
        fmt = _detect(EUROPASS_RESUME)
        self.assertEqual(fmt.kind, "europass")
        self.assertEqual(fmt.confidence, 80)
        self.assertEqual(len(fmt.indicators.europass_markers), 4)

    def test_template_resume_with_spacing_and_uniform_bullets(self):
        fmt = _detect(TEMPLATE_RESUME)
        self.assertEqual(fmt.kind, "template")
        self.assertTrue(fmt.indicators.template_spacing)
        self.assertEqual(fmt.scores["template"], 35)

    def test_spanish_headers_bias_towards_europass(self):
        text = "Experiencia\nDesarrollador en Madrid\nEducación\nIngeniería\nHabilidades\nPython"
        fmt = _detect(text)
        self.assertEqual(fmt.indicators.language, "spanish")
        self.assertEqual(fmt.indicators.language_hits, {"spanish": 3})
        self.assertEqual(fmt.scores["europass"], 15)

    def test_language_bias_follows_the_dominant_header_language(self):
        text = "Experience\nDeveloper in Madrid\nEducation\nEngineering degree\nHabilidades\nPython"
        fmt = _detect(text)
        self.assertEqual(fmt.indicators.language, "english")
        self.assertEqual(fmt.indicators.language_hits, {"english": 2, "spanish": 1})
        self.assertEqual(fmt.scores["europass"], 0)

    def test_weak_signals_stay_unknown(self):
        fmt = _detect("Jane Doe\nSkills\nPython, SQL")
        self.assertEqual(fmt.kind, "unknown")
        self.assertLessEqual(max(fmt.scores.values()), 30)

    def test_empty_document_is_unknown(self):
        fmt = _detect("")
        self.assertEqual(fmt.kind, "unknown")
        self.assertEqual(fmt.confidence, 0)

    def test_embedded_image_penalizes_western(self):
        without_photo = _detect(WESTERN_RESUME)
        with_photo = _detect(WESTERN_RESUME, raw=b"PK\x03\x04 word/media/image1.png")
        self.assertTrue(with_photo.indicators.has_photo)
        self.assertEqual(with_photo.scores["western"], without_photo.scores["western"] - 10)
        self.assertEqual(with_photo.scores["europass"], without_photo.scores["europass"] + 25)

    def test_image_markers(self):
        self.assertTrue(has_image_marker(b"<< /Type /XObject /Subtype /Image >>"))
        self.assertTrue(has_image_marker(b"\xff\xd8\xff\xe0\x00\x10JFIF"))
        self.assertFalse(has_image_marker(b"%PDF-1.4 /Type /Page"))
        self.assertFalse(has_image_marker(b""))

    def test_strongest_family_wins_over_competing_markers(self):
        text = (
            "Curriculum Vitae\nNationality: Indian\nFather's Name: A\nMarital Status: Single\n"
            "Permanent Address: Pune\nLanguages Known: Hindi\nDeclaration\nI hereby declare this."
        )
        fmt = _detect(text)
        self.assertEqual(fmt.scores["indian"], 90)
        self.assertEqual(fmt.scores["europass"], 40)
        self.assertEqual(fmt.kind, "indian")


if __name__ == "__main__":
    unittest.main()
