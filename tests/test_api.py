import sys
import unittest
from io import BytesIO
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch
from zipfile import ZipFile

from docx import Document as DocxDocument
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from prepscore.main import app  # noqa: E402
from prepscore.parsing import DOCX_MIME  # noqa: E402
from prepscore.services import analysis_service  # noqa: E402
from tests.resume_samples import (  # noqa: E402
    INDIAN_RESUME,
    REACT_ANSWER,
    REACT_QUESTION,
    WESTERN_JD,
    WESTERN_RESUME,
)


def _docx_upload(text: str) -> dict:
    document = DocxDocument()
    for line in text.splitlines():
        document.add_paragraph(line)
    buffer = BytesIO()
    document.save(buffer)
    return {"file": ("resume.docx", buffer.getvalue(), DOCX_MIME)}


class HealthApiTests(unittest.TestCase):
    def test_health_reports_ontology_version(self):
        client = TestClient(app)
        response = client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy", "ontology_version": "1.0"})


class ResumeApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_detect_format_from_docx_upload(self):
        response = self.client.post("/v1/resume/detect-format", files=_docx_upload(INDIAN_RESUME))
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["kind"], "indian")
        self.assertTrue(body["indicators"]["has_declaration"])

    def test_extract_from_docx_upload(self):
        response = self.client.post("/v1/resume/extract", files=_docx_upload(INDIAN_RESUME))
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["contact"]["name"], "Ravi Kumar")
        self.assertEqual(body["experience"][0]["company"], "Infosys")
        self.assertNotIn("hereby", body["token_counts"])

    def test_unsupported_mime_type_is_415(self):
        files = {"file": ("resume.txt", b"Jane Doe\nPython", "text/plain")}
        response = self.client.post("/v1/resume/extract", files=files)
        self.assertEqual(response.status_code, 415)

    def test_undecodable_docx_is_422(self):
        buffer = BytesIO()
        with ZipFile(buffer, "w") as archive:
            archive.writestr("word/document.xml", "<broken")
        files = {"file": ("resume.docx", buffer.getvalue(), DOCX_MIME)}
        response = self.client.post("/v1/resume/extract", files=files)
        self.assertEqual(response.status_code, 422)

    def test_oversized_upload_is_413(self):
        with patch("prepscore.api.v1.analysis.settings", SimpleNamespace(max_upload_bytes=16)):
            response = self.client.post("/v1/resume/detect-format", files=_docx_upload(INDIAN_RESUME))
        self.assertEqual(response.status_code, 413)


class ScoringApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)
        cls.parsed = analysis_service.extract_text(WESTERN_RESUME).model_dump(mode="json")

    def test_ats_score(self):
        response = self.client.post(
            "/v1/ats/score",
            json={"parsed": self.parsed, "job_description_text": WESTERN_JD},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["total"], 74)
        self.assertEqual(body["role"], "software")

    def test_ats_score_rejects_unknown_role_hint(self):
        response = self.client.post(
            "/v1/ats/score",
            json={"parsed": self.parsed, "job_description_text": WESTERN_JD, "role_hint": "astronaut"},
        )
        self.assertEqual(response.status_code, 400)

    def test_skills_match_with_candidate_list(self):
        response = self.client.post(
            "/v1/skills/match",
            json={"required": ["React"], "candidate_skills": ["Vue"]},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["match_score"], 70)

    def test_skills_match_with_parsed_resume(self):
        response = self.client.post(
            "/v1/skills/match",
            json={"required": ["React", "MySQL"], "parsed": self.parsed},
        )
        self.assertEqual(response.status_code, 200)
        verdicts = [item["verdict"] for item in response.json()["items"]]
        self.assertEqual(verdicts, ["exact", "transferable"])

    def test_skills_match_requires_candidates(self):
        response = self.client.post("/v1/skills/match", json={"required": ["React"]})
        self.assertEqual(response.status_code, 422)

    def test_skills_match_rejects_bad_preferred_weight(self):
        response = self.client.post(
            "/v1/skills/match",
            json={"required": ["React"], "candidate_skills": ["React"], "preferred_weight": 2},
        )
        self.assertEqual(response.status_code, 400)

    def test_interview_evaluate(self):
        payload = {
            "question": {"text": REACT_QUESTION, "expected_key_points": ["useState", "useEffect", "rerender"]},
            "answer_text": REACT_ANSWER,
            "interview_type": "technical",
        }
        response = self.client.post("/v1/interview/evaluate", json=payload)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["dimensions"]["accuracy"], 67)
        self.assertFalse(body["needs_follow_up"])

    def test_interview_evaluate_rejects_unknown_type(self):
        payload = {"question": {"text": "Hi"}, "answer_text": "Hello", "interview_type": "trivia"}
        response = self.client.post("/v1/interview/evaluate", json=payload)
        self.assertEqual(response.status_code, 400)


if __name__ == "__main__":
    unittest.main()
