import os
import sys
import time
import unittest
from dataclasses import replace
from unittest.mock import patch
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep API tests deterministic and fast by default.
os.environ.setdefault("INTERVIEW_LLM_ENABLED", "0")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

from fastapi.testclient import TestClient  # noqa: E402

from interview_coach.api.v1 import analyze as analyze_routes  # noqa: E402
from interview_coach.main import app  # noqa: E402
from interview_coach.core.config import settings  # noqa: E402
from interview_coach.schemas.analysis import AnalysisResult, Mistake  # noqa: E402
from interview_coach.services import analysis_service  # noqa: E402


class AnalyzeApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def _assert_analysis_shape(self, analysis: dict) -> None:
        self.assertIsInstance(analysis["rating"], (int, float))
        self.assertGreaterEqual(analysis["rating"], 0)
        self.assertLessEqual(analysis["rating"], 10)
        self.assertIsInstance(analysis["mistakes"], list)
        for mistake in analysis["mistakes"]:
            self.assertRegex(mistake["timestamp"], r"^\d{1,2}:\d{2}$")
            self.assertTrue(mistake["text"])
        self.assertIsInstance(analysis["tips"], list)
        self.assertTrue(analysis["summary"])

    def test_no_video_request_returns_feedback_framework(self):
        response = self.client.post("/api/analyze", json={"field": "Software Engineer"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["source"], "no-video-detected")
        self.assertFalse(body["processed"])
        self.assertEqual(body["analysis"]["rating"], 0)
        self.assertEqual(len(body["analysis"]["mistakes"]), 1)
        self.assertEqual(len(body["analysis"]["tips"]), 5)
        self.assertIn("Software Engineer", body["analysis"]["summary"])

    def test_missing_field_defaults_to_general(self):
        response = self.client.post("/api/analyze", json={})
        body = response.json()
        self.assertEqual(body["field"], "general")
        self.assertEqual(body["category"], "generic")

    def test_has_video_without_details_returns_baseline(self):
        response = self.client.post("/api/analyze", json={"field": "Java Engineer", "hasVideo": True})
        body = response.json()
        self.assertEqual(body["source"], "baseline")
        self.assertEqual(body["category"], "java")
        self.assertEqual(body["analysis"]["rating"], 7.5)
        self._assert_analysis_shape(body["analysis"])

    def test_transcript_is_scored_heuristically(self):
        response = self.client.post(
            "/api/analyze",
            json={"field": "Software Engineer", "transcript": ""},
        )
        body = response.json()
        self.assertEqual(body["source"], "transcript-heuristics")
        self.assertLessEqual(body["analysis"]["rating"], 2)
        self.assertEqual(len(body["analysis"]["mistakes"]), 1)
        self.assertIn("No speech detected", body["analysis"]["mistakes"][0]["text"])
        self.assertGreaterEqual(len(body["analysis"]["tips"]), 3)

    def test_file_identity_is_deterministic(self):
        payload = {"field": "Java Developer", "hasVideo": True, "filename": "a.mp4", "size": 10485760}
        first = self.client.post("/api/analyze", json=payload).json()
        second = self.client.post("/api/analyze", json=payload).json()
        self.assertEqual(first["source"], "file-identity")
        self.assertEqual(first["analysis"], second["analysis"])
        self._assert_analysis_shape(first["analysis"])

    def test_ai_analysis_is_preferred_when_available(self):
        ai_result = AnalysisResult(
            rating=8,
            mistakes=[Mistake(timestamp="0:42", text="Trailed off at the end")],
            tips=["Finish with the result"],
            summary="Clear and structured",
        )
        with patch.object(analysis_service, "llm_enabled", return_value=True), patch.object(
            analysis_service, "analyze_transcript_llm", return_value=ai_result
        ):
            response = self.client.post(
                "/api/analyze",
                json={"field": "Chef", "transcript": "I ran a kitchen of twelve cooks for three years."},
            )
        body = response.json()
        self.assertEqual(body["source"], "ai-analysis")
        self.assertEqual(body["analysis"]["rating"], 8)
        self.assertEqual(body["analysis"]["mistakes"][0]["timestamp"], "0:42")

    def test_ai_failure_falls_back_to_heuristics(self):
        with patch.object(analysis_service, "llm_enabled", return_value=True), patch.object(
            analysis_service, "analyze_transcript_llm", return_value=None
        ):
            response = self.client.post(
                "/api/analyze",
                json={"field": "Chef", "transcript": "I ran a kitchen of twelve cooks for three years."},
            )
        body = response.json()
        self.assertEqual(body["source"], "transcript-heuristics")
        self.assertEqual(body["analysis"]["rating"], 4)

    def test_video_upload_without_transcription_uses_file_identity(self):
        files = {"video": ("answer.mp4", b"\x00\x00\x00\x18ftypmp42" * 64, "video/mp4")}
        response = self.client.post("/api/analyze/video", data={"field": "UX Designer"}, files=files)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["source"], "file-identity")
        self.assertEqual(body["category"], "design")
        self._assert_analysis_shape(body["analysis"])
        self.assertIn("answer.mp4", body["analysis"]["summary"])

    def test_video_upload_with_transcript_is_scored(self):
        transcript = "um so like I uh did some stuff you know and um it was like fine I guess so yeah um uh basically it worked right and that was it"
        with patch.object(analysis_service, "llm_enabled", return_value=True), patch.object(
            analysis_service, "transcribe_media", return_value=transcript
        ), patch.object(analysis_service, "analyze_transcript_llm", return_value=None):
            response = self.client.post(
                "/api/analyze/video",
                data={"field": "Chef"},
                files={"video": ("answer.webm", b"webm-bytes", "video/webm")},
            )
        body = response.json()
        self.assertEqual(body["source"], "transcript-heuristics")
        self.assertEqual(body["analysis"]["rating"], 6)

    def test_video_upload_validation(self):
        response = self.client.post("/api/analyze/video", data={"field": "Chef"})
        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            "/api/analyze/video",
            data={"field": "Chef"},
            files={"video": ("notes.exe", b"MZ\x90\x00", "application/octet-stream")},
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            "/api/analyze/video",
            data={"field": "Chef"},
            files={"video": ("empty.mp4", b"", "video/mp4")},
        )
        self.assertEqual(response.status_code, 400)

    def test_slow_ai_analysis_times_out_to_heuristics(self):
        def slow_analysis(*_args, **_kwargs):
            time.sleep(0.5)
            return AnalysisResult(
                rating=9,
                mistakes=[Mistake(timestamp="0:01", text="late")],
                tips=["late"],
                summary="late",
            )

        with patch.object(analysis_service, "settings", replace(settings, ai_timeout_seconds=0.05)), patch.object(
            analysis_service, "llm_enabled", return_value=True
        ), patch.object(analysis_service, "analyze_transcript_llm", side_effect=slow_analysis):
            response = self.client.post(
                "/api/analyze",
                json={"field": "Chef", "transcript": "I ran a kitchen of twelve cooks for three years."},
            )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["source"], "transcript-heuristics")
        self.assertEqual(body["analysis"]["rating"], 4)

    def test_video_upload_over_size_cap_is_rejected(self):
        with patch.object(analyze_routes, "settings", replace(settings, max_upload_mb=1)):
            response = self.client.post(
                "/api/analyze/video",
                data={"field": "Chef"},
                files={"video": ("big.mp4", b"\x00" * (1024 * 1024 + 1), "video/mp4")},
            )
        self.assertEqual(response.status_code, 413)

    def test_video_upload_rejects_overlong_field(self):
        response = self.client.post(
            "/api/analyze/video",
            data={"field": "Chef " * 200},
            files={"video": ("answer.mp4", b"mp4-bytes", "video/mp4")},
        )
        self.assertEqual(response.status_code, 422)


if __name__ == "__main__":
    unittest.main()
