import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from prepscore.core.errors import ConfigError  # noqa: E402
from prepscore.schemas.interview import AnswerEvaluation, InterviewQuestion  # noqa: E402
from prepscore.services.interview_session import InterviewSession  # noqa: E402


def _evaluation(score: int) -> AnswerEvaluation:
    return AnswerEvaluation(
        interview_type="technical",
        dimensions={"clarity": score, "accuracy": score, "depth": score, "structure": score, "relevance": score},
        weights={"clarity": 0.25, "accuracy": 0.3, "depth": 0.2, "structure": 0.15, "relevance": 0.1},
        turn_score=score,
        needs_follow_up=False,
    )


class InterviewSessionTests(unittest.TestCase):
    def test_topics_move_from_struggling_to_strong(self):
        session = InterviewSession("technical")
        question = InterviewQuestion(text="Explain hooks.", topic="React")
        session.record(question, _evaluation(55))
        self.assertEqual(session.struggling_topics, ["react"])

        session.record(question, _evaluation(85))
        self.assertEqual(session.struggling_topics, [])
        self.assertEqual(session.strong_topics, ["react"])

    def test_topicless_questions_use_general(self):
        session = InterviewSession("coding")
        turn = session.record(InterviewQuestion(text="Reverse a list."), _evaluation(70))
        self.assertEqual(turn.topic, "general")
        self.assertEqual(session.struggling_topics, [])
        self.assertEqual(session.strong_topics, [])

    def test_difficulty_follows_recent_scores(self):
        session = InterviewSession("technical")
        self.assertEqual(session.difficulty, "medium")
        for score in (90, 85, 80):
            session.record(InterviewQuestion(text="q"), _evaluation(score))
        self.assertEqual(session.difficulty, "hard")
        session.record(InterviewQuestion(text="q"), _evaluation(40))
        self.assertEqual(session.difficulty, "medium")
        session.record(InterviewQuestion(text="q"), _evaluation(30))
        self.assertEqual(session.difficulty, "easy")

    def test_trend_keeps_last_ten_scores(self):
        session = InterviewSession("technical")
        for score in range(50, 62):
            session.record(InterviewQuestion(text="q"), _evaluation(score))
        self.assertEqual(session.performance_trend, list(range(52, 62)))

        summary = session.summary()
        self.assertEqual(summary.turns, 12)
        self.assertEqual(summary.average_score, 55.5)
        self.assertEqual(summary.performance_trend, list(range(52, 62)))

    def test_unknown_interview_type_is_rejected(self):
        with self.assertRaises(ConfigError):
            InterviewSession("trivia")


if __name__ == "__main__":
    unittest.main()
