import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from prepscore.core.errors import ConfigError  # noqa: E402
from prepscore.normalize.jd import parse_job_description  # noqa: E402
from prepscore.semantic.proficiency import (  # noqa: E402
    infer_proficiency,
    meets_proficiency,
    skill_levels,
    validate_proficiency,
)
from prepscore.semantic.skill_matcher import match_skills  # noqa: E402
from prepscore.services import analysis_service  # noqa: E402
from prepscore.taxonomy import get_ontology  # noqa: E402


class ProficiencyInferenceTests(unittest.TestCase):
    def test_keywords_decide_the_level(self):
        self.assertEqual(infer_proficiency("Expert in Python"), "expert")
        self.assertEqual(infer_proficiency("Proficient with SQL"), "advanced")
        self.assertEqual(infer_proficiency("Working knowledge of Go"), "intermediate")
        self.assertEqual(infer_proficiency("Basic Rust"), "beginner")

    def test_stated_years_decide_the_level(self):
        self.assertEqual(infer_proficiency("Python (6 years)"), "expert")
        self.assertEqual(infer_proficiency("3 years of Java"), "advanced")
        self.assertEqual(infer_proficiency("2 years of Go"), "intermediate")
        self.assertEqual(infer_proficiency("0 years of Rust"), "beginner")

    def test_default_without_any_signal(self):
        self.assertEqual(infer_proficiency("Python"), "intermediate")
        self.assertEqual(infer_proficiency("leadership of Kubernetes rollouts"), "intermediate")

    def test_context_stays_on_the_mention_line(self):
        levels = skill_levels("Expert reviewer panel\nPython and Docker\nBasic Kubernetes", get_ontology())
        self.assertEqual(levels, {"Python": "intermediate", "Docker": "intermediate", "Kubernetes": "beginner"})

    def test_levels_are_ordered(self):
        self.assertTrue(meets_proficiency("expert", "advanced"))
        self.assertTrue(meets_proficiency("intermediate", "intermediate"))
        self.assertFalse(meets_proficiency("beginner", "intermediate"))
        self.assertEqual(validate_proficiency(" Advanced "), "advanced")
        with self.assertRaises(ConfigError):
            validate_proficiency("guru")


class JobDescriptionLevelTests(unittest.TestCase):
    def test_required_and_preferred_skills_carry_levels(self):
        jd = parse_job_description(
            "Backend Engineer\nRequirements:\n- Expert in Python\n- Docker\nNice to have:\n- Basic Kubernetes"
        )
        self.assertEqual(jd.required_skills, ["Python", "Docker"])
        self.assertEqual(jd.preferred_skills, ["Kubernetes"])
        self.assertEqual(jd.skill_levels, {"Python": "expert", "Docker": "intermediate", "Kubernetes": "beginner"})


class VerdictProficiencyTests(unittest.TestCase):
    def test_exact_matches_compare_levels(self):
        report = match_skills(
            ["Python", "Docker"],
            [],
            ["Python", "Docker"],
            required_levels={"python": "expert"},
            candidate_levels={"Python": "advanced", "docker": "advanced"},
        )
        python, docker = report.items
        self.assertEqual((python.required_level, python.candidate_level), ("expert", "advanced"))
        self.assertFalse(python.proficiency_match)
        self.assertEqual((docker.required_level, docker.candidate_level), ("intermediate", "advanced"))
        self.assertTrue(docker.proficiency_match)
        self.assertEqual(report.match_score, 100)

    def test_transferable_matches_use_the_held_skill_level(self):
        report = match_skills(
            ["React"], [], ["Vue"], required_levels={"React": "expert"}, candidate_levels={"Vue": "expert"}
        )
        item = report.items[0]
        self.assertEqual(item.verdict, "transferable")
        self.assertEqual(item.candidate_level, "expert")
        self.assertTrue(item.proficiency_match)

    def test_missing_skills_never_match_proficiency(self):
        item = match_skills(["Kubernetes"], [], ["PostgreSQL"]).items[0]
        self.assertIsNone(item.candidate_level)
        self.assertFalse(item.proficiency_match)

    def test_unknown_levels_are_rejected(self):
        with self.assertRaises(ConfigError):
            match_skills(["Python"], [], ["Python"], required_levels={"Python": "guru"})

    def test_parsed_resume_levels_flow_into_the_match(self):
        parsed = analysis_service.extract_text(
            "Jane Doe\njane@example.com\nSkills\n"
            "Python (6 years), Django, PostgreSQL\n"
            "Basic Docker, Kubernetes, AWS, Git, Redis, Terraform, Jenkins\n"
            "Built Python services and Django apps deployed with Docker on AWS for many teams"
        )
        self.assertEqual(parsed.skill_levels["Python"], "expert")
        self.assertEqual(parsed.skill_levels["Docker"], "beginner")

        report = analysis_service.skill_match(
            ["Python", "Docker"], None, parsed, required_levels={"Python": "advanced", "Docker": "intermediate"}
        )
        verdicts = {item.canonical: item.proficiency_match for item in report.items}
        self.assertEqual(verdicts, {"Python": True, "Docker": False})


if __name__ == "__main__":
    unittest.main()
