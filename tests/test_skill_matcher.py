import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from prepscore.core.errors import ConfigError  # noqa: E402
from prepscore.semantic.skill_matcher import match_skills, validate_preferred_weight  # noqa: E402
from prepscore.services import analysis_service  # noqa: E402


class SkillMatcherTests(unittest.TestCase):
    def test_transferable_skills_earn_category_credit(self):
        report = match_skills(["React", "TypeScript", "Redux"], [], ["Vue", "TypeScript", "MobX"])
        verdicts = {item.canonical: item for item in report.items}

        self.assertEqual(verdicts["React"].verdict, "transferable")
        self.assertEqual(verdicts["React"].via, "Vue")
        self.assertEqual(verdicts["React"].coefficient, 0.7)
        self.assertEqual(verdicts["TypeScript"].verdict, "exact")
        self.assertFalse(verdicts["TypeScript"].via_synonym)
        self.assertEqual(verdicts["Redux"].via, "MobX")
        self.assertEqual(verdicts["Redux"].credit, 0.6)
        self.assertEqual(report.match_score, 77)
        self.assertEqual(report.match_ratio, 0.77)

    def test_learning_paths_name_source_target_and_category(self):
        report = match_skills(["React", "TypeScript", "Redux"], [], ["Vue", "TypeScript", "MobX"])
        self.assertEqual(
            report.learning_paths,
            [
                "MobX -> Redux: same state-management category, 0.60 transferability",
                "Vue -> React: same frontend-frameworks category, 0.70 transferability",
            ],
        )

    def test_synonyms_resolve_to_exact_matches(self):
        report = match_skills(["React.js", "TypeScript"], [], ["React", "Vue"])
        react, typescript = report.items
        self.assertEqual(react.verdict, "exact")
        self.assertTrue(react.via_synonym)
        self.assertEqual(react.canonical, "React")
        self.assertEqual(typescript.verdict, "missing")
        self.assertEqual(report.match_score, 50)

    def test_cross_category_skills_do_not_transfer(self):
        report = match_skills(["Kubernetes"], [], ["PostgreSQL"])
        self.assertEqual(report.items[0].verdict, "missing")
        self.assertEqual(report.match_score, 0)

    def test_ties_pick_lexicographically_first_candidate(self):
        report = match_skills(["Vue"], [], ["Svelte", "Angular"])
        self.assertEqual(report.items[0].via, "Angular")

    def test_preferred_skills_are_weighted(self):
        report = match_skills(["Python"], ["Docker"], ["Python"], preferred_weight=0.5)
        self.assertEqual(report.match_ratio, 0.67)
        self.assertEqual(report.match_score, 67)
        self.assertFalse(report.items[1].required)

        full_weight = match_skills(["Python"], ["Docker"], ["Python"], preferred_weight=1)
        self.assertEqual(full_weight.match_score, 50)

    def test_duplicate_requirements_are_counted_once(self):
        report = match_skills(["Postgres", "PostgreSQL"], ["postgresql"], ["PostgreSQL"])
        self.assertEqual(len(report.items), 1)
        self.assertEqual(report.match_score, 100)

    def test_unknown_skills_match_only_by_spelling(self):
        report = match_skills(["Elixir"], [], ["elixir", "Go"])
        self.assertEqual(report.items[0].verdict, "exact")
        self.assertEqual(match_skills(["Elixir"], [], ["Go"]).items[0].verdict, "missing")

    def test_empty_inputs_warn(self):
        report = match_skills([], [], [])
        self.assertEqual(report.match_score, 0)
        self.assertEqual(
            report.warnings,
            ["no required or preferred skills to match", "candidate has no skills"],
        )

    def test_preferred_weight_must_be_in_unit_interval(self):
        for bad in (0, -0.1, 1.5, "heavy"):
            with self.assertRaises(ConfigError):
                validate_preferred_weight(bad)
        self.assertEqual(str(validate_preferred_weight(None)), "0.5")

    def test_service_accepts_a_parsed_resume(self):
        parsed = analysis_service.extract_text(
            "Jane Doe\njane@example.com\nSkills\n"
            "Python, Django, PostgreSQL, Docker, Kubernetes, AWS, Git, Redis, Terraform, Jenkins\n"
            "Built Python services and Django apps deployed with Docker on AWS for many teams"
        )
        report = analysis_service.skill_match(["Flask", "MySQL"], None, parsed)
        verdicts = {item.canonical: item.via for item in report.items}
        self.assertEqual(verdicts, {"Flask": "Django", "MySQL": "PostgreSQL"})


if __name__ == "__main__":
    unittest.main()
