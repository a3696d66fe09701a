from .interview import AnswerEvaluation, AnswerGap, InterviewQuestion
from .jd import JobDescription
from .match import ATSComponents, ATSReport, Explanation, KeywordScore, SkillMatchReport, SkillVerdict
from .resume import (
    Contact,
    EducationEntry,
    ExperienceEntry,
    ExtractionQuality,
    FormatIndicators,
    ParsedResume,
    ProjectEntry,
    ResumeFormat,
    SkillSet,
)

__all__ = [
    "ATSComponents",
    "ATSReport",
    "AnswerEvaluation",
    "AnswerGap",
    "Contact",
    "EducationEntry",
    "ExperienceEntry",
    "Explanation",
    "ExtractionQuality",
    "FormatIndicators",
    "InterviewQuestion",
    "JobDescription",
    "KeywordScore",
    "ParsedResume",
    "ProjectEntry",
    "ResumeFormat",
    "SkillMatchReport",
    "SkillSet",
    "SkillVerdict",
]
