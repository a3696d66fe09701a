from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator

from prepscore.normalize.utils import EMAIL_RE

from .base import ClosedModel
from .match import Proficiency

FormatKind = Literal["western", "europass", "indian", "template", "unknown"]
FORMAT_PRIORITY: tuple[str, ...] = ("western", "europass", "indian", "template", "unknown")


class FormatIndicators(ClosedModel):
    has_photo: bool = False
    has_summary: bool = False
    has_declaration: bool = False
    template_spacing: bool = False
    language: str = "english"
    language_hits: dict[str, int] = Field(default_factory=dict)
    section_order: list[str] = Field(default_factory=list)
    europass_markers: list[str] = Field(default_factory=list)
    indian_markers: list[str] = Field(default_factory=list)


class ResumeFormat(ClosedModel):
    kind: FormatKind = "unknown"
    confidence: int = Field(default=0, ge=0, le=100)
    indicators: FormatIndicators = Field(default_factory=FormatIndicators)
    scores: dict[str, int] = Field(default_factory=dict)


class Contact(ClosedModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    linkedin: str | None = None
    github: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not EMAIL_RE.fullmatch(value):
            raise ValueError("email must be a well-formed mailbox address")
        return value


class EducationEntry(ClosedModel):
    degree: str | None = None
    institution: str | None = None
    graduation_year: int | None = None
    line_index: int = Field(ge=0)

    @property
    def is_complete(self) -> bool:
        return bool(self.degree and self.institution)


class ExperienceEntry(ClosedModel):
    title: str | None = None
    company: str | None = None
    start: str | None = None
    end: str | None = None
    is_current: bool = False
    duration_months: int = Field(default=0, ge=0)
    responsibilities: list[str] = Field(default_factory=list)
    line_index: int = Field(ge=0)

    @property
    def is_complete(self) -> bool:
        return bool(self.title and self.company)


class SkillSet(ClosedModel):
    programming: list[str] = Field(default_factory=list)
    frameworks: list[str] = Field(default_factory=list)
    databases: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    cloud: list[str] = Field(default_factory=list)
    soft: list[str] = Field(default_factory=list)
    other: list[str] = Field(default_factory=list)

    def all(self) -> list[str]:
        merged: set[str] = set()
        for group in SKILL_GROUP_FIELDS:
            merged.update(getattr(self, group))
        return sorted(merged)

    @property
    def distinct_count(self) -> int:
        return len(self.all())


SKILL_GROUP_FIELDS = ("programming", "frameworks", "databases", "tools", "cloud", "soft", "other")


class ProjectEntry(ClosedModel):
    name: str
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    line_index: int = Field(ge=0)


class ExtractionQuality(ClosedModel):
    overall: int = Field(default=0, ge=0, le=100)
    sections: dict[str, int] = Field(default_factory=dict)


class ParsedResume(ClosedModel):
    resume_format: ResumeFormat = Field(default_factory=ResumeFormat)
    contact: Contact = Field(default_factory=Contact)
    summary: str | None = None
    education: list[EducationEntry] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    skills: SkillSet = Field(default_factory=SkillSet)
    skill_levels: dict[str, Proficiency] = Field(default_factory=dict)
    projects: list[ProjectEntry] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    section_order: list[str] = Field(default_factory=list)
    token_counts: dict[str, int] = Field(default_factory=dict)
    token_count: int = Field(default=0, ge=0)
    quality: ExtractionQuality = Field(default_factory=ExtractionQuality)
    warnings: list[str] = Field(default_factory=list)
    failed_sections: list[str] = Field(default_factory=list)

    @property
    def total_experience_months(self) -> int:
        return sum(entry.duration_months for entry in self.experience)

    def impact_text(self) -> str:
        """Responsibilities and project descriptions that achievements are detected in."""
        parts: list[str] = []
        for entry in self.experience:
            parts.extend(entry.responsibilities)
        parts.extend(project.description for project in self.projects if project.description)
        return "\n".join(parts)
