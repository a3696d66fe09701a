from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date

from prepscore.core.config.scoring import get_scoring_value
from prepscore.schemas.resume import (
    SKILL_GROUP_FIELDS,
    Contact,
    EducationEntry,
    ExperienceEntry,
    ProjectEntry,
    SkillSet,
)
from prepscore.taxonomy import LocalOntology

from .headers import classify_header, header_text
from .text import NormalizedText
from .utils import (
    EMAIL_RE,
    PHONE_RE,
    is_bullet_like,
    is_contact_or_url,
    is_email,
    is_phone,
    normalize_line,
    strip_bullet_prefix,
)

Line = tuple[int, str]

_TITLE_LINES = {"resume", "résumé", "curriculum vitae", "cv", "biodata", "bio-data", "bio data"}
_NAME_LABEL_RE = re.compile(r"^(?:full\s+)?name\s*[:\-]\s*(.+)$", re.IGNORECASE)
_LOCATION_LABEL_RE = re.compile(
    r"^(?:location|(?:current\s+|permanent\s+)?address|city|residence)\s*[:\-]\s*(.+)$", re.IGNORECASE
)
_CITY_REGION_RE = re.compile(r"^[A-Z][A-Za-z .'\-]+,\s*[A-Z][A-Za-z .'\-]+$")
_FATHERS_NAME_RE = re.compile(r"father(?:['’]s|s)?\s+name\s*[:\-]\s*(.+)$", re.IGNORECASE)
_LINKEDIN_RE = re.compile(r"linkedin\.com/in/([A-Za-z0-9_\-%]+)", re.IGNORECASE)
_GITHUB_RE = re.compile(r"github\.com/([A-Za-z0-9_\-]+)", re.IGNORECASE)
_HEADER_SEGMENT_SPLIT = re.compile(r"\s*[|•·]\s*")

_DEGREE_RE = re.compile(
    r"(?<![A-Za-z.])(?:"
    r"bachelor(?:['’]s)?|master(?:['’]s)?|doctorate|ph\.?\s?d|m\.?b\.?a"
    r"|[bm]\.?\s?tech|[bm]\.s(?:c)?|[bm]\.e|[bm]\.a|[bm]\.?com|bsc|msc|bs|ms|bca|mca"
    r"|diploma|associate(?:['’]s)?\s+degree|higher\s+secondary|hsc|ssc"
    r")\.?(?![A-Za-z])",
    re.IGNORECASE,
)
_INSTITUTION_RE = re.compile(
    r"\b(?:university|college|institute|school|academy|polytechnic|universidad|université|universität|hochschule|iit|nit)\b",
    re.IGNORECASE,
)
_YEAR_RE = re.compile(r"(?<!\d)((?:19|20)\d{2})(?!\d)")
_SEGMENT_SPLIT = re.compile(r"\s*[,|]\s*|\s+[-–—]\s+")

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
_MONTH = r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
_DATE = rf"(?:{_MONTH}\s+(?:19|20)\d{{2}}|(?:0?[1-9]|1[0-2])/(?:19|20)\d{{2}}|(?:19|20)\d{{2}})"
_DATE_RANGE_RE = re.compile(
    rf"(?P<start>{_DATE})\s*(?:-|–|—|to|until)\s*(?P<end>{_DATE}|present|current|now|ongoing|till\s+date)",
    re.IGNORECASE,
)
_DATE_PARTS_RE = re.compile(
    rf"^(?:(?P<month>{_MONTH})\s+|(?P<numeric>0?[1-9]|1[0-2])/)?(?P<year>(?:19|20)\d{{2}})$",
    re.IGNORECASE,
)
_ROLE_SPLIT = re.compile(r"\s+(?:at|@)\s+|\s*[|,]\s*|\s+[-–—]\s+", re.IGNORECASE)
_DANGLING = " \t|,;:-–—()[]"
_PROJECT_NAME_SPLIT = re.compile(r"\s*(?::|\||\s[-–—]\s)\s*")
_MAX_PROJECT_NAME_CHARS = 100


def section_lines(normalized: NormalizedText, patterns) -> list[Line] | None:
    """Lines of the first section whose header matches, in document coordinates."""
    section = normalized.find_section(patterns)
    if section is None:
        return None
    lines: list[Line] = []
    _head, inline = header_text(normalized.lines[section.header_line])
    if inline:
        lines.append((section.header_line, inline))
    lines.extend((index, normalized.lines[index]) for index in range(section.start, section.end))
    return lines


def entry_quality(entries: list, *, any_complete: bool) -> int:
    if any_complete:
        return int(get_scoring_value("extraction.entry_quality.complete", 90))
    if entries:
        return int(get_scoring_value("extraction.entry_quality.partial", 30))
    return 0


# contact


def _is_title_line(line: str) -> bool:
    return normalize_line(line).lower().rstrip(":") in _TITLE_LINES


def _extract_name(lines: tuple[str, ...]) -> str | None:
    for line in lines[:15]:
        labelled = _NAME_LABEL_RE.match(line)
        if labelled:
            return labelled.group(1).strip() or None

    for line in lines:
        if not line or _is_title_line(line):
            continue
        candidate = _HEADER_SEGMENT_SPLIT.split(line)[0].strip()
        if not candidate or is_email(candidate) or is_phone(candidate):
            return None
        if classify_header(line) is not None or is_contact_or_url(candidate):
            return None
        return candidate
    return None


def _extract_location(lines: tuple[str, ...]) -> str | None:
    for line in lines:
        labelled = _LOCATION_LABEL_RE.match(line)
        if labelled:
            return labelled.group(1).strip() or None

    for line in lines[:6]:
        for segment in _HEADER_SEGMENT_SPLIT.split(line):
            segment = segment.strip()
            if not segment or is_contact_or_url(segment):
                continue
            if _CITY_REGION_RE.match(segment):
                return segment
    return None


def extract_contact(normalized: NormalizedText) -> tuple[Contact, int]:
    text = normalized.text
    email_match = EMAIL_RE.search(text)
    phone_match = PHONE_RE.search(text)
    linkedin = _LINKEDIN_RE.search(text)
    github = _GITHUB_RE.search(text)

    metadata: dict[str, str] = {}
    for line in normalized.lines:
        fathers_name = _FATHERS_NAME_RE.search(line)
        if fathers_name:
            metadata["fathers_name"] = fathers_name.group(1).strip()
            break

    contact = Contact(
        name=_extract_name(normalized.lines),
        email=email_match.group(0) if email_match else None,
        phone=phone_match.group(0).strip() if phone_match else None,
        location=_extract_location(normalized.lines),
        linkedin=f"linkedin.com/in/{linkedin.group(1)}" if linkedin else None,
        github=f"github.com/{github.group(1)}" if github else None,
        metadata=metadata,
    )
    populated = sum(1 for value in (contact.name, contact.email, contact.phone, contact.location) if value)
    return contact, 25 * populated


# education


def _degree_segment(line: str) -> str | None:
    match = _DEGREE_RE.search(line)
    if match is None:
        return None
    for segment in _SEGMENT_SPLIT.split(line):
        if _DEGREE_RE.search(segment):
            return segment.strip(_DANGLING) or None
    return match.group(0)


def _institution(entry_lines: list[str]) -> str | None:
    for line in entry_lines:
        for segment in _SEGMENT_SPLIT.split(line):
            if _INSTITUTION_RE.search(segment):
                return _YEAR_RE.sub("", segment).strip(_DANGLING) or None
    for line in entry_lines[1:]:
        candidate = _YEAR_RE.sub("", line).strip(_DANGLING)
        if len(candidate) > 5 and not _DEGREE_RE.search(candidate):
            return candidate
    return None


def _build_education(line_index: int, entry_lines: list[str]) -> EducationEntry:
    years = [int(year) for line in entry_lines for year in _YEAR_RE.findall(line)]
    return EducationEntry(
        degree=_degree_segment(entry_lines[0]),
        institution=_institution(entry_lines),
        graduation_year=max(years) if years else None,
        line_index=line_index,
    )


def extract_education(lines: list[Line] | None) -> tuple[list[EducationEntry], int]:
    if not lines:
        return [], 0

    entries: list[EducationEntry] = []
    current: list[str] = []
    start = 0
    for index, raw_line in lines:
        line = strip_bullet_prefix(raw_line)
        if not line:
            continue
        if _DEGREE_RE.search(line):
            if current:
                entries.append(_build_education(start, current))
            current, start = [line], index
        elif current:
            current.append(line)
    if current:
        entries.append(_build_education(start, current))

    quality = entry_quality(entries, any_complete=any(entry.is_complete for entry in entries))
    return entries, quality


# experience


def _parse_date(raw: str, as_of: date) -> tuple[int, int | None, bool]:
    parts = _DATE_PARTS_RE.match(normalize_line(raw).lower())
    if parts is None:
        return as_of.year, as_of.month, True
    month: int | None = None
    if parts.group("month"):
        month = _MONTHS[parts.group("month")[:3].lower()]
    elif parts.group("numeric"):
        month = int(parts.group("numeric"))
    return int(parts.group("year")), month, False


def duration_months(start: tuple[int, int | None], end: tuple[int, int | None]) -> int:
    start_year, start_month = start
    end_year, end_month = end
    months = (end_year - start_year) * 12 + ((end_month or 1) - (start_month or 1))
    return max(0, months)


def _format_month(year: int, month: int | None) -> str:
    return f"{year:04d}-{month:02d}" if month else f"{year:04d}"


@dataclass
class _ExperienceDraft:
    line_index: int
    start: tuple[int, int | None]
    end: tuple[int, int | None]
    is_current: bool
    title: str | None = None
    company: str | None = None
    responsibilities: list[str] = field(default_factory=list)
    saw_bullet: bool = False

    def build(self) -> ExperienceEntry:
        return ExperienceEntry(
            title=self.title,
            company=self.company,
            start=_format_month(*self.start),
            end=_format_month(*self.end),
            is_current=self.is_current,
            duration_months=duration_months(self.start, self.end),
            responsibilities=self.responsibilities,
            line_index=self.line_index,
        )


def _role_parts(remainder: str) -> list[str]:
    return [part.strip(_DANGLING) for part in _ROLE_SPLIT.split(remainder) if part.strip(_DANGLING)]


def extract_experience(lines: list[Line] | None, as_of: date) -> tuple[list[ExperienceEntry], int]:
    if not lines:
        return [], 0

    drafts: list[_ExperienceDraft] = []
    current: _ExperienceDraft | None = None
    pending: list[str] = []

    for index, raw_line in lines:
        if not raw_line:
            continue
        bullet = is_bullet_like(raw_line)
        line = strip_bullet_prefix(raw_line) if bullet else raw_line
        match = _DATE_RANGE_RE.search(line)

        if match and not bullet:
            start_year, start_month, _ = _parse_date(match.group("start"), as_of)
            end_year, end_month, is_current = _parse_date(match.group("end"), as_of)
            draft = _ExperienceDraft(
                line_index=index,
                start=(start_year, start_month),
                end=(end_year, end_month),
                is_current=is_current,
            )
            parts = _role_parts(line[: match.start()] + " | " + line[match.end() :])
            if len(parts) >= 2:
                draft.title, draft.company = parts[0], parts[1]
                leftover = pending
            elif len(parts) == 1:
                draft.title = parts[0]
                draft.company = pending[-1] if pending else None
                leftover = pending[:-1]
            else:
                taken = pending[-2:]
                if len(taken) == 2:
                    draft.title, draft.company = taken
                elif taken:
                    draft.title = taken[0]
                leftover = pending[: len(pending) - len(taken)]
            if current is not None:
                current.responsibilities.extend(leftover)
            pending = []
            current = draft
            drafts.append(draft)
            continue

        if bullet:
            if current is not None:
                current.responsibilities.extend(pending)
                pending = []
                current.responsibilities.append(line)
                current.saw_bullet = True
            continue

        if current is not None and not current.saw_bullet and not pending:
            if current.title is None:
                current.title = line
                continue
            if current.company is None:
                current.company = line
                continue
        pending.append(line)

    if current is not None:
        current.responsibilities.extend(pending)

    entries = [draft.build() for draft in drafts]
    quality = entry_quality(entries, any_complete=any(entry.is_complete for entry in entries))
    return entries, quality


# skills


def extract_skills(scope_text: str, ontology: LocalOntology) -> tuple[SkillSet, int]:
    grouped: dict[str, set[str]] = {group: set() for group in SKILL_GROUP_FIELDS}
    for canonical in ontology.find_in_text(scope_text):
        grouped[ontology.group(canonical)].add(canonical)
    skills = SkillSet(**{group: sorted(names, key=str.lower) for group, names in grouped.items()})
    per_hit = int(get_scoring_value("extraction.skill_points_per_hit", 15))
    return skills, min(100, per_hit * skills.distinct_count)


# projects and certifications


def _start_project(index: int, line: str) -> dict:
    name, rest = _split_project_title(line)
    return {"name": name, "description": [rest] if rest else [], "line_index": index}


def _split_project_title(line: str) -> tuple[str, str]:
    parts = _PROJECT_NAME_SPLIT.split(line, maxsplit=1)
    if len(parts) == 2 and parts[0].strip():
        return parts[0].strip(), parts[1].strip()
    return line.strip(), ""


def _has_name_separator(line: str) -> bool:
    return len(_PROJECT_NAME_SPLIT.split(line, maxsplit=1)) == 2


def _next_is_bullet(lines: list[Line], position: int) -> bool:
    for _index, line in lines[position + 1 :]:
        if line:
            return is_bullet_like(line)
    return False


def _is_project_title(lines: list[Line], position: int, in_description: bool) -> bool:
    line = lines[position][1]
    if len(line) >= _MAX_PROJECT_NAME_CHARS:
        return False
    if not in_description:
        return True
    return _has_name_separator(line) or _next_is_bullet(lines, position)


def extract_projects(lines: list[Line] | None, ontology: LocalOntology) -> tuple[list[ProjectEntry], int]:
    if not lines:
        return [], 0

    drafts: list[dict] = []
    # plain lines after a title continue its description until a blank line
    in_description = False
    for position, (index, raw_line) in enumerate(lines):
        if not raw_line:
            in_description = False
            continue
        if is_bullet_like(raw_line):
            if drafts:
                drafts[-1]["description"].append(strip_bullet_prefix(raw_line))
            continue
        if _is_project_title(lines, position, in_description):
            drafts.append(_start_project(index, raw_line))
            in_description = True
        elif drafts:
            drafts[-1]["description"].append(raw_line)

    projects: list[ProjectEntry] = []
    for draft in drafts:
        description = " ".join(draft["description"]).strip()
        projects.append(
            ProjectEntry(
                name=draft["name"],
                description=description,
                technologies=ontology.find_in_text(f"{draft['name']}\n{description}"),
                line_index=draft["line_index"],
            )
        )

    detailed = any(project.description or project.technologies for project in projects)
    return projects, entry_quality(projects, any_complete=detailed)


def extract_certifications(lines: list[Line] | None) -> tuple[list[str], int]:
    if not lines:
        return [], 0
    certifications = [strip_bullet_prefix(line) for _index, line in lines if line.strip()]
    certifications = [item for item in certifications if item]
    return certifications, entry_quality(certifications, any_complete=bool(certifications))


def extract_summary(lines: list[Line] | None) -> str | None:
    if not lines:
        return None
    text = " ".join(line for _index, line in lines if line).strip()
    return text or None
