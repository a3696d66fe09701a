from __future__ import annotations

import re
from dataclasses import dataclass

from .utils import normalize_line, strip_bullet_prefix

LANGUAGES = ("english", "spanish", "french", "german", "hindi")

# section -> language -> header phrases (regex fragments, matched against the whole header)
SECTION_HEADERS: dict[str, dict[str, tuple[str, ...]]] = {
    "summary": {
        "english": (
            r"(?:professional |career |executive )?summary",
            r"(?:professional |career )?profile",
            r"(?:career |professional )?objective",
            r"about me",
        ),
        "spanish": (r"resumen(?: profesional)?", r"perfil(?: profesional)?", r"objetivo(?: profesional)?"),
        "french": (r"résumé", r"profil(?: professionnel)?", r"objectif(?: professionnel)?"),
        "german": (r"zusammenfassung", r"profil", r"kurzprofil", r"ziel"),
        "hindi": (r"सारांश",),
    },
    "experience": {
        "english": (
            r"(?:work |professional |relevant |industry )?experience",
            r"employment(?: history)?",
            r"work history",
            r"career history",
            r"internships?",
        ),
        "spanish": (r"experiencia(?: laboral| profesional)?",),
        "french": (r"expériences?(?: professionnelles?)?",),
        "german": (r"berufserfahrung", r"erfahrung", r"berufliche erfahrung"),
        "hindi": (r"अनुभव", r"कार्य अनुभव"),
    },
    "education": {
        "english": (
            r"education(?: and training)?",
            r"academic (?:background|qualifications?|details)",
            r"educational (?:background|qualifications?)",
            r"qualifications?",
        ),
        "spanish": (r"educación", r"formación(?: académica)?"),
        "french": (r"éducation", r"formation"),
        "german": (r"ausbildung", r"bildung", r"bildungsweg"),
        "hindi": (r"शिक्षा", r"शैक्षिक योग्यता"),
    },
    "skills": {
        "english": (
            r"(?:technical |key |core |personal |professional )?skills",
            r"skills and competences",
            r"(?:core )?competenc(?:ies|es)",
            r"technologies",
            r"tech stack",
            r"tools and technologies",
        ),
        "spanish": (r"habilidades", r"competencias", r"aptitudes"),
        "french": (r"compétences(?: techniques)?",),
        "german": (r"fähigkeiten", r"kenntnisse", r"kompetenzen"),
        "hindi": (r"कौशल",),
    },
    "projects": {
        "english": (r"(?:personal |academic |key |selected )?projects", r"portfolio"),
        "spanish": (r"proyectos",),
        "french": (r"projets",),
        "german": (r"projekte",),
        "hindi": (r"परियोजनाएं", r"परियोजनाएँ"),
    },
    "certifications": {
        "english": (
            r"certifications?",
            r"certificates?",
            r"licenses(?: and certifications)?",
            r"courses",
        ),
        "spanish": (r"certificaciones",),
        "french": (r"certifications",),
        "german": (r"zertifikate", r"zertifizierungen"),
        "hindi": (r"प्रमाणपत्र",),
    },
    "personal_info": {
        "english": (r"personal (?:information|details|data)",),
        "spanish": (r"datos personales", r"información personal"),
        "french": (r"informations personnelles", r"état civil"),
        "german": (r"persönliche (?:daten|angaben)",),
        "hindi": (r"व्यक्तिगत जानकारी",),
    },
    "languages": {
        "english": (r"languages(?: known)?", r"language skills"),
        "spanish": (r"idiomas",),
        "french": (r"langues",),
        "german": (r"sprachen", r"sprachkenntnisse"),
        "hindi": (r"भाषाएं", r"भाषाएँ"),
    },
    "achievements": {
        "english": (r"achievements", r"accomplishments", r"awards(?: and honors)?", r"honors(?: and awards)?"),
        "spanish": (r"logros",),
        "french": (r"réalisations",),
        "german": (r"erfolge", r"auszeichnungen"),
        "hindi": (r"उपलब्धियां", r"उपलब्धियाँ"),
    },
    "interests": {
        "english": (r"interests", r"hobbies(?: and interests)?"),
        "spanish": (r"intereses",),
        "french": (r"centres d'intérêt", r"loisirs"),
        "german": (r"interessen", r"hobbys"),
        "hindi": (r"रुचियां",),
    },
    "declaration": {
        "english": (r"declaration",),
        "spanish": (r"declaración",),
        "french": (r"déclaration",),
        "german": (r"erklärung",),
        "hindi": (r"घोषणा",),
    },
}

_MAX_HEADER_CHARS = 60
_HEADER_PATTERNS: list[tuple[str, str, re.Pattern[str]]] = [
    (section, language, re.compile("(?:" + "|".join(phrases) + ")", re.IGNORECASE))
    for section, by_language in SECTION_HEADERS.items()
    for language, phrases in by_language.items()
]


@dataclass(frozen=True)
class HeaderMatch:
    section: str
    language: str
    line_index: int
    inline: str


def header_text(line: str) -> tuple[str, str]:
    """Split a candidate header line into (header, inline content after a colon)."""
    cleaned = strip_bullet_prefix(normalize_line(line))
    if ":" in cleaned:
        head, _, rest = cleaned.partition(":")
        return head.strip().lower(), rest.strip()
    return cleaned.strip().lower(), ""


def matches_header(line: str, patterns) -> str | None:
    """Return the inline content when the line is a header for any of the patterns."""
    head, inline = header_text(line)
    if not head or len(head) > _MAX_HEADER_CHARS:
        return None
    for pattern in patterns:
        compiled = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern, re.IGNORECASE)
        if compiled.fullmatch(head):
            return inline
    return None


def classify_header(line: str, line_index: int = 0) -> HeaderMatch | None:
    head, inline = header_text(line)
    if not head or len(head) > _MAX_HEADER_CHARS:
        return None
    for section, language, pattern in _HEADER_PATTERNS:
        if pattern.fullmatch(head):
            return HeaderMatch(section=section, language=language, line_index=line_index, inline=inline)
    return None


def section_patterns(section: str) -> list[re.Pattern[str]]:
    return [pattern for name, _language, pattern in _HEADER_PATTERNS if name == section]
