from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from resumefit.core.numeric import clamp, clamp01, round_half_up

# "5 years", "5+ years", "10yrs". Scanned over RAW text (before normalization).
_YEARS_RE = re.compile(r"(\d+)\+?\s*(?:years|yrs)\b", re.IGNORECASE)

_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
# Loose international phone: optional +country, 9-15 digits with common separators.
_PHONE_RE = re.compile(r"(?<!\d)(?:\+?\d{1,3}[\s.-]?)?(?:\(\d{2,4}\)[\s.-]?)?\d{3,4}[\s.-]?\d{3,4}(?:[\s.-]?\d{2,4})?(?!\d)")

# Heading synonyms per standard resume section.
_SECTION_ALIASES: Dict[str, frozenset] = {
    "skills": frozenset({
        "skills", "technical skills", "core skills", "skill set", "skillset", "key skills",
        "professional skills", "competencies", "core competencies",
    }),
    "experience": frozenset({
        "experience", "work experience", "employment", "professional experience",
        "work history", "employment history", "career history",
    }),
    "projects": frozenset({
        "projects", "personal projects", "academic projects", "project experience", "key projects",
    }),
    "education": frozenset({
        "education", "academic background", "education and training", "academic qualifications",
    }),
}

SECTION_NAMES = tuple(_SECTION_ALIASES)

# Headings that only earn strict-policy bonus points; they do not count toward section_score.
_BONUS_ALIASES: Dict[str, frozenset] = dict(_SECTION_ALIASES, **{
    "summary": frozenset({
        "summary", "professional summary", "career summary", "profile", "professional profile",
        "objective", "career objective", "about me",
    }),
    "certifications": frozenset({
        "certifications", "certificates", "certification", "licenses and certifications",
        "licenses & certifications",
    }),
})

# Strict-policy bonus points.
EXPERIENCE_BONUS_POINTS = 6
EDUCATION_BONUS_POINTS = 5
SUMMARY_BONUS_POINTS = 2  # summary longer than SUMMARY_MIN_CHARS
SUMMARY_MIN_CHARS = 50
PROJECTS_BONUS_POINTS = 2
CERTIFICATIONS_BONUS_POINTS = 1
SKILLS_BONUS_POINTS = 3  # skills section listing more than SKILLS_BONUS_MIN_LISTED skills
SKILLS_BONUS_MIN_LISTED = 3

# Characters tolerated around a heading ("## Skills:", "-- EXPERIENCE --", "Education |").
_HEADING_TRIM = " \t-–—_=*#•·|:.>[](){}"


@dataclass(frozen=True)
class SectionReport:
    skills: bool
    experience: bool
    projects: bool
    education: bool
    section_score: int  # 25 per present section: {0, 25, 50, 75, 100}

    @property
    def missing(self) -> List[str]:
        return [name for name in SECTION_NAMES if not getattr(self, name)]

    def to_dict(self) -> Dict[str, object]:
        return {
            "skills": self.skills,
            "experience": self.experience,
            "projects": self.projects,
            "education": self.education,
            "section_score": self.section_score,
        }


def _heading_candidate(line: str) -> Optional[str]:
    raw = (line or "").strip()
    if not raw:
        return None
    # "Skills: Python, SQL" -> "Skills"
    if ":" in raw:
        raw = raw.split(":", 1)[0]
    lowered = " ".join(raw.strip(_HEADING_TRIM).lower().split())
    if not lowered or len(lowered) > 40:
        return None
    return lowered


def _section_for_heading(heading: str, aliases_by_name: Mapping[str, frozenset] = _SECTION_ALIASES) -> Optional[str]:
    for name, aliases in aliases_by_name.items():
        if heading in aliases:
            return name
    return None


def detect_sections(raw_text: str) -> SectionReport:
    """
    A section is present when one of its heading synonyms stands on its own line
    (surrounding punctuation and whitespace tolerated, trailing ':' content allowed).
    """
    found = set()
    for line in (raw_text or "").splitlines():
        heading = _heading_candidate(line)
        if heading is None:
            continue
        name = _section_for_heading(heading)
        if name:
            found.add(name)

    flags = {name: name in found for name in SECTION_NAMES}
    return SectionReport(section_score=25 * sum(flags.values()), **flags)


def section_contents(raw_text: str) -> Dict[str, str]:
    """
    Text under each recognized heading (standard sections plus summary and
    certifications), up to the next recognized heading. Inline content after
    "Heading:" belongs to that heading. Repeated headings are concatenated.
    """
    parts: Dict[str, List[str]] = {}
    current: Optional[str] = None
    for line in (raw_text or "").splitlines():
        heading = _heading_candidate(line)
        name = _section_for_heading(heading, _BONUS_ALIASES) if heading else None
        if name:
            current = name
            bucket = parts.setdefault(name, [])
            if ":" in line:
                inline = line.split(":", 1)[1].strip()
                if inline:
                    bucket.append(inline)
            continue
        if current is not None and line.strip():
            parts[current].append(line.strip())
    return {name: "\n".join(lines) for name, lines in parts.items()}


def experience_bonus(sections: SectionReport) -> int:
    return EXPERIENCE_BONUS_POINTS if sections.experience else 0


def education_bonus(sections: SectionReport) -> int:
    return EDUCATION_BONUS_POINTS if sections.education else 0


def section_bonus(contents: Mapping[str, str], *, listed_skill_count: int) -> int:
    """
    Completeness bonus in [0, 8]: a real summary (2), projects (2),
    certifications (1), a skills section listing more than three skills (3).
    """
    points = 0
    if len(contents.get("summary", "")) > SUMMARY_MIN_CHARS:
        points += SUMMARY_BONUS_POINTS
    if contents.get("projects"):
        points += PROJECTS_BONUS_POINTS
    if contents.get("certifications"):
        points += CERTIFICATIONS_BONUS_POINTS
    if "skills" in contents and listed_skill_count > SKILLS_BONUS_MIN_LISTED:
        points += SKILLS_BONUS_POINTS
    return points


# --- Writing checks ---

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_SHORT_SENTENCE_CHARS = 10


@dataclass(frozen=True)
class GrammarIssue:
    text: str
    suggestion: str
    severity: str = "low"

    def to_dict(self) -> Dict[str, str]:
        return {"text": self.text, "suggestion": self.suggestion, "severity": self.severity}


def check_grammar(raw_text: str) -> Tuple[GrammarIssue, ...]:
    """
    Basic writing checks per sentence (split on . ! ?): a sentence should start
    with a capital letter and should not be very short. One sentence can yield both.
    """
    issues: List[GrammarIssue] = []
    for sentence in _SENTENCE_SPLIT_RE.split(raw_text or ""):
        trimmed = sentence.strip()
        if not trimmed:
            continue
        if not ("A" <= trimmed[0] <= "Z"):
            issues.append(GrammarIssue(trimmed, "Sentence should start with a capital letter"))
        if len(trimmed) < _SHORT_SENTENCE_CHARS:
            issues.append(GrammarIssue(trimmed, "Sentence seems too short, consider expanding"))
    return tuple(issues)


def job_role_fit(similarity: float, skill_ratio: float) -> int:
    """Half semantic similarity, half skill coverage, as a 0-100 integer."""
    return int(clamp(round_half_up(50.0 * clamp01(similarity) + 50.0 * clamp01(skill_ratio)), 0, 100))


def extract_years(text: str) -> List[int]:
    """Every '<n> years' / '<n>+ yrs' figure, in order of appearance."""
    return [int(m.group(1)) for m in _YEARS_RE.finditer(text or "")]


def max_years(text: str) -> int:
    # The highest claimed figure is authoritative; 0 when nothing is stated.
    years = extract_years(text)
    return max(years) if years else 0


def experience_score(candidate_years: int, required_years: int) -> int:
    if required_years <= 0:
        return 100
    return round_half_up(100.0 * min(candidate_years / required_years, 1.0))


def experience_gap(candidate_years: int, required_years: int) -> int:
    return max(required_years - candidate_years, 0)


# --- Resume quality signals (strict scoring policy only) ---

def word_count(raw_text: str) -> int:
    return len((raw_text or "").split())


def has_email(raw_text: str) -> bool:
    return bool(_EMAIL_RE.search(raw_text or ""))


def has_phone(raw_text: str) -> bool:
    for m in _PHONE_RE.finditer(raw_text or ""):
        digits = sum(ch.isdigit() for ch in m.group(0))
        if 9 <= digits <= 15:
            return True
    return False


def keyword_density(mentions: int, words: int) -> float:
    return (mentions / words) if words else 0.0


@dataclass(frozen=True)
class ResumeSignals:
    """Quality signals the strict policy turns into penalties."""
    word_count: int
    has_email: bool
    has_phone: bool
    keyword_density: float
    has_core_sections: bool  # experience + education + skills
    jd_skill_count: int
    matched_skill_count: int


def collect_resume_signals(
        *,
        resume_raw_text: str,
        sections: SectionReport,
        jd_skill_mentions: int,
        jd_skills: Sequence[str],
        matched_skills: Sequence[str],
) -> ResumeSignals:
    words = word_count(resume_raw_text)
    return ResumeSignals(
        word_count=words,
        has_email=has_email(resume_raw_text),
        has_phone=has_phone(resume_raw_text),
        keyword_density=keyword_density(jd_skill_mentions, words),
        has_core_sections=sections.experience and sections.education and sections.skills,
        jd_skill_count=len(jd_skills),
        matched_skill_count=len(matched_skills),
    )
