from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from resumefit.core.text_processing import normalize_whitespace
from resumefit.errors import ValidationError
from resumefit.heuristics import GrammarIssue, SectionReport


@dataclass(frozen=True)
class AnalysisRequest:
    """
    Engine-boundary input record. Both texts are raw (pre-normalization) and must be
    non-empty after whitespace trimming.
    """
    resume_text: str
    job_description_text: str

    def validate(self) -> "AnalysisRequest":
        for name, label in (("resume_text", "resume"), ("job_description_text", "job description")):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ValidationError(f"Empty {label}: expected text, got {type(value).__name__}.", field=name)
            if not normalize_whitespace(value):
                raise ValidationError(f"Empty {label}.", field=name)
        return self


@dataclass(frozen=True)
class ScoreBreakdown:
    semantic_score: int
    skill_match_percentage: int
    experience_score: int
    section_score: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "semantic_score": self.semantic_score,
            "skill_match_percentage": self.skill_match_percentage,
            "experience_score": self.experience_score,
            "section_score": self.section_score,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    One resume-vs-JD evaluation. Built once per request and never mutated.
    """
    ats_score: int
    breakdown: ScoreBreakdown
    matched_skills: Tuple[str, ...]
    missing_skills: Tuple[str, ...]
    candidate_years: int
    required_years: int
    experience_gap: int
    sections: SectionReport
    policy: str = "standard-v1"
    # Read-only view, excluded from the hash.
    penalties: Mapping[str, float] = field(default_factory=dict, hash=False)
    job_role_fit: int = 0
    grammar_issues: Tuple[GrammarIssue, ...] = ()
    dictionary_version: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "penalties", MappingProxyType(dict(self.penalties)))
        object.__setattr__(self, "grammar_issues", tuple(self.grammar_issues))

    @property
    def semantic_score(self) -> int:
        return self.breakdown.semantic_score

    @property
    def skill_match_percentage(self) -> int:
        return self.breakdown.skill_match_percentage

    @property
    def experience_score(self) -> int:
        return self.breakdown.experience_score

    @property
    def section_score(self) -> int:
        return self.breakdown.section_score

    def to_dict(self) -> Dict[str, Any]:
        """Flat record for the web layer, plus provenance (policy, dictionary, sections)."""
        d: Dict[str, Any] = {"ats_score": self.ats_score}
        d.update(self.breakdown.to_dict())
        d.update({
            "matched_skills": list(self.matched_skills),
            "missing_skills": list(self.missing_skills),
            "candidate_years": self.candidate_years,
            "required_years": self.required_years,
            "experience_gap": self.experience_gap,
            "sections": self.sections.to_dict(),
            "policy": self.policy,
            "penalties": dict(self.penalties),
            "job_role_fit": self.job_role_fit,
            "grammar_issues": [issue.to_dict() for issue in self.grammar_issues],
            "dictionary_version": self.dictionary_version,
        })
        return d
