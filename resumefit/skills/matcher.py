from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, Iterable, Tuple

from resumefit.core.numeric import percent
from resumefit.skills.dictionary import SkillDictionary


@dataclass(frozen=True)
class SkillMatch:
    matched: Tuple[str, ...]   # sorted, unique
    missing: Tuple[str, ...]   # sorted, unique
    jd_skills: FrozenSet[str]
    resume_skills: FrozenSet[str]
    percentage: int


def extract_skills(dictionary: SkillDictionary, normalized_text: str) -> FrozenSet[str]:
    """
    Canonical skills whose precompiled pattern occurs anywhere in the text.
    Expects text already passed through dictionary.normalize().
    """
    if not normalized_text:
        return frozenset()
    return frozenset(sp.skill for sp in dictionary.patterns if sp.pattern.search(normalized_text))


def match_skills(resume_skills: AbstractSet[str], jd_skills: AbstractSet[str]) -> SkillMatch:
    """
    matched = jd & resume, missing = jd - resume, both sorted for reproducibility.
    Percentage is relative to the JD's skills; a JD with no recognized skills scores 0.
    """
    jd = frozenset(jd_skills)
    resume = frozenset(resume_skills)
    matched = tuple(sorted(jd & resume))
    missing = tuple(sorted(jd - resume))
    return SkillMatch(
        matched=matched,
        missing=missing,
        jd_skills=jd,
        resume_skills=resume,
        percentage=percent(len(matched), len(jd)),
    )


def count_skill_mentions(dictionary: SkillDictionary, normalized_text: str, skills: Iterable[str]) -> int:
    """Total occurrences of the given canonical skills (used for keyword-density checks)."""
    if not normalized_text:
        return 0
    wanted = set(skills)
    return sum(
        len(sp.pattern.findall(normalized_text))
        for sp in dictionary.patterns
        if sp.skill in wanted
    )
