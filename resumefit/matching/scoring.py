from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from resumefit.core.numeric import clamp, round_half_up
from resumefit.errors import ConfigurationError
from resumefit.heuristics import ResumeSignals

SEMANTIC = "semantic"
SKILL_MATCH = "skill_match"
EXPERIENCE = "experience"
SECTION = "section"
# Point-scale components (not 0-100) used by the strict policy.
EXPERIENCE_BONUS = "experience_bonus"  # 0 or 6
EDUCATION_BONUS = "education_bonus"    # 0 or 5
SECTION_BONUS = "section_bonus"        # 0..8

COMPONENTS = (SEMANTIC, SKILL_MATCH, EXPERIENCE, SECTION, EXPERIENCE_BONUS, EDUCATION_BONUS, SECTION_BONUS)


@dataclass(frozen=True)
class PenaltyRules:
    """
    Additive point deductions for resume-quality problems, applied by the
    strict policy after weighting and capping.
    """
    short_resume_words: int = 150
    short_resume_points: float = 8.0
    long_resume_words: int = 800
    long_resume_points: float = 5.0
    density_threshold: float = 0.03
    density_multiplier: float = 200.0
    density_max_points: float = 15.0
    missing_email_points: float = 3.0
    missing_phone_points: float = 2.0
    missing_core_sections_points: float = 5.0
    over_optimization_ratio: float = 0.8
    over_optimization_points: float = 5.0

    def evaluate(self, signals: ResumeSignals) -> Dict[str, float]:
        """Named deductions that apply to these signals (absent keys mean no penalty)."""
        out: Dict[str, float] = {}
        if signals.word_count < self.short_resume_words:
            out["resume_too_short"] = self.short_resume_points
        if signals.word_count > self.long_resume_words:
            out["resume_too_long"] = self.long_resume_points
        if signals.keyword_density > self.density_threshold:
            out["keyword_stuffing"] = min(signals.keyword_density * self.density_multiplier, self.density_max_points)
        if not signals.has_email:
            out["missing_email"] = self.missing_email_points
        if not signals.has_phone:
            out["missing_phone"] = self.missing_phone_points
        if not signals.has_core_sections:
            out["missing_core_sections"] = self.missing_core_sections_points
        if signals.matched_skill_count > signals.jd_skill_count * self.over_optimization_ratio:
            out["over_optimization"] = self.over_optimization_points
        return out


@dataclass(frozen=True)
class ScoringPolicy:
    """
    Named, versioned weighting scheme: weights (summing to 1.0) over components,
    optional per-component caps, optional penalty rules and an output clamp.
    """
    name: str
    version: str
    weights: Mapping[str, float]
    caps: Mapping[str, float] = field(default_factory=dict)
    penalties: Optional[PenaltyRules] = None
    clamp: Tuple[int, int] = (0, 100)

    def __post_init__(self) -> None:
        unknown = set(self.weights) - set(COMPONENTS)
        if unknown:
            raise ConfigurationError(f"Scoring policy '{self.name}': unknown components {sorted(unknown)}.")
        unknown_caps = set(self.caps) - set(COMPONENTS)
        if unknown_caps:
            raise ConfigurationError(f"Scoring policy '{self.name}': unknown capped components {sorted(unknown_caps)}.")
        if any(w < 0 for w in self.weights.values()):
            raise ConfigurationError(f"Scoring policy '{self.name}': weights must be non-negative.")
        total = sum(self.weights.values())
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            raise ConfigurationError(f"Scoring policy '{self.name}': weights sum to {total}, expected 1.0.")
        lo, hi = self.clamp
        if not 0 <= lo <= hi <= 100:
            raise ConfigurationError(f"Scoring policy '{self.name}': clamp {self.clamp} must lie within [0, 100].")
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))
        object.__setattr__(self, "caps", MappingProxyType(dict(self.caps)))

    @property
    def label(self) -> str:
        return f"{self.name}-{self.version}"

    @property
    def needs_signals(self) -> bool:
        return self.penalties is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "weights": dict(self.weights),
            "caps": dict(self.caps),
            "penalties": self.penalties is not None,
            "clamp": list(self.clamp),
        }


@dataclass(frozen=True)
class CompositeScore:
    ats_score: int
    raw_score: float
    penalty_points: float
    penalties: Dict[str, float]


STANDARD_POLICY = ScoringPolicy(
    name="standard",
    version="v1",
    weights={SEMANTIC: 0.40, SKILL_MATCH: 0.30, EXPERIENCE: 0.20, SECTION: 0.10},
)

# Never reports a perfect or near-zero score. Experience, education and structure
# contribute small bonus points here, so the pre-penalty ceiling is about 46.
STRICT_POLICY = ScoringPolicy(
    name="strict",
    version="v1",
    weights={
        SEMANTIC: 0.25,
        SKILL_MATCH: 0.35,
        EXPERIENCE_BONUS: 0.15,
        EDUCATION_BONUS: 0.10,
        SECTION_BONUS: 0.15,
    },
    caps={SEMANTIC: 70, SKILL_MATCH: 75},
    penalties=PenaltyRules(),
    clamp=(15, 88),
)

POLICIES: Mapping[str, ScoringPolicy] = MappingProxyType({
    STANDARD_POLICY.name: STANDARD_POLICY,
    STRICT_POLICY.name: STRICT_POLICY,
})


def get_policy(name: str) -> ScoringPolicy:
    key = (name or "").strip().lower()
    try:
        return POLICIES[key]
    except KeyError:
        raise ConfigurationError(
            f"Unknown scoring policy '{name}'. Available: {', '.join(sorted(POLICIES))}."
        ) from None


def composite_score(
        components: Mapping[str, float],
        policy: ScoringPolicy = STANDARD_POLICY,
        signals: Optional[ResumeSignals] = None,
) -> CompositeScore:
    """
    Weighted merge of component values (0-100 scores or bonus points) under a policy.
    Components the policy does not weight are ignored; weighted components that are
    missing count as 0. Penalties apply only when the policy defines them and signals
    are supplied.
    """
    raw = 0.0
    for name, weight in policy.weights.items():
        value = float(components.get(name, 0.0))
        cap = policy.caps.get(name)
        if cap is not None:
            value = min(value, cap)
        raw += weight * value

    penalties: Dict[str, float] = {}
    if policy.penalties is not None and signals is not None:
        penalties = policy.penalties.evaluate(signals)
    penalty_points = sum(penalties.values())

    lo, hi = policy.clamp
    final = clamp(raw - penalty_points, lo, hi)
    return CompositeScore(
        ats_score=int(clamp(round_half_up(final), lo, hi)),
        raw_score=round(raw, 4),
        penalty_points=round(penalty_points, 4),
        penalties=penalties,
    )


def ats_score(semantic: float, skill_match: float, experience: float, section: float) -> int:
    """Canonical policy: 0.40*semantic + 0.30*skill + 0.20*experience + 0.10*section."""
    return composite_score(
        {SEMANTIC: semantic, SKILL_MATCH: skill_match, EXPERIENCE: experience, SECTION: section},
        STANDARD_POLICY,
    ).ats_score
