from .engine import ATSEngine, create_engine
from .scoring import POLICIES, STANDARD_POLICY, STRICT_POLICY, ScoringPolicy, composite_score, get_policy

__all__ = [
    "ATSEngine",
    "create_engine",
    "POLICIES",
    "STANDARD_POLICY",
    "STRICT_POLICY",
    "ScoringPolicy",
    "composite_score",
    "get_policy",
]
