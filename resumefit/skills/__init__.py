from .dictionary import SkillDictionary, build_skill_dictionary, load_skill_dictionary
from .matcher import SkillMatch, count_skill_mentions, extract_skills, match_skills

__all__ = [
    "SkillDictionary",
    "build_skill_dictionary",
    "load_skill_dictionary",
    "SkillMatch",
    "count_skill_mentions",
    "extract_skills",
    "match_skills",
]
