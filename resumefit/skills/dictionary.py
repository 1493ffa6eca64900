from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from resumefit.config import DEFAULT_SKILLS_DICTIONARY_PATH
from resumefit.core.text_processing import TextNormalizer, normalize_text
from resumefit.errors import ConfigurationError

logger = logging.getLogger(__name__)

# A skill is "glued" to a neighbour when the neighbour is a letter, digit, '+' or '#'
# (so "java" is not found in "javascript" and "c" is not found in "c++"),
# or a '.' that continues a dotted name ("js" in "node.js").
_SKILL_BEFORE = r"(?<![a-z0-9+#])(?<![a-z0-9]\.)"
_SKILL_AFTER = r"(?![a-z0-9+#])(?!\.[a-z0-9])"

TECHNICAL = "technical"
SOFT = "soft"


def compile_skill_pattern(normalized_skill: str) -> re.Pattern:
    """Flexible internal whitespace, anchored at skill boundaries."""
    body = r"\s+".join(re.escape(part) for part in normalized_skill.split(" "))
    return re.compile(f"{_SKILL_BEFORE}{body}{_SKILL_AFTER}")


@dataclass(frozen=True)
class SkillPattern:
    skill: str
    category: str
    pattern: re.Pattern


@dataclass(frozen=True)
class SkillDictionary:
    """
    Immutable, versioned skill vocabulary.

    Built once at startup via load_skill_dictionary(); every canonical entry is
    already normalized and has its matcher precompiled here, never per request.
    """
    version: str
    technical: FrozenSet[str]
    soft: FrozenSet[str]
    synonyms: Mapping[str, str]
    normalizer: TextNormalizer
    patterns: Tuple[SkillPattern, ...]

    @property
    def canonical_skills(self) -> FrozenSet[str]:
        return self.technical | self.soft

    def normalize(self, raw: str) -> str:
        return self.normalizer.normalize(raw)

    def category_of(self, skill: str) -> Optional[str]:
        if skill in self.technical:
            return TECHNICAL
        if skill in self.soft:
            return SOFT
        return None

    def __len__(self) -> int:
        return len(self.patterns)


def _require_str_list(data: Dict[str, Any], key: str, source: str) -> List[str]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) and v.strip() for v in value):
        raise ConfigurationError(f"Skill dictionary {source}: '{key}' must be a list of non-empty strings.")
    return value


def _require_synonyms(data: Dict[str, Any], source: str) -> Dict[str, str]:
    value = data.get("synonyms", {})
    if not isinstance(value, dict):
        raise ConfigurationError(f"Skill dictionary {source}: 'synonyms' must be an object.")
    for k, v in value.items():
        if not isinstance(k, str) or not k.strip() or not isinstance(v, str) or not v.strip():
            raise ConfigurationError(f"Skill dictionary {source}: synonym entries must map non-empty strings.")
    return value


def build_skill_dictionary(data: Dict[str, Any], *, source: str = "<memory>") -> SkillDictionary:
    """
    Validate a decoded dictionary document and precompile its matchers.
    Raises ConfigurationError on any schema or normalization violation.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(f"Skill dictionary {source}: top level must be an object.")

    version = data.get("version")
    if not isinstance(version, str) or not version.strip():
        raise ConfigurationError(f"Skill dictionary {source}: 'version' must be a non-empty string.")

    technical = _require_str_list(data, TECHNICAL, source)
    soft = _require_str_list(data, SOFT, source)
    synonyms = _require_synonyms(data, source)

    for key, value in synonyms.items():
        if normalize_text(key) != key or normalize_text(value) != value:
            raise ConfigurationError(
                f"Skill dictionary {source}: synonym '{key}' -> '{value}' is not in normalized form."
            )

    normalizer = TextNormalizer(synonyms)

    # Values must survive a second substitution pass, or normalize() stops being idempotent.
    for key, value in synonyms.items():
        if normalizer.apply_synonyms(value) != value:
            raise ConfigurationError(
                f"Skill dictionary {source}: synonym value '{value}' (from '{key}') is itself rewritten by another synonym."
            )

    patterns: List[SkillPattern] = []
    seen = set()
    for category, entries in ((TECHNICAL, technical), (SOFT, soft)):
        for entry in entries:
            if normalizer.normalize(entry) != entry:
                raise ConfigurationError(
                    f"Skill dictionary {source}: entry '{entry}' is not in normalized form "
                    f"(normalizes to '{normalizer.normalize(entry)}')."
                )
            if entry in seen:
                continue
            seen.add(entry)
            patterns.append(SkillPattern(skill=entry, category=category, pattern=compile_skill_pattern(entry)))

    dictionary = SkillDictionary(
        version=version.strip(),
        technical=frozenset(technical),
        soft=frozenset(soft) - frozenset(technical),
        synonyms=MappingProxyType(dict(synonyms)),
        normalizer=normalizer,
        patterns=tuple(patterns),
    )
    logger.debug(
        "Loaded skill dictionary %s from %s: %d skills, %d synonyms",
        dictionary.version, source, len(dictionary.patterns), len(dictionary.synonyms),
    )
    return dictionary


def load_skill_dictionary(path: Optional[Path] = None) -> SkillDictionary:
    """Read the dictionary asset once at startup. Missing or malformed -> ConfigurationError."""
    p = Path(path) if path is not None else DEFAULT_SKILLS_DICTIONARY_PATH
    try:
        raw = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Skill dictionary not readable: {p} ({type(exc).__name__})") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Skill dictionary is not valid JSON: {p} (line {exc.lineno})") from exc
    return build_skill_dictionary(data, source=str(p))
