from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, Optional

# NOTE: This module is intentionally "core infrastructure".
# The skill matcher, the embedding input and the dictionary loader all depend on
# this one normalization so lexical and semantic signals see the same text.

# "de-\nveloper" -> "developer" (line-wrap hyphenation from PDF extraction)
_HYPHEN_WRAP_RE = re.compile(r"([a-zA-Z])-[ \t]*\r?\n\s*([a-zA-Z])")

# Bullet glyphs and non-breaking spaces become plain spaces.
_BULLETS_RE = re.compile("[\u2022\u2023\u25aa\u25ab\u25cf\u25e6\u2043\u2219\u00b7\u00a0\u2007\u202f]")

# Keep letters, digits, whitespace and the symbols used inside skill names
# (c++, c#, node.js, ci/cd, t-sql).
_SPECIAL_RE = re.compile(r"[^a-z0-9\s+#./-]")

# Characters that can survive normalization as part of a token. A synonym key only
# matches when it is not glued to one of these, so "js" never fires inside "node.js".
_TOKEN_CHARS = "a-z0-9+#/\\-"
_SYNONYM_BEFORE = rf"(?<![{_TOKEN_CHARS}.])"
_SYNONYM_AFTER = rf"(?![{_TOKEN_CHARS}])(?!\.[a-z0-9])"


def normalize_whitespace(text: str) -> str:
    return " ".join((text or "").split()).strip()


def clean_artifacts(text: str) -> str:
    """Rejoin hyphenated line wraps and blank out bullets / NBSP."""
    t = _HYPHEN_WRAP_RE.sub(r"\1\2", text or "")
    t = _BULLETS_RE.sub(" ", t)
    return t.replace("\r\n", "\n")


def strip_special_chars(text: str) -> str:
    return _SPECIAL_RE.sub(" ", text or "")


def compile_synonym_pattern(synonyms: Mapping[str, str]) -> Optional[re.Pattern]:
    """
    One alternation for all synonym keys, longest first, so substitution is a single
    left-to-right pass (no chained rewrites such as a -> b -> c).
    """
    keys = sorted((k for k in synonyms if k), key=lambda k: (-len(k), k))
    if not keys:
        return None
    alternation = "|".join(re.escape(k) for k in keys)
    return re.compile(f"{_SYNONYM_BEFORE}(?:{alternation}){_SYNONYM_AFTER}")


class TextNormalizer:
    """
    Deterministic, idempotent canonicalization of raw resume / job text.

    Steps:
      a) rejoin hyphenated line-wrap breaks
      b) bullets + NBSP -> spaces
      c) lowercase
      d) word-boundary synonym substitution (short forms -> canonical forms)
      e) drop everything except letters, digits, whitespace and + # . / -
      f) collapse whitespace, trim

    Substitution (d) runs over the stripped, collapsed text. Every stripped character
    already counts as a boundary for a synonym key, so single-word keys behave the
    same either way, and multi-word keys cannot appear only on a second pass.
    Synonym values are already normalized (enforced by the dictionary loader).
    """

    def __init__(self, synonyms: Optional[Mapping[str, str]] = None) -> None:
        self._synonyms = MappingProxyType(dict(synonyms or {}))
        self._pattern = compile_synonym_pattern(self._synonyms)

    @property
    def synonyms(self) -> Mapping[str, str]:
        return self._synonyms

    def apply_synonyms(self, lowered: str) -> str:
        if self._pattern is None or not lowered:
            return lowered
        return self._pattern.sub(lambda m: self._synonyms[m.group(0)], lowered)

    def normalize(self, raw: str) -> str:
        if not raw:
            return ""
        t = clean_artifacts(raw)
        t = t.lower()
        t = normalize_whitespace(strip_special_chars(t))
        return self.apply_synonyms(t)

    __call__ = normalize


_PLAIN = TextNormalizer()


def normalize_text(raw: str) -> str:
    """Normalization without synonym substitution (steps a-c, e-f)."""
    return _PLAIN.normalize(raw)
