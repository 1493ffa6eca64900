# resumefit/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# --- Embedding model ---

# mpnet-base with mean pooling; vectors are L2-normalized on encode.
RESUMEFIT_EMBEDDING_MODEL: str = (
        os.environ.get("RESUMEFIT_EMBEDDING_MODEL", "").strip()
        or "sentence-transformers/all-mpnet-base-v2"
)

# --- Skill dictionary ---

DEFAULT_SKILLS_DICTIONARY_PATH = Path(__file__).parent / "skills" / "data" / "skills.dictionary.json"

# --- JD embedding cache (30 minutes, 100 entries) ---

JD_CACHE_MAX_DEFAULT = 100
JD_CACHE_TTL_SECONDS_DEFAULT = 30 * 60

# --- Provider guardrails ---

EMBED_TIMEOUT_SECONDS_DEFAULT = 30.0


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = (os.getenv(name) or "").strip()
    return Path(raw) if raw else default


@dataclass(frozen=True)
class EngineConfig:
    embedding_model: str
    embed_timeout_seconds: float
    cache_max_entries: int
    cache_ttl_seconds: float
    skills_dictionary_path: Path
    scoring_policy: str


def load_engine_config() -> EngineConfig:
    """Read engine settings from the environment. Malformed numbers fall back to defaults."""
    return EngineConfig(
        embedding_model=(os.getenv("RESUMEFIT_EMBEDDING_MODEL") or "").strip() or RESUMEFIT_EMBEDDING_MODEL,
        embed_timeout_seconds=_env_float("RESUMEFIT_EMBED_TIMEOUT_SECONDS", EMBED_TIMEOUT_SECONDS_DEFAULT),
        cache_max_entries=max(1, _env_int("RESUMEFIT_JD_CACHE_MAX", JD_CACHE_MAX_DEFAULT)),
        cache_ttl_seconds=_env_float("RESUMEFIT_JD_CACHE_TTL_SECONDS", float(JD_CACHE_TTL_SECONDS_DEFAULT)),
        skills_dictionary_path=_env_path("RESUMEFIT_SKILLS_DICTIONARY", DEFAULT_SKILLS_DICTIONARY_PATH),
        scoring_policy=(os.getenv("RESUMEFIT_SCORING_POLICY") or "standard").strip().lower(),
    )


# --- LLM feedback (secondary, optional) ---

# User-provided API key for narrative feedback.
# Never logged, never written to disk, never included in structured output.
RESUMEFIT_LLM_KEY: Optional[str] = os.environ.get("RESUMEFIT_LLM_KEY") or None

# Provider selection: "openai" | "anthropic"  (default: openai)
RESUMEFIT_LLM_PROVIDER: str = os.environ.get("RESUMEFIT_LLM_PROVIDER", "openai").strip().lower()

_DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-sonnet-4-6",
}
RESUMEFIT_LLM_MODEL: str = (
        os.environ.get("RESUMEFIT_LLM_MODEL", "").strip()
        or _DEFAULT_MODELS.get(RESUMEFIT_LLM_PROVIDER, "gpt-4o-mini")
)


def llm_configured() -> bool:
    return bool(RESUMEFIT_LLM_KEY)
