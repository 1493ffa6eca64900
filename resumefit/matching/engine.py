from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional, Union

import numpy as np

from resumefit import heuristics
from resumefit.config import EngineConfig, load_engine_config
from resumefit.embedding.cache import JDEmbeddingCache, content_key
from resumefit.embedding.provider import EmbeddingAdapter, EmbeddingProvider
from resumefit.matching.scoring import (
    EDUCATION_BONUS,
    EXPERIENCE,
    EXPERIENCE_BONUS,
    SECTION,
    SECTION_BONUS,
    SEMANTIC,
    SKILL_MATCH,
    STANDARD_POLICY,
    ScoringPolicy,
    composite_score,
    get_policy,
)
from resumefit.matching.similarity import clamped_cosine, semantic_score
from resumefit.models import AnalysisRequest, AnalysisResult, ScoreBreakdown
from resumefit.skills.dictionary import SkillDictionary, load_skill_dictionary
from resumefit.skills.matcher import count_skill_mentions, extract_skills, match_skills

logger = logging.getLogger(__name__)

PolicyRef = Union[str, ScoringPolicy, None]


class ATSEngine:
    """
    Resume vs job-description scoring.

    Collaborators are injected once: the skill dictionary (loaded at startup), the
    embedding provider (model handle created at process start) and the JD cache.
    analyze() is safe to call concurrently; only the cache is shared mutable state.
    """

    def __init__(
            self,
            *,
            provider: EmbeddingProvider,
            dictionary: SkillDictionary,
            cache: Optional[JDEmbeddingCache] = None,
            policy: PolicyRef = None,
            embed_timeout_seconds: Optional[float] = 30.0,
    ) -> None:
        self._embedder = EmbeddingAdapter(provider, timeout_seconds=embed_timeout_seconds)
        self._dictionary = dictionary
        self._cache = cache if cache is not None else JDEmbeddingCache()
        self._policy = _resolve_policy(policy, STANDARD_POLICY)

    @property
    def dictionary(self) -> SkillDictionary:
        return self._dictionary

    @property
    def cache(self) -> JDEmbeddingCache:
        return self._cache

    @property
    def policy(self) -> ScoringPolicy:
        return self._policy

    async def analyze(
            self,
            resume_text: str,
            job_description_text: str,
            *,
            policy: PolicyRef = None,
    ) -> AnalysisResult:
        return await self.analyze_request(
            AnalysisRequest(resume_text=resume_text, job_description_text=job_description_text),
            policy=policy,
        )

    async def analyze_request(self, request: AnalysisRequest, *, policy: PolicyRef = None) -> AnalysisResult:
        # Fail fast: no embedding call for unusable input.
        request.validate()
        active = _resolve_policy(policy, self._policy)
        start = time.perf_counter()

        resume_raw = request.resume_text
        jd_raw = request.job_description_text
        resume_norm = self._dictionary.normalize(resume_raw)
        jd_norm = self._dictionary.normalize(jd_raw)

        # 1) Semantic similarity: both embeddings in flight together, JD through the cache.
        resume_vec, jd_vec = await asyncio.gather(
            self._embedder.embed(resume_norm),
            self._jd_embedding(jd_norm),
        )
        similarity = clamped_cosine(resume_vec, jd_vec)
        semantic = semantic_score(resume_vec, jd_vec)

        # 2) Skills (dictionary-based, deterministic)
        skills = match_skills(
            extract_skills(self._dictionary, resume_norm),
            extract_skills(self._dictionary, jd_norm),
        )

        # 3) Experience (raw text; highest stated figure wins)
        required_years = heuristics.max_years(jd_raw)
        candidate_years = heuristics.max_years(resume_raw)
        exp_score = heuristics.experience_score(candidate_years, required_years)

        # 4) Structure and writing
        sections = heuristics.detect_sections(resume_raw)
        grammar_issues = heuristics.check_grammar(resume_raw)
        skill_ratio = len(skills.matched) / len(skills.jd_skills) if skills.jd_skills else 0.0

        # 5) Composite (strict policy adds bonus points and quality penalties)
        components = {
            SEMANTIC: semantic,
            SKILL_MATCH: skills.percentage,
            EXPERIENCE: exp_score,
            SECTION: sections.section_score,
        }
        signals = None
        if active.needs_signals:
            signals = heuristics.collect_resume_signals(
                resume_raw_text=resume_raw,
                sections=sections,
                jd_skill_mentions=count_skill_mentions(self._dictionary, resume_norm, skills.jd_skills),
                jd_skills=sorted(skills.jd_skills),
                matched_skills=skills.matched,
            )
            contents = heuristics.section_contents(resume_raw)
            listed = extract_skills(self._dictionary, self._dictionary.normalize(contents.get("skills", "")))
            components.update({
                EXPERIENCE_BONUS: heuristics.experience_bonus(sections),
                EDUCATION_BONUS: heuristics.education_bonus(sections),
                SECTION_BONUS: heuristics.section_bonus(contents, listed_skill_count=len(listed)),
            })
        composite = composite_score(components, active, signals)

        result = AnalysisResult(
            ats_score=composite.ats_score,
            breakdown=ScoreBreakdown(
                semantic_score=semantic,
                skill_match_percentage=skills.percentage,
                experience_score=exp_score,
                section_score=sections.section_score,
            ),
            matched_skills=skills.matched,
            missing_skills=skills.missing,
            candidate_years=candidate_years,
            required_years=required_years,
            experience_gap=heuristics.experience_gap(candidate_years, required_years),
            sections=sections,
            policy=active.label,
            penalties=composite.penalties,
            job_role_fit=heuristics.job_role_fit(similarity, skill_ratio),
            grammar_issues=grammar_issues,
            dictionary_version=self._dictionary.version,
        )
        logger.info(
            "Analysis complete: ats=%d policy=%s semantic=%d skills=%d/%d (%.0f ms)",
            result.ats_score, active.label, semantic, len(skills.matched), len(skills.jd_skills),
            (time.perf_counter() - start) * 1000,
        )
        return result

    async def _jd_embedding(self, jd_norm: str) -> np.ndarray:
        key = content_key(jd_norm)
        return await self._cache.get_or_compute(key, lambda: self._embedder.embed(jd_norm))


def _resolve_policy(policy: PolicyRef, default: ScoringPolicy) -> ScoringPolicy:
    if policy is None:
        return default
    if isinstance(policy, ScoringPolicy):
        return policy
    return get_policy(policy)


def create_engine(
        *,
        provider: Optional[EmbeddingProvider] = None,
        config: Optional[EngineConfig] = None,
        dictionary: Optional[SkillDictionary] = None,
) -> ATSEngine:
    """
    Process-start wiring from EngineConfig. Builds the sentence-transformers provider
    only when none is injected.
    """
    cfg = config or load_engine_config()
    if dictionary is None:
        dictionary = load_skill_dictionary(cfg.skills_dictionary_path)
    if provider is None:
        from resumefit.embedding.sentence_transformer import SentenceTransformerProvider
        provider = SentenceTransformerProvider(cfg.embedding_model)
    return ATSEngine(
        provider=provider,
        dictionary=dictionary,
        cache=JDEmbeddingCache(max_entries=cfg.cache_max_entries, ttl_seconds=cfg.cache_ttl_seconds),
        policy=cfg.scoring_policy,
        embed_timeout_seconds=cfg.embed_timeout_seconds,
    )
