"""
resumefit/llm/feedback.py

Narrative feedback on top of a finished score record.

Design principles:
- Secondary path: it explains an AnalysisResult, it never alters one
- Deterministic templated fallback is always available
- LLM call is optional (user-provided key), single call, 10-second hard timeout
- Any LLM failure degrades to the template; the API key never appears in
  logs, exception messages or structured output
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from resumefit import config as _config
from resumefit.llm.prompt import _MAX_MISSING_SKILLS, _SYSTEM_PROMPT, build_feedback_prompt
from resumefit.models import AnalysisResult

logger = logging.getLogger(__name__)

# Top-level optional imports so tests can patch them via module attribute.
# The actual ImportError (if library not installed) is raised at call time.
try:
    import anthropic
except ImportError:
    anthropic = None  # type: ignore[assignment]

try:
    import openai
except ImportError:
    openai = None  # type: ignore[assignment]


_MAX_GRAMMAR_SAMPLES = 3


class FeedbackError(Exception):
    """Raised when LLM feedback fails for any reason (timeout, bad output, API error)."""


class FeedbackWriter(Protocol):
    def write(self, result: AnalysisResult) -> str:
        ...


@dataclass(frozen=True)
class FeedbackResult:
    text: str
    enhanced: bool = False  # True when produced by an LLM


def build_fallback_feedback(result: AnalysisResult) -> str:
    """Deterministic feedback built only from the numeric breakdown."""
    missing = list(result.missing_skills[:_MAX_MISSING_SKILLS])

    parts = [
        f"Overall: Semantic alignment is {result.semantic_score}/100 "
        f"and skill match is {result.skill_match_percentage}/100. "
        f"Job role fit is {result.job_role_fit}/100."
    ]
    if missing:
        parts.append(
            f"Missing skills to consider adding (only if you genuinely have them): {', '.join(missing)}."
        )
    else:
        parts.append("Skills coverage looks strong versus the job description.")

    if result.experience_gap > 0:
        parts.append(
            f"Experience gap: the JD indicates {result.required_years} years; your resume indicates "
            f"{result.candidate_years} years. If applicable, clarify total years and relevant scope."
        )

    if result.section_score < 100:
        missing_sections = ", ".join(s.capitalize() for s in result.sections.missing)
        parts.append(
            f"Resume structure: your section completeness score is {result.section_score}/100. "
            f"Add standard headings for missing sections ({missing_sections})."
        )

    if result.grammar_issues:
        samples = "; ".join(
            f"\"{issue.text}\" -> {issue.suggestion}" for issue in result.grammar_issues[:_MAX_GRAMMAR_SAMPLES]
        )
        parts.append(
            f"Writing: we detected {len(result.grammar_issues)} grammar or basic writing issues. "
            f"For example: {samples}. Proofread your resume or run it through a grammar checker."
        )

    parts.append(
        "Improve wording: lead bullets with strong action verbs, add measurable outcomes, "
        "and mirror the JD terminology naturally (without keyword stuffing)."
    )
    return "\n\n".join(parts)


class LLMFeedbackWriter:
    """
    Calls an LLM (OpenAI or Anthropic) to turn a score breakdown into coaching text.
    Raises FeedbackError on any failure; generate_feedback() handles the fallback.
    """

    _TIMEOUT_SECONDS = 10
    _MAX_TOKENS = 650

    def __init__(
            self,
            *,
            api_key: str,
            model: Optional[str] = None,
            provider: str = "openai",
    ) -> None:
        if not api_key:
            raise FeedbackError("LLM API key must not be empty.")
        self._api_key = api_key
        self._provider = provider.strip().lower()
        self._model = (model or _config.RESUMEFIT_LLM_MODEL).strip()

        if self._provider not in ("anthropic", "openai"):
            raise FeedbackError(
                f"Unsupported provider '{self._provider}'. Use 'anthropic' or 'openai'."
            )

    def write(self, result: AnalysisResult) -> str:
        prompt = build_feedback_prompt(result)
        try:
            if self._provider == "anthropic":
                raw = self._call_anthropic(prompt)
            else:
                raw = self._call_openai(prompt)
        except FeedbackError:
            raise
        except Exception as exc:
            # Sanitize: never let the key propagate through exception messages
            raise FeedbackError(f"LLM call failed: {type(exc).__name__}") from None

        text = (raw or "").strip()
        if not text:
            raise FeedbackError("LLM returned an empty response.")
        return text

    def _call_anthropic(self, prompt: str) -> str:
        if anthropic is None:
            raise FeedbackError("Package 'anthropic' is not installed. Run: pip install anthropic")

        client = anthropic.Anthropic(api_key=self._api_key)
        try:
            message = client.messages.create(
                model=self._model,
                max_tokens=self._MAX_TOKENS,
                timeout=self._TIMEOUT_SECONDS,
                system=_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APITimeoutError:
            raise FeedbackError(f"Anthropic API timed out after {self._TIMEOUT_SECONDS} seconds.") from None
        except anthropic.APIError as exc:
            raise FeedbackError(f"Anthropic API error: {type(exc).__name__}") from None

        for block in message.content:
            if block.type == "text":
                return block.text
        raise FeedbackError("Anthropic returned no text content.")

    def _call_openai(self, prompt: str) -> str:
        if openai is None:
            raise FeedbackError("Package 'openai' is not installed. Run: pip install openai")

        client = openai.OpenAI(api_key=self._api_key, timeout=self._TIMEOUT_SECONDS)
        try:
            response = client.chat.completions.create(
                model=self._model,
                max_tokens=self._MAX_TOKENS,
                temperature=0.7,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
            )
        except openai.APITimeoutError:
            raise FeedbackError(f"OpenAI API timed out after {self._TIMEOUT_SECONDS} seconds.") from None
        except openai.APIError as exc:
            raise FeedbackError(f"OpenAI API error: {type(exc).__name__}") from None

        content = response.choices[0].message.content
        if not content:
            raise FeedbackError("OpenAI returned empty content.")
        return content


def default_writer() -> Optional[LLMFeedbackWriter]:
    """Writer from RESUMEFIT_LLM_* settings, or None when no key is configured."""
    if not _config.llm_configured():
        return None
    try:
        return LLMFeedbackWriter(
            api_key=_config.RESUMEFIT_LLM_KEY or "",
            provider=_config.RESUMEFIT_LLM_PROVIDER,
            model=_config.RESUMEFIT_LLM_MODEL,
        )
    except FeedbackError as exc:
        logger.warning("LLM feedback disabled: %s", exc)
        return None


def generate_feedback(result: AnalysisResult, writer: Optional[FeedbackWriter] = None) -> FeedbackResult:
    """
    LLM feedback when a writer is available, templated feedback otherwise.
    Never raises for writer failures.
    """
    if writer is not None:
        try:
            return FeedbackResult(text=writer.write(result), enhanced=True)
        except Exception as exc:
            logger.warning("LLM feedback failed (%s), using deterministic fallback.", type(exc).__name__)
    return FeedbackResult(text=build_fallback_feedback(result), enhanced=False)
