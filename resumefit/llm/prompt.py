"""
resumefit/llm/prompt.py

Builds the feedback prompt from a finished AnalysisResult.

Constraints:
- The model explains scores; it never computes or changes them
- Only the numeric breakdown and skill lists are sent (no resume or JD text)
- Plain-text output, role-agnostic
"""
from __future__ import annotations

import json

from resumefit.models import AnalysisResult

_SYSTEM_PROMPT = """\
You are an ATS resume coach. \
You must NOT calculate or change any scores. \
Use ONLY the provided numeric scores and lists. \
Return a single plain-text response (no JSON). \
Be specific, practical, and role-agnostic (no guessing role).\
"""

_MAX_MISSING_SKILLS = 15


def feedback_payload(result: AnalysisResult) -> dict:
    return {
        "semantic_score": result.semantic_score,
        "skill_match_percentage": result.skill_match_percentage,
        "missing_skills": list(result.missing_skills[:_MAX_MISSING_SKILLS]),
        "experience_gap": result.experience_gap,
        "section_score": result.section_score,
        "candidate_years": result.candidate_years,
        "required_years": result.required_years,
        "job_role_fit": result.job_role_fit,
        "grammar_issue_count": len(result.grammar_issues),
    }


def build_feedback_prompt(result: AnalysisResult) -> str:
    payload = json.dumps(feedback_payload(result), indent=2)
    return f"""\
Input JSON:
{payload}

Write feedback covering:
- Missing skills explanation
- Resume improvement suggestions
- Grammar & wording improvements
- Section recommendations
- Overall evaluation summary\
"""
