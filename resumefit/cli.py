from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional, Sequence

from resumefit.config import load_engine_config
from resumefit.errors import ConfigurationError, ProviderError, ValidationError
from resumefit.io.text_loader import load_text
from resumefit.llm.feedback import FeedbackResult, default_writer, generate_feedback
from resumefit.matching.engine import create_engine
from resumefit.matching.scoring import POLICIES
from resumefit.models import AnalysisResult

logger = logging.getLogger(__name__)


def print_human_summary(result: AnalysisResult, *, feedback: Optional[FeedbackResult] = None) -> None:
    print("\n=== ResumeFit ATS Analysis ===")
    print(f"ATS score: {result.ats_score}/100  [{result.policy}]")
    print(
        f"Semantic: {result.semantic_score} | Skills: {result.skill_match_percentage}% "
        f"| Experience: {result.experience_score} | Sections: {result.section_score}"
    )
    print(f"Years: candidate {result.candidate_years}, required {result.required_years} (gap {result.experience_gap})")
    print(f"Job role fit: {result.job_role_fit}/100 | Writing issues: {len(result.grammar_issues)}")

    print(f"\nMatched skills ({len(result.matched_skills)}): {', '.join(result.matched_skills) or '-'}")
    print(f"Missing skills ({len(result.missing_skills)}): {', '.join(result.missing_skills) or '-'}")

    missing_sections = result.sections.missing
    if missing_sections:
        print(f"Missing sections: {', '.join(missing_sections)}")

    if result.penalties:
        print("\nPenalties:")
        for name, points in sorted(result.penalties.items()):
            print(f"   -{points:g}  {name}")

    if feedback is not None:
        tag = " [LLM enhanced]" if feedback.enhanced else ""
        print(f"\n--- Feedback{tag} ---")
        print(feedback.text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="resumefit", description="Score a resume against a job description")
    parser.add_argument("--resume", required=True, help="Path to resume .txt")
    parser.add_argument("--jd", required=True, help="Path to job description .txt")
    parser.add_argument("--policy", choices=sorted(POLICIES), default=None,
                        help="Scoring policy (default: RESUMEFIT_SCORING_POLICY or 'standard')")
    parser.add_argument("--json", action="store_true", help="Print JSON only (machine-readable)")
    parser.add_argument("--feedback", action="store_true", help="Append narrative feedback")
    parser.add_argument("--no-enhance", action="store_true",
                        help="Force templated feedback even when RESUMEFIT_LLM_KEY is set")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        resume = load_text(args.resume, field="resume_text")
        jd = load_text(args.jd, field="job_description_text")
    except ValidationError as exc:
        print(f"\n[ResumeFit] {exc}", file=sys.stderr)
        raise SystemExit(2)
    logger.debug("Loaded resume from %s and job description from %s", resume.path, jd.path)

    try:
        engine = create_engine(config=load_engine_config())
        result = asyncio.run(engine.analyze(resume.text, jd.text, policy=args.policy))
    except ValidationError as exc:
        print(f"\n[ResumeFit] Invalid input: {exc}", file=sys.stderr)
        raise SystemExit(2)
    except (ProviderError, ConfigurationError) as exc:
        print(f"\n[ResumeFit] {type(exc).__name__}: {exc}", file=sys.stderr)
        raise SystemExit(1)

    feedback: Optional[FeedbackResult] = None
    if args.feedback:
        writer = None if args.no_enhance else default_writer()
        feedback = generate_feedback(result, writer)

    payload = result.to_dict()
    if feedback is not None:
        payload["feedback"] = {"text": feedback.text, "enhanced": feedback.enhanced}

    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        print_human_summary(result, feedback=feedback)
        print("\nJSON Output:")
        print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
