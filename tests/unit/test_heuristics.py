"""
tests/unit/test_heuristics.py

Years-of-experience extraction, section detection, strict-policy bonus points,
writing checks, job role fit and the resume quality signals.
"""
import pytest

from resumefit.heuristics import (
    GrammarIssue,
    check_grammar,
    collect_resume_signals,
    detect_sections,
    education_bonus,
    experience_bonus,
    experience_gap,
    experience_score,
    extract_years,
    has_email,
    has_phone,
    job_role_fit,
    keyword_density,
    max_years,
    section_bonus,
    section_contents,
    word_count,
)


# ------------------------------------------------------------------
# Years
# ------------------------------------------------------------------

@pytest.mark.parametrize("text, expected", [
    ("3 years experience", [3]),
    ("5+ years required", [5]),
    ("10yrs in fintech, 2 YEARS lead", [10, 2]),
    ("no numbers here", []),
    ("", []),
])
def test_extract_years(text, expected):
    assert extract_years(text) == expected


def test_max_years_takes_highest_figure():
    assert max_years("2 years of Go, 7 years of Python") == 7
    assert max_years("fresh graduate") == 0


@pytest.mark.parametrize("candidate, required, expected", [
    (3, 5, 60),
    (5, 5, 100),
    (9, 5, 100),
    (0, 5, 0),
    (0, 0, 100),
    (4, 0, 100),
    (1, 3, 33),
    (2, 3, 67),
])
def test_experience_score(candidate, required, expected):
    assert experience_score(candidate, required) == expected


def test_experience_gap_is_never_negative():
    assert experience_gap(3, 5) == 2
    assert experience_gap(8, 5) == 0
    assert experience_gap(0, 0) == 0


# ------------------------------------------------------------------
# Sections
# ------------------------------------------------------------------

@pytest.mark.parametrize("headings, score", [
    ([], 0),
    (["Skills"], 25),
    (["Skills", "Experience"], 50),
    (["Skills", "Experience", "Projects"], 75),
    (["Skills", "Experience", "Projects", "Education"], 100),
])
def test_section_score_is_25_per_section(headings, score):
    text = "\n".join(["Jane Doe"] + [f"{h}\nsome content" for h in headings])
    assert detect_sections(text).section_score == score


def test_heading_variants_are_recognized():
    text = "## WORK EXPERIENCE ##\n-- Technical Skills --\nAcademic Projects:\nEducation: BSc Physics"
    report = detect_sections(text)
    assert report.experience and report.skills and report.projects and report.education
    assert report.missing == []


def test_heading_words_inside_sentences_do_not_count():
    text = "I have experience with education software and strong skills in teamwork."
    report = detect_sections(text)
    assert report.section_score == 0
    assert report.missing == ["skills", "experience", "projects", "education"]


def test_section_report_to_dict():
    d = detect_sections("Skills\nPython").to_dict()
    assert d == {"skills": True, "experience": False, "projects": False, "education": False, "section_score": 25}


# ------------------------------------------------------------------
# Strict-policy bonus points
# ------------------------------------------------------------------

SAMPLE_RESUME = """Jane Doe
Summary
Backend engineer with eight years building payment APIs and data pipelines.
Skills: Python, SQL
Docker
Experience
Acme Corp 2018-2024
Certifications
AWS Solutions Architect
"""


def test_section_contents_collects_text_under_headings():
    contents = section_contents(SAMPLE_RESUME)
    assert set(contents) == {"summary", "skills", "experience", "certifications"}
    assert contents["skills"] == "Python, SQL\nDocker"
    assert contents["experience"] == "Acme Corp 2018-2024"
    assert contents["certifications"] == "AWS Solutions Architect"


def test_section_contents_ignores_text_before_first_heading():
    assert section_contents("Jane Doe\njane@example.com") == {}


def test_experience_and_education_bonus():
    full = detect_sections("Experience\nEducation")
    assert experience_bonus(full) == 6
    assert education_bonus(full) == 5
    empty = detect_sections("")
    assert experience_bonus(empty) == 0
    assert education_bonus(empty) == 0


def test_section_bonus_awards_each_completeness_signal():
    contents = {"summary": "x" * 51, "projects": "Payments ledger", "certifications": "CKA", "skills": "..."}
    assert section_bonus(contents, listed_skill_count=4) == 8
    assert section_bonus({}, listed_skill_count=10) == 0


def test_section_bonus_thresholds_are_strict():
    contents = {"summary": "x" * 50, "skills": "Python, SQL, Go"}
    assert section_bonus(contents, listed_skill_count=3) == 0
    assert section_bonus(section_contents(SAMPLE_RESUME), listed_skill_count=3) == 2 + 1


# ------------------------------------------------------------------
# Writing checks and role fit
# ------------------------------------------------------------------

def test_check_grammar_flags_lowercase_and_short_sentences():
    text = "led a team of five engineers. Shipped. Built a distributed payments platform! ok?"
    assert check_grammar(text) == (
        GrammarIssue("led a team of five engineers", "Sentence should start with a capital letter"),
        GrammarIssue("Shipped", "Sentence seems too short, consider expanding"),
        GrammarIssue("ok", "Sentence should start with a capital letter"),
        GrammarIssue("ok", "Sentence seems too short, consider expanding"),
    )


def test_check_grammar_clean_and_empty_text():
    assert check_grammar("") == ()
    assert check_grammar("Designed the billing service. Reduced latency by forty percent.") == ()
    assert check_grammar("2019 was a strong year for the team")[0].severity == "low"


@pytest.mark.parametrize("similarity, ratio, expected", [
    (1.0, 0.5, 75),
    (0.0, 0.0, 0),
    (1.0, 1.0, 100),
    (0.333, 0.2, 27),
    (-0.5, 1.5, 50),
])
def test_job_role_fit(similarity, ratio, expected):
    assert job_role_fit(similarity, ratio) == expected


# ------------------------------------------------------------------
# Quality signals
# ------------------------------------------------------------------

def test_contact_detection():
    assert has_email("reach me at jane.doe+jobs@example.co.uk")
    assert not has_email("jane at example dot com")
    assert has_phone("+1 (415) 555-0134")
    assert has_phone("555 123 4567")
    assert not has_phone("Class of 2019")


def test_keyword_density_handles_empty_text():
    assert keyword_density(3, 0) == 0.0
    assert keyword_density(3, 100) == pytest.approx(0.03)


def test_collect_resume_signals():
    raw = "Jane jane@example.com 415-555-0134\nExperience\nEducation\nSkills\nPython"
    signals = collect_resume_signals(
        resume_raw_text=raw,
        sections=detect_sections(raw),
        jd_skill_mentions=1,
        jd_skills=["python", "sql"],
        matched_skills=["python"],
    )
    assert signals.word_count == word_count(raw) == 7
    assert signals.has_email and signals.has_phone
    assert signals.has_core_sections
    assert signals.jd_skill_count == 2
    assert signals.matched_skill_count == 1
    assert signals.keyword_density == pytest.approx(1 / 7)
