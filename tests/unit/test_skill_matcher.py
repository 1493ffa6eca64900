import pytest

from resumefit.skills.matcher import count_skill_mentions, extract_skills, match_skills


def test_matched_and_missing_partition_jd_skills():
    m = match_skills({"python", "docker", "git"}, {"python", "sql", "docker"})
    assert m.matched == ("docker", "python")
    assert m.missing == ("sql",)
    assert set(m.matched) | set(m.missing) == m.jd_skills
    assert set(m.matched).isdisjoint(m.missing)
    assert m.percentage == 67


def test_empty_jd_skills_scores_zero():
    m = match_skills({"python"}, set())
    assert m.matched == ()
    assert m.missing == ()
    assert m.percentage == 0


def test_half_rounds_up():
    m = match_skills({"a"}, {"a", "b"})
    assert m.percentage == 50
    m = match_skills({"a", "b", "c", "d", "e", "f", "g"}, {c for c in "abcdefgh"})
    assert m.percentage == 88  # 87.5


def test_resume_only_skills_do_not_affect_percentage():
    assert match_skills({"python", "rust", "go"}, {"python"}).percentage == 100


def test_extract_skills_on_empty_text(skill_dictionary):
    assert extract_skills(skill_dictionary, "") == frozenset()


@pytest.mark.parametrize("raw, expected", [
    ("Python, SQL required", {"python", "sql"}),
    ("Postgres and K8s", {"postgresql", "kubernetes"}),
    ("Built REST APIs on AWS", {"rest api", "aws"}),
])
def test_extract_skills_from_raw_text(skill_dictionary, raw, expected):
    assert extract_skills(skill_dictionary, skill_dictionary.normalize(raw)) == expected


def test_count_skill_mentions_counts_every_occurrence(skill_dictionary):
    text = skill_dictionary.normalize("Python python PYTHON and SQL; also Java")
    assert count_skill_mentions(skill_dictionary, text, {"python", "sql"}) == 4
    assert count_skill_mentions(skill_dictionary, text, set()) == 0
