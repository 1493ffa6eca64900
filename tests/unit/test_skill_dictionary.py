"""
tests/unit/test_skill_dictionary.py

Loading and validation of the skill dictionary asset, plus boundary-aware matching.
"""
import json

import pytest

from resumefit.errors import ConfigurationError
from resumefit.skills.dictionary import SOFT, TECHNICAL, build_skill_dictionary, load_skill_dictionary
from resumefit.skills.matcher import extract_skills


def _doc(**overrides):
    doc = {
        "version": "test-1",
        "technical": ["python", "java", "javascript", "sql", "mysql", "c", "c++", "node.js"],
        "soft": ["communication"],
        "synonyms": {"js": "javascript"},
    }
    doc.update(overrides)
    return doc


def _skills(d, raw):
    return extract_skills(d, d.normalize(raw))


# ------------------------------------------------------------------
# Loading
# ------------------------------------------------------------------

def test_packaged_dictionary_loads(skill_dictionary):
    assert skill_dictionary.version
    assert "python" in skill_dictionary.technical
    assert "communication" in skill_dictionary.soft
    assert skill_dictionary.category_of("python") == TECHNICAL
    assert skill_dictionary.category_of("communication") == SOFT
    assert skill_dictionary.category_of("cobol") is None
    assert len(skill_dictionary) == len(skill_dictionary.canonical_skills)


def test_missing_file_raises_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        load_skill_dictionary(tmp_path / "nope.json")


def test_invalid_json_raises_configuration_error(tmp_path):
    p = tmp_path / "skills.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="not valid JSON"):
        load_skill_dictionary(p)


def test_load_from_custom_path(tmp_path):
    p = tmp_path / "skills.json"
    p.write_text(json.dumps(_doc()), encoding="utf-8")
    d = load_skill_dictionary(p)
    assert d.version == "test-1"


@pytest.mark.parametrize("overrides", [
    {"version": ""},
    {"version": 3},
    {"technical": "python"},
    {"technical": ["python", ""]},
    {"synonyms": ["js"]},
    {"synonyms": {"js": ""}},
])
def test_schema_violations_raise(overrides):
    with pytest.raises(ConfigurationError):
        build_skill_dictionary(_doc(**overrides))


def test_non_normalized_entry_raises():
    with pytest.raises(ConfigurationError, match="normalized form"):
        build_skill_dictionary(_doc(technical=["Python"]))


def test_non_normalized_synonym_raises():
    with pytest.raises(ConfigurationError, match="normalized form"):
        build_skill_dictionary(_doc(synonyms={"JS": "javascript"}))


def test_unstable_synonym_value_raises():
    # "py" -> "py lang", which is itself a key
    with pytest.raises(ConfigurationError, match="rewritten"):
        build_skill_dictionary(_doc(synonyms={"py": "py lang", "py lang": "python"}))


def test_entry_that_a_synonym_rewrites_raises():
    with pytest.raises(ConfigurationError):
        build_skill_dictionary(_doc(technical=["js"]))


def test_duplicate_entries_are_collapsed():
    d = build_skill_dictionary(_doc(technical=["python", "python"], soft=["python"]))
    assert len(d) == 1
    assert d.soft == frozenset()


# ------------------------------------------------------------------
# Boundary-aware matching
# ------------------------------------------------------------------

def test_java_not_found_inside_javascript():
    d = build_skill_dictionary(_doc())
    assert _skills(d, "JavaScript developer") == {"javascript"}


def test_sql_not_found_inside_mysql():
    d = build_skill_dictionary(_doc())
    assert _skills(d, "MySQL administration") == {"mysql"}


def test_c_and_cpp_are_distinct():
    d = build_skill_dictionary(_doc())
    assert _skills(d, "Modern C++ (C++17)") == {"c++"}
    assert _skills(d, "Embedded C, some Java") == {"c", "java"}


def test_synonym_feeds_canonical_match():
    d = build_skill_dictionary(_doc())
    assert _skills(d, "JS, Node.js") == {"javascript", "node.js"}


def test_multi_word_skill_tolerates_line_break(skill_dictionary):
    found = _skills(skill_dictionary, "Applied machine\nlearning and strong problem-solving")
    assert {"machine learning", "problem solving"} <= found


def test_skill_followed_by_sentence_period_still_matches(skill_dictionary):
    assert "python" in _skills(skill_dictionary, "I write Python.")
