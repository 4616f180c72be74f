"""
Test: bundled reference data and rubric lookups.
"""
import pytest

from writing_assistant.academic_data import (
    COMMON_ESSAY_TYPES,
    ESSAY_MARKING_SCHEME,
    MASTERS,
    THESIS_MARKING_SCHEME,
    UNDERGRADUATE,
    RubricNotFoundError,
    essay_types_for,
    example_essay,
    find_essay_rubric,
    find_thesis_rubric,
    full_text_context,
    thesis_chapters_for,
)


class TestFindEssayRubric:
    def test_known_type(self):
        rubric = find_essay_rubric(UNDERGRADUATE, "Reflective")
        assert rubric.type == "Reflective"
        assert "theory" in rubric.core_rubric

    def test_unknown_level(self):
        with pytest.raises(RubricNotFoundError) as exc:
            find_essay_rubric("Doctoral", "Reflective")
        assert str(exc.value) == "Doctoral marking scheme not found."

    def test_unknown_type(self):
        with pytest.raises(RubricNotFoundError) as exc:
            find_essay_rubric(MASTERS, "Haiku")
        assert str(exc.value) == 'Rubric for essay type "Haiku" at Master’s level not found.'

    def test_is_a_lookup_error(self):
        assert issubclass(RubricNotFoundError, LookupError)


class TestFindThesisRubric:
    def test_known_chapter(self):
        rubric = find_thesis_rubric("Doctoral", "Methodology")
        assert rubric.chapter == "Methodology"
        assert "viva" in rubric.core_rubric

    def test_unknown_level(self):
        with pytest.raises(RubricNotFoundError) as exc:
            find_thesis_rubric("High School", "Introduction")
        assert str(exc.value) == "High School thesis marking scheme not found."

    def test_unknown_chapter(self):
        with pytest.raises(RubricNotFoundError) as exc:
            find_thesis_rubric(UNDERGRADUATE, "Appendix")
        assert "Appendix" in str(exc.value)


def test_example_essay_is_argumentative():
    essay = example_essay()
    assert essay.type == "Argumentative / persuasive"
    assert essay.level == UNDERGRADUATE
    assert essay.example_essay.text


def test_undergraduate_rubrics_cover_listed_essay_types():
    listed = {e.type for e in COMMON_ESSAY_TYPES if e.level == UNDERGRADUATE}
    assert set(essay_types_for(UNDERGRADUATE)) == listed


def test_thesis_chapters_match_across_levels():
    chapters = [thesis_chapters_for(s.level) for s in THESIS_MARKING_SCHEME]
    assert all(c == chapters[0] for c in chapters)
    assert chapters[0][0] == "Abstract"


def test_unknown_level_lists_nothing():
    assert essay_types_for("Nursery") == []
    assert thesis_chapters_for("Nursery") == []


def test_penalty_triggers_are_newline_separated():
    for scheme in ESSAY_MARKING_SCHEME:
        for item in scheme.items:
            assert len(item.penalty_triggers.splitlines()) >= 2


def test_full_text_context_mentions_every_section():
    context = full_text_context()
    for heading in ("Common Essay Types", "Thesis Formats", "Thesis Marking Scheme",
                    "Essay Marking Scheme", "Writing Tips"):
        assert heading in context
    assert "Literature review" in context
    assert "Penalty triggers" in context
