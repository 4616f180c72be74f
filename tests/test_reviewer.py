"""
Test: review prompt building, JSON parsing, quote highlighting and anchoring.
"""
import asyncio
import json

import pytest

from writing_assistant.academic_data import UNDERGRADUATE, RubricNotFoundError, find_essay_rubric, find_thesis_rubric
from writing_assistant.reviewer import (
    ESSAY_SYSTEM_INSTRUCTION,
    REVIEW_RESPONSE_SCHEMA,
    THESIS_SYSTEM_INSTRUCTION,
    ReviewFeedback,
    ReviewFormatError,
    anchor_quotes,
    build_essay_prompt,
    build_thesis_prompt,
    highlight_segments,
    parse_review_json,
    review_essay,
    review_thesis_chapter,
    strip_code_fence,
)

ESSAY = "Cities are warmer than the countryside. Dark surfaces absorb sunlight. Trees help."

REVIEW = {
    "overallScore": "68/100",
    "overallSummary": "Clear but thin on evidence.",
    "criteriaFeedback": [
        {"criterion": "Thesis clarity", "score": "15/20", "feedback": "Clear.", "quote": "Cities are warmer than the countryside."},
        {"criterion": "Evidence", "score": "12/30", "feedback": "Needs data.", "quote": "Not in the essay."},
    ],
}


class TestParseReviewJson:
    def test_plain_json(self):
        feedback = parse_review_json(json.dumps(REVIEW))
        assert feedback.overall_score == "68/100"
        assert len(feedback.criteria_feedback) == 2

    def test_json_fence(self):
        feedback = parse_review_json("```json\n" + json.dumps(REVIEW) + "\n```")
        assert feedback.overall_summary == "Clear but thin on evidence."

    def test_bare_fence(self):
        feedback = parse_review_json("```\n" + json.dumps(REVIEW) + "\n```")
        assert feedback.criteria_feedback[0].criterion == "Thesis clarity"

    def test_object_inside_prose(self):
        feedback = parse_review_json("Here is the review: " + json.dumps(REVIEW) + " Hope it helps.")
        assert feedback.overall_score == "68/100"

    def test_not_json(self):
        with pytest.raises(ReviewFormatError):
            parse_review_json("I cannot review this.")

    def test_missing_required_key(self):
        broken = {k: v for k, v in REVIEW.items() if k != "overallSummary"}
        with pytest.raises(ReviewFormatError):
            parse_review_json(json.dumps(broken))

    def test_criterion_missing_quote(self):
        broken = json.loads(json.dumps(REVIEW))
        del broken["criteriaFeedback"][0]["quote"]
        with pytest.raises(ReviewFormatError):
            parse_review_json(json.dumps(broken))


def test_strip_code_fence_leaves_plain_text():
    assert strip_code_fence('  {"a": 1}  ') == '{"a": 1}'


def test_feedback_serialises_with_camel_case_keys():
    feedback = parse_review_json(json.dumps(REVIEW))
    dumped = feedback.model_dump(by_alias=True)
    assert set(dumped) == {"overallScore", "overallSummary", "criteriaFeedback"}


class TestPrompts:
    def test_essay_prompt_sections(self):
        rubric = find_essay_rubric(UNDERGRADUATE, "Cause and effect")
        prompt = build_essay_prompt(ESSAY, "Cause and effect", UNDERGRADUATE, rubric)
        assert "**ACADEMIC LEVEL:**\nUndergraduate" in prompt
        assert "**ESSAY TYPE TO EVALUATE:**\nCause and effect" in prompt
        assert rubric.core_rubric in prompt
        assert "**PENALTY TRIGGERS TO BE AWARE OF:**" in prompt
        assert f"---\n{ESSAY}\n---" in prompt

    def test_thesis_prompt_sections(self):
        rubric = find_thesis_rubric(UNDERGRADUATE, "Introduction")
        prompt = build_thesis_prompt(ESSAY, UNDERGRADUATE, "Introduction", rubric)
        assert "**THESIS CHAPTER TO EVALUATE:**\nIntroduction" in prompt
        assert "**HARSH PENALTY TRIGGERS:**" in prompt
        assert "**STUDENT'S CHAPTER TEXT:**" in prompt

    def test_system_instructions_demand_exact_quotes(self):
        for instruction in (ESSAY_SYSTEM_INSTRUCTION, THESIS_SYSTEM_INSTRUCTION):
            assert "exact substring" in instruction

    def test_schema_requires_quote(self):
        item = REVIEW_RESPONSE_SCHEMA["properties"]["criteriaFeedback"]["items"]
        assert "quote" in item["required"]


class TestHighlightSegments:
    def test_no_quote(self):
        segments = highlight_segments(ESSAY, None)
        assert [(s.text, s.highlighted) for s in segments] == [(ESSAY, False)]

    def test_quote_not_found(self):
        segments = highlight_segments(ESSAY, "Oceans are cold.")
        assert len(segments) == 1 and not segments[0].highlighted

    def test_every_occurrence_is_flagged(self):
        text = "A cat. A dog. A cat."
        segments = highlight_segments(text, "A cat.")
        assert [(s.text, s.highlighted) for s in segments] == [
            ("A cat.", True),
            (" A dog. ", False),
            ("A cat.", True),
        ]

    def test_regex_characters_are_literal(self):
        text = "Is it (really) true? Yes."
        segments = highlight_segments(text, "(really) true?")
        assert [s.text for s in segments if s.highlighted] == ["(really) true?"]
        assert "".join(s.text for s in segments) == text


def test_anchor_quotes_marks_missing_quotes():
    feedback = ReviewFeedback.model_validate(REVIEW)
    anchors = anchor_quotes(ESSAY, feedback)
    assert anchors[0].found and anchors[0].start == 0
    assert anchors[0].end == len("Cities are warmer than the countryside.")
    assert not anchors[1].found and anchors[1].start == -1 and anchors[1].end == -1


def test_review_essay_uses_review_model_and_schema(fake_gemini):
    fake_gemini.text_reply = json.dumps(REVIEW)
    feedback = asyncio.run(review_essay(fake_gemini, ESSAY, "Cause and effect", UNDERGRADUATE))
    assert feedback.overall_score == "68/100"
    name, prompt, kwargs = fake_gemini.calls[0]
    assert name == "generate"
    assert kwargs["model"] == "gemini-2.5-pro"
    assert kwargs["response_mime_type"] == "application/json"
    assert kwargs["response_schema"] is REVIEW_RESPONSE_SCHEMA
    assert kwargs["temperature"] == 0.3
    assert kwargs["system_instruction"] == ESSAY_SYSTEM_INSTRUCTION


def test_review_thesis_unknown_chapter_skips_model(fake_gemini):
    with pytest.raises(RubricNotFoundError):
        asyncio.run(review_thesis_chapter(fake_gemini, ESSAY, UNDERGRADUATE, "Prologue"))
    assert fake_gemini.calls == []
