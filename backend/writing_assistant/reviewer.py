"""
Rubric-based review of essays and thesis chapters.

Prompts are built from the bundled marking schemes and sent to Gemini with a
response schema, so the model answers with one JSON object holding an overall
score, a summary and per-criterion feedback. Each criterion carries a verbatim
quote from the student's text which the client uses for highlighting.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .academic_data import EssayMarkingSchemeItem, MarkingSchemeItem, find_essay_rubric, find_thesis_rubric
from .gemini_client import GeminiClient
from .settings import settings

logger = logging.getLogger(__name__)

REVIEW_TEMPERATURE = 0.3


class ReviewFormatError(ValueError):
	"""The model answered, but not with a usable review object."""


class ReviewCriterionFeedback(BaseModel):
	criterion: str
	score: str
	feedback: str
	quote: str


class ReviewFeedback(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	overall_score: str = Field(alias="overallScore")
	overall_summary: str = Field(alias="overallSummary")
	criteria_feedback: List[ReviewCriterionFeedback] = Field(alias="criteriaFeedback")


class QuoteAnchor(BaseModel):
	criterion: str
	quote: str
	found: bool
	start: int
	end: int


class TextSegment(BaseModel):
	text: str
	highlighted: bool = False


REVIEW_RESPONSE_SCHEMA: Dict[str, Any] = {
	"type": "OBJECT",
	"properties": {
		"overallScore": {"type": "STRING", "description": "The final, overall score for the text based on the rubric."},
		"overallSummary": {"type": "STRING", "description": "A summary of the text's main strengths and areas for improvement."},
		"criteriaFeedback": {
			"type": "ARRAY",
			"description": "An array of feedback objects, one for each criterion in the rubric.",
			"items": {
				"type": "OBJECT",
				"properties": {
					"criterion": {"type": "STRING", "description": "The name of the rubric criterion being evaluated."},
					"score": {"type": "STRING", "description": "The score awarded for this specific criterion."},
					"feedback": {"type": "STRING", "description": "Detailed justification and feedback for the score given for this criterion."},
					"quote": {
						"type": "STRING",
						"description": "The exact sentence or short paragraph from the original text that this feedback refers to. This must be a direct quote and an exact substring of the original text.",
					},
				},
				"required": ["criterion", "score", "feedback", "quote"],
			},
		},
	},
	"required": ["overallScore", "overallSummary", "criteriaFeedback"],
}

_QUOTE_RULE = (
	"For each criterion in 'criteriaFeedback', you MUST include a 'quote' field containing the exact sentence or "
	"short paragraph from the student's text that your feedback directly refers to. This quote is crucial as it "
	"will be used to highlight the text for the user, so it must be an exact substring."
)

ESSAY_SYSTEM_INSTRUCTION = (
	"You are a university-level academic writing assistant. Your task is to provide a detailed, rubric-based "
	"evaluation of a student's essay. You must adhere strictly to the provided rubric, be critical but fair, and "
	"provide your entire response in the specified JSON format. " + _QUOTE_RULE
)

THESIS_SYSTEM_INSTRUCTION = (
	"You are an expert academic advisor and examiner. Your task is to provide a detailed, rubric-based evaluation "
	"of a student's thesis chapter. You must adhere strictly to the provided rubric for the specified academic "
	"level, be rigorous and fair, and provide your entire response in the specified JSON format. " + _QUOTE_RULE
)


def build_essay_prompt(text: str, essay_type: str, level: str, rubric: EssayMarkingSchemeItem) -> str:
	return f"""
**ACADEMIC LEVEL:**
{level}

**ESSAY TYPE TO EVALUATE:**
{essay_type}

**EVALUATION RUBRIC:**
{rubric.core_rubric}

**PENALTY TRIGGERS TO BE AWARE OF:**
{rubric.penalty_triggers}

**STUDENT'S ESSAY TEXT:**
---
{text}
---

Please provide your evaluation in the specified JSON format. Ensure every feedback item has an associated 'quote'.
""".strip()


def build_thesis_prompt(text: str, level: str, chapter: str, rubric: MarkingSchemeItem) -> str:
	return f"""
**ACADEMIC LEVEL:**
{level}

**THESIS CHAPTER TO EVALUATE:**
{chapter}

**EVALUATION RUBRIC:**
{rubric.core_rubric}

**HARSH PENALTY TRIGGERS:**
{rubric.penalty_triggers}

**STUDENT'S CHAPTER TEXT:**
---
{text}
---

Please provide your evaluation in the specified JSON format. Ensure every feedback item has an associated 'quote'.
""".strip()


def strip_code_fence(text: str) -> str:
	s = (text or "").strip()
	if s.startswith("```json"):
		s = s[7:]
		if s.endswith("```"):
			s = s[:-3]
	elif s.startswith("```"):
		s = s[3:]
		if s.endswith("```"):
			s = s[:-3]
	return s.strip()


def parse_review_json(text: str) -> ReviewFeedback:
	body = strip_code_fence(text)
	try:
		data = json.loads(body)
	except json.JSONDecodeError:
		# Some replies wrap the object in prose
		match = re.search(r"\{[\s\S]*\}", body)
		if not match:
			raise ReviewFormatError("Model output is not JSON")
		try:
			data = json.loads(match.group(0))
		except json.JSONDecodeError as e:
			raise ReviewFormatError(f"Model output is not JSON: {e}") from e
	try:
		return ReviewFeedback.model_validate(data)
	except ValidationError as e:
		raise ReviewFormatError(f"Model output does not match the review schema: {e}") from e


async def _request_review(client: GeminiClient, prompt: str, system_instruction: str) -> ReviewFeedback:
	text = await client.generate(
		prompt,
		model=settings.gemini_review_model,
		system_instruction=system_instruction,
		response_mime_type="application/json",
		response_schema=REVIEW_RESPONSE_SCHEMA,
		temperature=REVIEW_TEMPERATURE,
	)
	return parse_review_json(text)


async def review_essay(client: GeminiClient, text: str, essay_type: str, level: str) -> ReviewFeedback:
	"""Review an essay against the marking scheme for its type and level.

	Raises RubricNotFoundError before any model call when the level or type is
	unknown.
	"""
	rubric = find_essay_rubric(level, essay_type)
	prompt = build_essay_prompt(text, essay_type, level, rubric)
	return await _request_review(client, prompt, ESSAY_SYSTEM_INSTRUCTION)


async def review_thesis_chapter(client: GeminiClient, text: str, level: str, chapter: str) -> ReviewFeedback:
	rubric = find_thesis_rubric(level, chapter)
	prompt = build_thesis_prompt(text, level, chapter, rubric)
	return await _request_review(client, prompt, THESIS_SYSTEM_INSTRUCTION)


def highlight_segments(text: str, quote: str | None) -> List[TextSegment]:
	"""Split text around every occurrence of quote, flagging the occurrences."""
	if not quote or quote not in text:
		return [TextSegment(text=text)]
	parts = re.split(f"({re.escape(quote)})", text)
	# Capturing split puts the delimiters at odd indexes
	return [TextSegment(text=part, highlighted=i % 2 == 1) for i, part in enumerate(parts) if part]


def anchor_quotes(text: str, feedback: ReviewFeedback) -> List[QuoteAnchor]:
	anchors: List[QuoteAnchor] = []
	for item in feedback.criteria_feedback:
		start = text.find(item.quote) if item.quote else -1
		found = start >= 0
		if not found:
			logger.debug("Quote for criterion %r not found in submitted text", item.criterion)
		anchors.append(
			QuoteAnchor(
				criterion=item.criterion,
				quote=item.quote,
				found=found,
				start=start,
				end=start + len(item.quote) if found else -1,
			)
		)
	return anchors
