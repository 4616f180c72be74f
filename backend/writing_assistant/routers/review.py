from __future__ import annotations
import json
import logging
from datetime import datetime
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..academic_data import (
	ESSAY_MARKING_SCHEME,
	THESIS_MARKING_SCHEME,
	UNDERGRADUATE,
	RubricNotFoundError,
	essay_types_for,
	example_essay,
	find_essay_rubric,
	find_thesis_rubric,
	thesis_chapters_for,
)
from ..db import get_db
from ..gemini_client import GeminiClient, get_gemini_client
from ..models import ReviewDraft, ReviewRecord
from ..reviewer import (
	QuoteAnchor,
	ReviewFeedback,
	TextSegment,
	anchor_quotes,
	highlight_segments,
	review_essay,
	review_thesis_chapter,
)
from ..settings import settings
from .auth import User, consume_request, get_current_user

router = APIRouter(prefix="/review", tags=["review"])

logger = logging.getLogger(__name__)

EMPTY_TEXT_DETAIL = "Please provide some text by typing, pasting, or uploading a file."
ESSAY_FAILURE_DETAIL = "Failed to get essay review from AI. The model may have returned an invalid format or an error occurred."
THESIS_FAILURE_DETAIL = "Failed to get thesis chapter review from AI. The model may have returned an invalid format or an error occurred."

ReviewMode = Literal["essay", "thesis"]


class ReviewOptions(BaseModel):
	essay_levels: List[str]
	essay_types: Dict[str, List[str]]
	thesis_levels: List[str]
	thesis_chapters: Dict[str, List[str]]
	default_essay_level: str
	default_essay_type: str
	default_thesis_level: str
	default_thesis_chapter: str


class ExampleResponse(BaseModel):
	review_mode: ReviewMode = "essay"
	level: str
	essay_type: str
	title: str
	text: str


class EssayReviewRequest(BaseModel):
	text: str
	essay_type: str
	level: str = UNDERGRADUATE


class ThesisReviewRequest(BaseModel):
	text: str
	level: str = UNDERGRADUATE
	chapter: str


class ReviewResponse(BaseModel):
	feedback: ReviewFeedback
	anchors: List[QuoteAnchor]


class HighlightRequest(BaseModel):
	text: str
	quote: Optional[str] = None


class Draft(BaseModel):
	review_mode: ReviewMode = "essay"
	essay_text: str = ""
	selected_essay_level: Optional[str] = None
	selected_essay_type: Optional[str] = None
	selected_thesis_level: Optional[str] = None
	selected_thesis_chapter: Optional[str] = None


class HistoryItem(BaseModel):
	id: int
	review_mode: str
	level: str
	target: str
	overall_score: Optional[str] = None
	created_at: datetime


def _first(items: List[str]) -> str:
	return items[0] if items else ""


def _clean_text(text: str) -> str:
	if not (text or "").strip():
		raise HTTPException(status_code=400, detail=EMPTY_TEXT_DETAIL)
	if len(text) > settings.max_review_chars:
		raise HTTPException(status_code=413, detail=f"Text is too long; the limit is {settings.max_review_chars} characters")
	return text


def _require_rubric(lookup, *args) -> None:
	# Unknown rubrics are rejected before the request is counted
	try:
		lookup(*args)
	except RubricNotFoundError as e:
		raise HTTPException(status_code=404, detail=str(e))


def _record_review(db: Session, username: str, mode: str, level: str, target: str, text: str, feedback: ReviewFeedback, anchors: List[QuoteAnchor]) -> None:
	row = ReviewRecord(
		username=username,
		review_mode=mode,
		level=level,
		target=target,
		text_excerpt=text[:500],
		overall_score=feedback.overall_score,
		feedback_json=feedback.model_dump_json(by_alias=True),
		anchors_json=json.dumps([a.model_dump() for a in anchors]),
	)
	db.add(row)
	db.commit()


@router.get("/options", response_model=ReviewOptions)
def options():
	essay_levels = [s.level for s in ESSAY_MARKING_SCHEME]
	thesis_levels = [s.level for s in THESIS_MARKING_SCHEME]
	essay_types = {level: essay_types_for(level) for level in essay_levels}
	thesis_chapters = {level: thesis_chapters_for(level) for level in thesis_levels}
	return ReviewOptions(
		essay_levels=essay_levels,
		essay_types=essay_types,
		thesis_levels=thesis_levels,
		thesis_chapters=thesis_chapters,
		default_essay_level=UNDERGRADUATE,
		default_essay_type=_first(essay_types.get(UNDERGRADUATE, [])),
		default_thesis_level=UNDERGRADUATE,
		default_thesis_chapter=_first(thesis_chapters.get(UNDERGRADUATE, [])),
	)


@router.get("/example", response_model=ExampleResponse)
def example():
	essay = example_essay()
	return ExampleResponse(
		level=UNDERGRADUATE,
		essay_type=essay.type,
		title=essay.example_essay.title,
		text=essay.example_essay.text,
	)


@router.post("/essay", response_model=ReviewResponse)
async def essay_review(
	req: EssayReviewRequest,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
	client: GeminiClient = Depends(get_gemini_client),
):
	text = _clean_text(req.text)
	_require_rubric(find_essay_rubric, req.level, req.essay_type)
	consume_request(db, user.username)
	try:
		feedback = await review_essay(client, text, req.essay_type, req.level)
	except RubricNotFoundError as e:
		raise HTTPException(status_code=404, detail=str(e))
	except Exception:
		logger.exception("Error fetching AI essay review")
		raise HTTPException(status_code=502, detail=ESSAY_FAILURE_DETAIL)
	anchors = anchor_quotes(text, feedback)
	_record_review(db, user.username, "essay", req.level, req.essay_type, text, feedback, anchors)
	return ReviewResponse(feedback=feedback, anchors=anchors)


@router.post("/thesis", response_model=ReviewResponse)
async def thesis_review(
	req: ThesisReviewRequest,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
	client: GeminiClient = Depends(get_gemini_client),
):
	text = _clean_text(req.text)
	_require_rubric(find_thesis_rubric, req.level, req.chapter)
	consume_request(db, user.username)
	try:
		feedback = await review_thesis_chapter(client, text, req.level, req.chapter)
	except RubricNotFoundError as e:
		raise HTTPException(status_code=404, detail=str(e))
	except Exception:
		logger.exception("Error fetching AI thesis chapter review")
		raise HTTPException(status_code=502, detail=THESIS_FAILURE_DETAIL)
	anchors = anchor_quotes(text, feedback)
	_record_review(db, user.username, "thesis", req.level, req.chapter, text, feedback, anchors)
	return ReviewResponse(feedback=feedback, anchors=anchors)


@router.post("/highlight", response_model=List[TextSegment])
def highlight(req: HighlightRequest):
	return highlight_segments(req.text, req.quote)


@router.get("/history", response_model=List[HistoryItem])
def history(limit: int = 20, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	rows = (
		db.query(ReviewRecord)
		.filter(ReviewRecord.username == user.username)
		.order_by(ReviewRecord.created_at.desc(), ReviewRecord.id.desc())
		.limit(max(1, min(limit, 100)))
		.all()
	)
	return [
		HistoryItem(
			id=r.id,
			review_mode=r.review_mode,
			level=r.level,
			target=r.target,
			overall_score=r.overall_score,
			created_at=r.created_at,
		)
		for r in rows
	]


@router.get("/history/{record_id}", response_model=ReviewResponse)
def history_item(record_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	row = db.get(ReviewRecord, record_id)
	if row is None or row.username != user.username:
		raise HTTPException(status_code=404, detail="review not found")
	return ReviewResponse(
		feedback=ReviewFeedback.model_validate_json(row.feedback_json),
		anchors=[QuoteAnchor.model_validate(a) for a in json.loads(row.anchors_json or "[]")],
	)


# ---- Drafts (one per user) ----

@router.put("/draft", response_model=Draft)
def save_draft(draft: Draft, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	row = db.get(ReviewDraft, user.username) or ReviewDraft(username=user.username)
	row.review_mode = draft.review_mode
	row.essay_text = draft.essay_text
	row.selected_essay_level = draft.selected_essay_level
	row.selected_essay_type = draft.selected_essay_type
	row.selected_thesis_level = draft.selected_thesis_level
	row.selected_thesis_chapter = draft.selected_thesis_chapter
	db.add(row)
	db.commit()
	return draft


@router.get("/draft/status")
def draft_status(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	return {"saved": db.get(ReviewDraft, user.username) is not None}


@router.get("/draft", response_model=Draft)
def load_draft(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	row = db.get(ReviewDraft, user.username)
	if row is None:
		raise HTTPException(status_code=404, detail="no saved draft")
	return Draft(
		review_mode=row.review_mode,
		essay_text=row.essay_text,
		selected_essay_level=row.selected_essay_level,
		selected_essay_type=row.selected_essay_type,
		selected_thesis_level=row.selected_thesis_level,
		selected_thesis_chapter=row.selected_thesis_chapter,
	)


@router.delete("/draft", status_code=204)
def delete_draft(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	row = db.get(ReviewDraft, user.username)
	if row is not None:
		db.delete(row)
		db.commit()
	return Response(status_code=204)
