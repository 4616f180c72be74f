from __future__ import annotations
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..academic_data import (
	COMMON_ESSAY_TYPES,
	ESSAY_MARKING_SCHEME,
	THESIS_CHECKLIST,
	THESIS_FORMATS,
	THESIS_MARKING_SCHEME,
	WRITING_TIPS,
)

router = APIRouter(prefix="/content", tags=["content"])

ESSAY_REVIEWER = "Essay Reviewer"
SECTIONS: List[str] = [
	"Essay Types",
	"Thesis Formats",
	"Thesis Marking Scheme",
	"Essay Marking Scheme",
	"Writing Tips",
	ESSAY_REVIEWER,
]
DEFAULT_SECTION = ESSAY_REVIEWER


class ContentTable(BaseModel):
	title: str
	headers: List[str]
	rows: List[List[Any]]
	# Per-row detail shown when a row is expanded (essay examples)
	details: Optional[List[Dict[str, str]]] = None


class SectionContent(BaseModel):
	section: str
	tables: List[ContentTable]


def _triggers(text: str) -> List[str]:
	return [line for line in text.split("\n") if line.strip()]


def _essay_types() -> List[ContentTable]:
	return [
		ContentTable(
			title="Common Essay Types (Click row to see example)",
			headers=["Level", "Essay Type", "Core Purpose", "Typical Disciplines"],
			rows=[[e.level, e.type, e.core_purpose, e.typical_disciplines] for e in COMMON_ESSAY_TYPES],
			details=[e.example_essay.model_dump() for e in COMMON_ESSAY_TYPES],
		)
	]


def _thesis_formats() -> List[ContentTable]:
	return [
		ContentTable(
			title="Thesis Formats by Degree Level",
			headers=["Level", "Common Thesis Types", "Typical Purpose & Structure"],
			rows=[[f.level, f.common_thesis_types, f.typical_purpose] for f in THESIS_FORMATS],
		),
		ContentTable(
			title="Quick Checklist for Each Level",
			headers=["Checklist Item", "Undergraduate", "Master’s", "Doctoral"],
			rows=[[c.item, c.undergraduate, c.masters, c.doctoral] for c in THESIS_CHECKLIST],
		),
	]


def _thesis_marking() -> List[ContentTable]:
	items = THESIS_MARKING_SCHEME[0].items
	return [
		ContentTable(
			title="Thesis Marking Scheme Blueprint",
			headers=["Chapter", "Weight", "Core Rubric", "Harsh Penalty Triggers"],
			rows=[[i.chapter, i.weight, i.core_rubric, _triggers(i.penalty_triggers)] for i in items],
		)
	]


def _essay_marking() -> List[ContentTable]:
	items = ESSAY_MARKING_SCHEME[0].items
	return [
		ContentTable(
			title="Essay Marking Scheme",
			headers=["Essay Type", "Core Rubric", "Weight", "Harsh Penalty Triggers"],
			rows=[[i.type, i.core_rubric, i.weight, _triggers(i.penalty_triggers)] for i in items],
		)
	]


def _writing_tips() -> List[ContentTable]:
	return [
		ContentTable(
			title="Beyond The Rubric – Practical Tips to Excel",
			headers=["Area", "What to Do", "Why It Works", "Quick Start Tools"],
			rows=[[t.area, t.what_to_do, t.why_it_works, t.quick_start_tools] for t in WRITING_TIPS],
		)
	]


_BUILDERS = {
	"Essay Types": _essay_types,
	"Thesis Formats": _thesis_formats,
	"Thesis Marking Scheme": _thesis_marking,
	"Essay Marking Scheme": _essay_marking,
	"Writing Tips": _writing_tips,
}


@router.get("/sections")
def sections():
	return {"sections": SECTIONS, "default": DEFAULT_SECTION}


@router.get("/{section}", response_model=SectionContent)
def section_content(section: str):
	if section == ESSAY_REVIEWER:
		raise HTTPException(status_code=404, detail="Essay Reviewer is not a reference section; use /review")
	builder = _BUILDERS.get(section)
	if builder is None:
		raise HTTPException(status_code=404, detail=f"Unknown section: {section}")
	return SectionContent(section=section, tables=builder())
