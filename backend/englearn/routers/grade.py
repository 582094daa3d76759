from __future__ import annotations
from typing import Any, Dict, List

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ..grading import count_words, draft_skill_value, grade_answers, skill_value_for

router = APIRouter(prefix="/api", tags=["grading"])


class GradeRequest(BaseModel):
	questions: List[Dict[str, Any]]
	answers: Dict[str, Any] = Field(default_factory=dict)


class DraftRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	text: str = ""
	target_words: int = Field(alias="targetWords", gt=0)


@router.post("/grade")
async def grade(req: GradeRequest):
	result = grade_answers(req.questions, req.answers)
	return {**result, "skillValue": skill_value_for(result["percentage"])}


@router.post("/grade/writing")
async def grade_draft(req: DraftRequest):
	"""Word-count credit for a writing draft; only drafts that reach the target are saved as progress."""
	words = count_words(req.text)
	return {
		"wordCount": words,
		"targetWords": req.target_words,
		"meetsTarget": words >= req.target_words,
		"skillValue": draft_skill_value(words, req.target_words),
	}
