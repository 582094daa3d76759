from __future__ import annotations
import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db
from ..progress_store import (
	get_or_create_progress,
	increment_progress,
	record_activity,
	replace_progress,
	to_payload,
)
from ..settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/progress", tags=["progress"])


class SkillValues(BaseModel):
	reading: Optional[float] = None
	writing: Optional[float] = None
	listening: Optional[float] = None
	speaking: Optional[float] = None


class ProgressUpdate(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	user_id: Optional[str] = Field(default=None, alias="userId")
	total_completed: Optional[int] = Field(default=None, alias="totalCompleted")
	total_time: Optional[int] = Field(default=None, alias="totalTime")
	# Accepted for compatibility with older clients; always recomputed from skills
	overall_progress: Optional[float] = Field(default=None, alias="overallProgress")
	achievements: Optional[int] = None
	skills: Optional[SkillValues] = None


class ActivityRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	user_id: Optional[str] = Field(default=None, alias="userId")
	skill: Literal["reading", "writing", "listening", "speaking"]
	value: float
	minutes: int = Field(default=0, ge=0)


def _user(user_id: Optional[str]) -> str:
	return (user_id or "").strip() or settings.default_user_id


def _skills_dict(skills: Optional[SkillValues]):
	if skills is None:
		return None
	return skills.model_dump()


@router.get("")
def fetch_progress(user_id: Optional[str] = Query(default=None, alias="userId"), db: Session = Depends(get_db)):
	try:
		record = get_or_create_progress(db, _user(user_id))
	except SQLAlchemyError as exc:
		db.rollback()
		logger.exception("Error fetching progress")
		raise HTTPException(status_code=500, detail=f"Failed to fetch progress: {exc}")
	return {"success": True, "data": to_payload(record)}


@router.post("")
def update_progress(req: ProgressUpdate, db: Session = Depends(get_db)):
	try:
		record = replace_progress(
			db,
			_user(req.user_id),
			total_completed=req.total_completed,
			total_time=req.total_time,
			achievements=req.achievements,
			skills=_skills_dict(req.skills),
		)
	except SQLAlchemyError as exc:
		db.rollback()
		logger.exception("Error updating progress")
		raise HTTPException(status_code=500, detail=f"Failed to update progress: {exc}")
	return {"success": True, "data": to_payload(record)}


@router.patch("")
def patch_progress(req: ProgressUpdate, db: Session = Depends(get_db)):
	try:
		record = increment_progress(
			db,
			_user(req.user_id),
			total_completed=req.total_completed,
			total_time=req.total_time,
			achievements=req.achievements,
			skills=_skills_dict(req.skills),
		)
	except SQLAlchemyError as exc:
		db.rollback()
		logger.exception("Error patching progress")
		raise HTTPException(status_code=500, detail=f"Failed to update progress: {exc}")
	return {"success": True, "data": to_payload(record)}


@router.post("/activity")
def complete_activity(req: ActivityRequest, db: Session = Depends(get_db)):
	try:
		record = record_activity(db, _user(req.user_id), req.skill, req.value, req.minutes)
	except SQLAlchemyError as exc:
		db.rollback()
		logger.exception("Error recording activity")
		raise HTTPException(status_code=500, detail=f"Failed to update progress: {exc}")
	return {"success": True, "data": to_payload(record)}
