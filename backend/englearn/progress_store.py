from __future__ import annotations
import logging
import math
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .models import ProgressRecord

logger = logging.getLogger(__name__)

SKILLS = ("reading", "writing", "listening", "speaking")

# Completed-activity counts that unlock a tier equal to the count itself
ACTIVITY_MILESTONES = (1, 5, 10, 25, 50, 100)
HALFWAY_TIER = 150
THREE_QUARTER_TIER = 175
MASTER_TIER = 200


def clamp_skill(value: float) -> float:
	return max(0.0, min(100.0, float(value)))


def skill_mean(skills: Mapping[str, float]) -> float:
	return sum(float(skills.get(name, 0) or 0) for name in SKILLS) / len(SKILLS)


def overall_from_skills(skills: Mapping[str, float]) -> int:
	# Half rounds up, matching how the browser computes it
	return int(math.floor(skill_mean(skills) + 0.5))


def milestone_tier(previous_completed: int, total_completed: int) -> int:
	tier = 0
	for milestone in ACTIVITY_MILESTONES:
		if total_completed >= milestone and previous_completed < milestone:
			tier = max(tier, milestone)
	return tier


def ratchet_achievements(
	current: int,
	*,
	skills: Mapping[str, float],
	previous_completed: int = 0,
	total_completed: int = 0,
	requested: Optional[int] = None,
) -> int:
	"""Return the new achievement tier; never lower than ``current``."""
	tier = max(0, int(current or 0))
	if requested is not None:
		tier = max(tier, int(requested))
	tier = max(tier, milestone_tier(previous_completed, total_completed))
	mean = skill_mean(skills)
	if mean >= 50:
		tier = max(tier, HALFWAY_TIER)
	if mean >= 75:
		tier = max(tier, THREE_QUARTER_TIER)
	if all(float(skills.get(name, 0) or 0) >= 100 for name in SKILLS):
		tier = max(tier, MASTER_TIER)
	return tier


def skills_of(record: ProgressRecord) -> Dict[str, float]:
	return {name: float(getattr(record, name) or 0) for name in SKILLS}


def to_payload(record: ProgressRecord) -> Dict[str, Any]:
	return {
		"totalCompleted": record.total_completed,
		"totalTime": record.total_time,
		"overallProgress": record.overall_progress,
		"achievements": record.achievements,
		"skills": skills_of(record),
	}


def get_or_create_progress(db: Session, user_id: str) -> ProgressRecord:
	record = db.get(ProgressRecord, user_id)
	if record is None:
		record = ProgressRecord(
			user_id=user_id,
			total_completed=0,
			total_time=0,
			overall_progress=0,
			achievements=0,
			reading=0.0,
			writing=0.0,
			listening=0.0,
			speaking=0.0,
		)
		db.add(record)
		try:
			db.commit()
		except IntegrityError:
			# Another request created the row between our lookup and insert
			db.rollback()
			record = db.get(ProgressRecord, user_id)
			if record is None:
				raise
			logger.debug("Progress record for %s was created concurrently", user_id)
			return record
		db.refresh(record)
		logger.info("Created progress record for %s", user_id)
	return record


def _normalise(record: ProgressRecord, *, previous_completed: int, previous_achievements: int, requested_achievements: Optional[int] = None) -> None:
	for name in SKILLS:
		setattr(record, name, clamp_skill(getattr(record, name) or 0))
	record.total_completed = max(0, int(record.total_completed or 0))
	record.total_time = max(0, int(record.total_time or 0))
	skills = skills_of(record)
	record.overall_progress = overall_from_skills(skills)
	record.achievements = ratchet_achievements(
		previous_achievements,
		skills=skills,
		previous_completed=previous_completed,
		total_completed=record.total_completed,
		requested=requested_achievements,
	)


def _save(db: Session, record: ProgressRecord) -> ProgressRecord:
	db.add(record)
	db.commit()
	db.refresh(record)
	logger.debug("Saved progress for %s: %s", record.user_id, to_payload(record))
	return record


def replace_progress(
	db: Session,
	user_id: str,
	*,
	total_completed: Optional[int] = None,
	total_time: Optional[int] = None,
	achievements: Optional[int] = None,
	skills: Optional[Mapping[str, float]] = None,
) -> ProgressRecord:
	"""Overwrite the provided fields, then re-derive the dependent ones.

	``skills`` replaces all four values; names left out are reset to 0. The
	overall percentage is always recomputed and the tier can only go up.
	"""
	record = get_or_create_progress(db, user_id)
	previous_completed = record.total_completed
	previous_achievements = record.achievements
	if total_completed is not None:
		record.total_completed = total_completed
	if total_time is not None:
		record.total_time = total_time
	if skills is not None:
		for name in SKILLS:
			setattr(record, name, skills.get(name) or 0)
	_normalise(
		record,
		previous_completed=previous_completed,
		previous_achievements=previous_achievements,
		requested_achievements=achievements,
	)
	return _save(db, record)


def increment_progress(
	db: Session,
	user_id: str,
	*,
	total_completed: Optional[int] = None,
	total_time: Optional[int] = None,
	achievements: Optional[int] = None,
	skills: Optional[Mapping[str, Optional[float]]] = None,
) -> ProgressRecord:
	"""Apply deltas to the counters and set any skills that were provided."""
	record = get_or_create_progress(db, user_id)
	previous_completed = record.total_completed
	previous_achievements = record.achievements
	if total_completed is not None:
		record.total_completed = max(0, record.total_completed + total_completed)
	if total_time is not None:
		record.total_time = max(0, record.total_time + total_time)
	if skills:
		for name in SKILLS:
			value = skills.get(name)
			if value is not None:
				setattr(record, name, value)
	_normalise(
		record,
		previous_completed=previous_completed,
		previous_achievements=previous_achievements,
		requested_achievements=achievements,
	)
	return _save(db, record)


def record_activity(db: Session, user_id: str, skill: str, value: float, minutes: int = 0) -> ProgressRecord:
	if skill not in SKILLS:
		raise ValueError(f"skill must be one of {', '.join(SKILLS)}")
	record = get_or_create_progress(db, user_id)
	previous_completed = record.total_completed
	previous_achievements = record.achievements
	setattr(record, skill, value)
	record.total_time = record.total_time + max(0, int(minutes or 0))
	record.total_completed = record.total_completed + 1
	_normalise(record, previous_completed=previous_completed, previous_achievements=previous_achievements)
	return _save(db, record)
