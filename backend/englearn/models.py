from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Float
from .db import Base


class ProgressRecord(Base):
	__tablename__ = "progress"
	# One row per learner key; single-user installs use "default"
	user_id = Column(String(128), primary_key=True, index=True)
	total_completed = Column(Integer, default=0, nullable=False)
	total_time = Column(Integer, default=0, nullable=False)  # minutes
	overall_progress = Column(Integer, default=0, nullable=False)
	achievements = Column(Integer, default=0, nullable=False)
	reading = Column(Float, default=0.0, nullable=False)
	writing = Column(Float, default=0.0, nullable=False)
	listening = Column(Float, default=0.0, nullable=False)
	speaking = Column(Float, default=0.0, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
