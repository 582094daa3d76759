from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from englearn import models  # noqa: F401
from englearn.ai_client import get_ai_client
from englearn.db import Base, get_db
from englearn.main import app


class FakeAIClient:
	"""Scripted stand-in for AIClient; replies are consumed in order."""

	def __init__(self) -> None:
		self.replies: List[Any] = []
		self.calls: List[Dict[str, Any]] = []
		self.audio = b"ID3\x03fake-mp3"
		self.transcript = "I think remote work is good for families."
		self.error: Optional[Exception] = None

	async def complete(self, prompt, *, system=None, temperature=0.7, max_tokens=None, json_mode=True):
		self.calls.append({
			"kind": "complete",
			"prompt": prompt,
			"system": system,
			"temperature": temperature,
			"max_tokens": max_tokens,
		})
		reply = self.replies.pop(0)
		if isinstance(reply, Exception):
			raise reply
		return reply

	async def synthesize_speech(self, text, *, voice="alloy", speed=1.0):
		self.calls.append({"kind": "speech", "text": text, "voice": voice})
		if self.error:
			raise self.error
		return self.audio

	async def transcribe(self, filename, content, content_type=None, *, language="en"):
		self.calls.append({"kind": "transcribe", "filename": filename, "size": len(content), "language": language})
		if self.error:
			raise self.error
		return self.transcript

	async def aclose(self):
		pass


@pytest.fixture
def db_session(tmp_path):
	engine = create_engine(
		f"sqlite:///{tmp_path / 'test.db'}",
		connect_args={"check_same_thread": False},
		future=True,
	)
	Base.metadata.create_all(bind=engine)
	Session = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
	session = Session()
	try:
		yield session
	finally:
		session.close()
		engine.dispose()


@pytest.fixture
def fake_ai():
	return FakeAIClient()


@pytest.fixture
def client(db_session, fake_ai):
	def _override_db():
		yield db_session

	async def _override_ai():
		yield fake_ai

	app.dependency_overrides[get_db] = _override_db
	app.dependency_overrides[get_ai_client] = _override_ai
	try:
		yield TestClient(app)
	finally:
		app.dependency_overrides.clear()
