"""
Speaking Practice Module
========================

Generates speaking tasks and turns recorded answers into text so they can be
scored by the evaluation endpoint.

Task kinds:
- independent: an opinion question answered from personal experience
- integrated: a short video transcript to summarise and discuss

API Endpoints:
- POST /api/speaking/generate: create a new speaking task
- POST /api/speaking/transcribe: speech-to-text for a recorded answer
"""

from __future__ import annotations

import logging
import random
import time
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, ConfigDict, Field

from ..ai_client import AIClient, get_ai_client
from ..errors import INVALID_STRUCTURE_MESSAGE, translate_ai_error
from ..jsonutil import extract_json_object
from ..topics import OPINION_TOPICS, VIDEO_TOPICS, pick


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/speaking", tags=["speaking"])

# ============================================================================
# CONSTANTS
# ============================================================================

INDEPENDENT = "independent"
INTEGRATED = "integrated"

_TASK_ALIASES = {
	"independent": INDEPENDENT,
	"task1": INDEPENDENT,
	"integrated": INTEGRATED,
	"task2": INTEGRATED,
}


# ============================================================================
# REQUEST MODELS
# ============================================================================

class GenerateRequest(BaseModel):
	"""
	Request model for generating a speaking task.

	task_type is one of independent/integrated (task1/task2 accepted as
	aliases); a random kind is chosen when omitted.
	"""
	model_config = ConfigDict(populate_by_name=True)

	level: Optional[str] = None
	task_type: Optional[str] = Field(default=None, alias="taskType")
	topic: Optional[str] = None


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def resolve_task_type(task_type: Optional[str]) -> str:
	key = (task_type or "").strip().lower()
	if not key:
		return random.choice((INDEPENDENT, INTEGRATED))
	if key not in _TASK_ALIASES:
		raise HTTPException(status_code=400, detail="taskType must be one of independent, integrated, task1, task2")
	return _TASK_ALIASES[key]


def _build_integrated_prompt(level: str, topic: str) -> str:
	"""Build the prompt for a video-based integrated speaking task.

	Args:
		level: Target learner level (B1/B2, B2, B2-C1 or C1)
		topic: Subject of the video

	Returns:
		Prompt string asking for a JSON task with a video transcript
	"""
	return f"""You are an e-TEP (English Test of English Proficiency) exam content creator. Generate an Integrated Speaking Task that includes:
1. A realistic video transcript (like a short educational video, documentary, or presentation)
2. Clear instructions for students to summarize and discuss

Topic: {topic}
Level: {level} (B1/B2, B2, B2-C1, or C1)

Requirements:
- Create a video transcript (150-300 words) that presents information about the topic
- The transcript should be from a realistic video (educational, documentary, or presentation style)
- Duration requirement:
  * B1/B2: 90-120 seconds speaking time
  * B2-C1/C1: 120-180 seconds speaking time
- Students should summarize the video and then discuss/reflect on the topic
- Make the content engaging and thought-provoking

Format your response as JSON with this exact structure:
{{
  "taskType": "integrated",
  "title": "Integrated Speaking Task: [Topic Name]",
  "level": "{level}",
  "video": {{
    "title": "Video title",
    "transcript": "Full transcript of the video (150-300 words, realistic educational/documentary style)",
    "mainPoints": ["Point 1", "Point 2", "Point 3", "Point 4"]
  }},
  "prompt": "Full speaking prompt for students explaining what they need to do",
  "example": "Example response structure",
  "tips": ["Tip 1", "Tip 2", "Tip 3", "Tip 4", "Tip 5"],
  "duration": 180
}}

Important:
- Make the video transcript realistic and informative
- Ensure students can clearly summarize the main points
- Create a prompt that encourages discussion and reflection beyond just summarizing
- Use appropriate vocabulary for the level
- Make each task unique and different from previous ones"""


def _build_independent_prompt(level: str, topic: str) -> str:
	return f"""You are an e-TEP (English Test of English Proficiency) exam content creator. Generate an Independent Speaking Task that prompts students to express their opinion.

Topic: {topic}
Level: {level} (Beginner, Intermediate, B1, B2, B2-C1, or C1)

Requirements:
- Create a thought-provoking question that requires students to express their opinion
- The question should allow for multiple perspectives and examples
- Duration requirement:
  * Beginner/Intermediate: 60-90 seconds
  * B1/B2: 90-120 seconds
  * B2-C1/C1: 120-180 seconds
- Students should provide reasons and examples to support their opinion
- Make the question engaging and relevant

Format your response as JSON with this exact structure:
{{
  "taskType": "independent",
  "title": "Independent Speaking Task: [Topic]",
  "level": "{level}",
  "prompt": "The speaking question/prompt for students",
  "example": "Example response structure (e.g., 'In my opinion... I believe this because... For example...')",
  "tips": ["Tip 1", "Tip 2", "Tip 3", "Tip 4", "Tip 5"],
  "duration": 120
}}

Important:
- Make the question clear and specific
- Ensure students can provide multiple reasons and examples
- Use appropriate language for the level
- Make each task unique and different from previous ones
- The question should encourage extended speaking"""


# ============================================================================
# API ENDPOINTS
# ============================================================================

@router.post("/generate")
async def generate_task(req: GenerateRequest, client: AIClient = Depends(get_ai_client)):
	"""Generate a new speaking task.

	Raises:
		HTTPException: 400 when level is missing or taskType is unknown,
		500 when the model answer lacks the fields the UI needs
	"""
	level = (req.level or "").strip()
	if not level:
		raise HTTPException(status_code=400, detail="Missing required field: level")
	task_type = resolve_task_type(req.task_type)
	if task_type == INTEGRATED:
		prompt = _build_integrated_prompt(level, pick(req.topic, VIDEO_TOPICS))
		system = (
			"You are an expert e-TEP exam content creator specializing in integrated speaking tasks. "
			"You create realistic, engaging video transcripts that prompt meaningful student responses."
		)
		max_tokens = 2000
		required = ("video", "prompt")
	else:
		prompt = _build_independent_prompt(level, pick(req.topic, OPINION_TOPICS))
		system = (
			"You are an expert e-TEP exam content creator specializing in independent speaking tasks. "
			"You create engaging, thought-provoking questions that prompt meaningful student responses."
		)
		max_tokens = 1500
		required = ("prompt",)

	try:
		raw = await client.complete(prompt, system=system, temperature=0.9, max_tokens=max_tokens)
		data = extract_json_object(raw)
	except Exception as exc:
		logger.exception("Error generating speaking task")
		raise translate_ai_error(exc, "An error occurred while creating the speaking task. Please try again.")

	if any(not data.get(key) for key in required):
		raise HTTPException(status_code=500, detail=INVALID_STRUCTURE_MESSAGE)

	return {"id": int(time.time() * 1000), **data}


@router.post("/transcribe")
async def transcribe(audio: Optional[UploadFile] = File(default=None), client: AIClient = Depends(get_ai_client)):
	"""Transcribe a recorded answer (multipart field ``audio``) to English text."""
	if audio is None:
		raise HTTPException(status_code=400, detail="Missing required field: audio file")
	content = await audio.read()
	if not content:
		raise HTTPException(status_code=400, detail="Missing required field: audio file")
	try:
		transcript = await client.transcribe(
			audio.filename or "recording.webm",
			content,
			audio.content_type,
			language="en",
		)
	except Exception as exc:
		logger.exception("Error transcribing audio")
		raise translate_ai_error(exc, "An error occurred while transcribing the audio. Please try again.")
	return {"transcript": transcript}
