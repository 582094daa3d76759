from __future__ import annotations
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..ai_client import AIClient, get_ai_client
from ..errors import translate_ai_error
from ..jsonutil import extract_json_object
from ..settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["evaluation"])

SYSTEM_PROMPT = "You are a professional English language teacher. Always respond in valid JSON format."

WRITING_TASK2_MARKERS = ("graph", "podcast", "visual", "audio")
SPEAKING_INTEGRATED_MARKERS = ("video", "watch", "integrated")

SCORE_MESSAGE = "Invalid evaluation response: score must be a number between 0 and 100"


class EvaluateRequest(BaseModel):
	type: Optional[str] = None
	content: Optional[str] = None
	prompt: Optional[str] = None
	level: Optional[str] = None


_SCALE_LEGEND = {
	"writing_task1": (
		"- 5: Addresses to fullest extent, refers explicitly to both post and comment, well-supported ideas\n"
		"- 4: Addresses to large extent, refers to post/comment to large extent\n"
		"- 3: Addresses to adequate extent, refers to some extent\n"
		"- 2: Addresses to limited extent, limited reference\n"
		"- 1: Addresses to minimal extent, very limited reference\n"
		"- 0: Insufficient or completely lifted/irrelevant response"
	),
	"writing_task2": (
		"- 5: Addresses to fullest extent, comprehensive summary, clear connections\n"
		"- 4: Addresses to large extent, well-developed summary\n"
		"- 3: Addresses to adequate extent, some connections\n"
		"- 2: Addresses to limited extent, weak connections\n"
		"- 1: Addresses to very limited extent\n"
		"- 0: Insufficient or irrelevant response"
	),
	"speaking_integrated": (
		"- 5: Addresses to fullest extent, comprehensive summary, deeply elaborated discussion\n"
		"- 4: Addresses to large extent, well-developed summary, elaborated discussion\n"
		"- 3: Addresses to adequate extent, some omissions, some new perspectives\n"
		"- 2: Addresses to limited extent, missing/incomplete summary, limited discussion\n"
		"- 1: Addresses to minimal extent, touches upon few moves\n"
		"- 0: Off topic, memorized, insufficient, inaudible, technical issues"
	),
	"speaking_independent": (
		"- 5: Responds to fullest extent, content beyond personal experiences, well-organized\n"
		"- 4: Responds to large extent, content beyond personal experiences, generally organized\n"
		"- 3: Responds to adequate extent, some content beyond personal experiences, somewhat organized\n"
		"- 2: Responds to limited extent, mainly personal experiences, partially organized\n"
		"- 1: Responds to minimal extent, basic personal experiences, minimal organization\n"
		"- 0: Off topic, memorized, insufficient, inaudible, technical issues"
	),
}


def select_rubric(kind: str, task_prompt: str) -> str:
	"""Pick the rating scale from the wording of the task the learner answered."""
	if kind == "writing":
		if any(marker in task_prompt for marker in WRITING_TASK2_MARKERS):
			return "writing_task2"
		return "writing_task1"
	if any(marker in task_prompt for marker in SPEAKING_INTEGRATED_MARKERS):
		return "speaking_integrated"
	return "speaking_independent"


def _writing_prompt(rubric: str, level: str, task_prompt: str, content: str) -> str:
	if rubric == "writing_task2":
		task_name = "Task 2"
		content_criterion = "Content: How well they summarize the podcast points and connect them with the visual/graph"
		vocab_criterion = "Vocabulary: Range and accuracy of vocabulary from both resources and individual repertoire"
		content_keys = '"summaryQuality": "string",\n    "connectionQuality": "string"'
		vocab_key = '"resourceUsage": "string"'
	else:
		task_name = "Task 1"
		content_criterion = "Content: How well they refer to the post/comment and express personal opinion"
		vocab_criterion = "Vocabulary: Range and accuracy of vocabulary, including collocational expressions"
		content_keys = '"referenceQuality": "string",\n    "opinionQuality": "string"'
		vocab_key = '"collocationalExpressions": "string"'
	return f"""You are an English language teacher evaluating a student's writing using the e-TEP Integrated Writing Rating Scale for {task_name}.

Student Level: {level}
Writing Prompt: {task_prompt}
Student's Writing: {content}

Evaluate the student's writing according to the e-TEP Integrated Writing {task_name} rating scale (0-5 points) across four criteria:
1. {content_criterion}
2. Grammar: Grammatical accuracy and control of complex structures
3. {vocab_criterion}
4. Coherence & Cohesion: How well ideas flow and connect

For each criterion, assign a score from 0-5 based on the e-TEP descriptors:
{_SCALE_LEGEND[rubric]}

Calculate overall score (0-100) based on the average of the four criteria.

Format your response as JSON with the following structure:
{{
  "score": number (0-100),
  "content": {{
    "score": number (0-5),
    "assessment": "string",
    {content_keys}
  }},
  "grammar": {{
    "score": number (0-5),
    "assessment": "string",
    "errors": ["string"],
    "complexStructures": "string"
  }},
  "vocabulary": {{
    "score": number (0-5),
    "assessment": "string",
    "range": "string",
    {vocab_key},
    "suggestions": ["string"]
  }},
  "coherence": {{
    "score": number (0-5),
    "assessment": "string",
    "flow": "string",
    "cohesiveDevices": "string"
  }},
  "overall": {{
    "strengths": ["string"],
    "improvements": ["string"],
    "nextSteps": ["string"]
  }},
  "feedback": "string (overall feedback in {settings.feedback_language})"
}}"""


def _speaking_prompt(rubric: str, level: str, task_prompt: str, transcript: str) -> str:
	if rubric == "speaking_integrated":
		scale_name = "Integrated Speaking"
		task_criterion = "Task Completion: How well they summarize the video and discuss/reflect on the topic"
		vocab_criterion = "Vocabulary: Range and accuracy, including appropriate use of video vocabulary"
		task_keys = '"summaryQuality": "string",\n    "discussionQuality": "string"'
		vocab_key = '"videoVocabulary": "string"'
	else:
		scale_name = "Independent Speaking"
		task_criterion = "Task Completion: How well they respond to the task, develop content, and organize discourse"
		vocab_criterion = "Vocabulary: Range and accuracy of vocabulary"
		task_keys = '"contentDevelopment": "string",\n    "organization": "string"'
		vocab_key = '"accuracy": "string"'
	return f"""You are an English language teacher evaluating a student's speaking using the e-TEP {scale_name} Rating Scale.

Student Level: {level}
Speaking Prompt: {task_prompt}
Student's Transcript: {transcript}

Evaluate the student's speaking according to the e-TEP {scale_name} rating scale (0-5 points) across four criteria:
1. {task_criterion}
2. Grammar: Control of grammatical structures
3. {vocab_criterion}
4. Fluency & Pronunciation: Flow, pace, and pronunciation features

For each criterion, assign a score from 0-5 based on the e-TEP descriptors:
{_SCALE_LEGEND[rubric]}

Calculate overall score (0-100) based on the average of the four criteria.

Format your response as JSON with the following structure:
{{
  "score": number (0-100),
  "taskCompletion": {{
    "score": number (0-5),
    "assessment": "string",
    {task_keys}
  }},
  "grammar": {{
    "score": number (0-5),
    "assessment": "string",
    "errors": ["string"],
    "complexStructures": "string"
  }},
  "vocabulary": {{
    "score": number (0-5),
    "assessment": "string",
    "range": "string",
    {vocab_key},
    "suggestions": ["string"]
  }},
  "fluency": {{
    "score": number (0-5),
    "assessment": "string",
    "pace": "string",
    "hesitations": "string",
    "pronunciation": "string"
  }},
  "overall": {{
    "strengths": ["string"],
    "improvements": ["string"],
    "practiceSuggestions": ["string"]
  }},
  "feedback": "string (overall feedback in {settings.feedback_language})"
}}"""


def build_evaluation_prompt(kind: str, level: str, task_prompt: str, content: str) -> str:
	rubric = select_rubric(kind, task_prompt)
	if kind == "writing":
		return _writing_prompt(rubric, level, task_prompt, content)
	return _speaking_prompt(rubric, level, task_prompt, content)


def valid_score(value: Any) -> bool:
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		return False
	return 0 <= value <= 100


@router.post("/evaluate")
async def evaluate(req: EvaluateRequest, client: AIClient = Depends(get_ai_client)):
	if not req.type or not req.content or not req.prompt or not req.level:
		raise HTTPException(status_code=400, detail="Missing required fields: type, content, prompt, or level")
	kind = req.type.strip().lower()
	if kind not in ("writing", "speaking"):
		raise HTTPException(status_code=400, detail="Invalid evaluation type")

	try:
		raw = await client.complete(
			build_evaluation_prompt(kind, req.level, req.prompt, req.content),
			system=SYSTEM_PROMPT,
			temperature=0.7,
		)
		evaluation = extract_json_object(raw)
	except Exception as exc:
		logger.exception("Evaluation error")
		raise translate_ai_error(exc, "Evaluation failed. Please try again.")

	if not valid_score(evaluation.get("score")):
		raise HTTPException(status_code=500, detail=SCORE_MESSAGE)

	return {"evaluation": evaluation}
