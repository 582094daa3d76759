"""
Listening Module Router

Provides the backend endpoints for listening practice:
- Exercise generation (transcript + comprehension questions)
- Text-to-speech rendering of a transcript as MP3 audio

The exercise transcript is produced by the language model and then voiced
through the provider's speech endpoint, so the learner hears exactly the
text the questions were written against.
"""

from __future__ import annotations
import logging
import math
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field

from ..ai_client import AIClient, TTS_VOICES, get_ai_client
from ..errors import INVALID_STRUCTURE_MESSAGE, translate_ai_error
from ..jsonutil import extract_json_object
from ..topics import LISTENING_EXERCISE_TYPES, LISTENING_TOPICS, pick
from .reading import number_questions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/listening", tags=["listening"])

SYSTEM_PROMPT = (
    "You are an expert e-TEP exam content creator specializing in listening comprehension exercises. "
    "You create realistic, engaging, and pedagogically sound listening exercises with appropriate questions."
)

# Average speaking rate used when the model does not report a duration
WORDS_PER_SECOND = 2.5


# ============================================================================
# REQUEST MODELS
# ============================================================================

class GenerateRequest(BaseModel):
    """
    Request model for generating a listening exercise.

    Attributes:
        level: Target level (Beginner, Intermediate, B1, B2, B2-C1 or C1)
        topic: Optional topic; a random one is chosen when empty
        exercise_type: Optional format (conversation, lecture, ...)
    """
    model_config = ConfigDict(populate_by_name=True)

    level: Optional[str] = None
    topic: Optional[str] = None
    exercise_type: Optional[str] = Field(default=None, alias="exerciseType")


class SpeechRequest(BaseModel):
    text: Optional[str] = None
    voice: Optional[str] = None


# ============================================================================
# PROMPTS
# ============================================================================

def _build_listening_prompt(level: str, topic: str, exercise_type: str) -> str:
    """
    Build the generation prompt for a listening exercise.

    Args:
        level: Target learner level
        topic: Subject of the recording
        exercise_type: Recording format (conversation, lecture, ...)

    Returns:
        str: Prompt asking for a JSON object with title, transcript,
        duration and questions
    """
    return f"""You are an e-TEP (English Test of English Proficiency) exam content creator. Generate a realistic listening exercise with a transcript and questions.

Exercise Type: {exercise_type}
Topic: {topic}
Level: {level} (Beginner, Intermediate, B1, B2, B2-C1, or C1)

Requirements:
- Create a natural, realistic transcript (2-4 speakers for conversations/discussions, 1 speaker for lectures/presentations)
- Transcript length:
  * Beginner/Intermediate: 100-150 words, 30-45 seconds
  * B1/B2: 150-250 words, 60-90 seconds
  * B2-C1/C1: 250-400 words, 90-120 seconds
- Generate 3-5 questions that test comprehension, inference, and detail recognition
- Mix question types: multiple-choice and matching (if multiple speakers)
- Questions should test understanding of main ideas, specific details, and inferences
- Make the content engaging and realistic

Format your response as JSON with this exact structure:
{{
  "title": "Exercise title",
  "level": "{level}",
  "transcript": "Full transcript with speaker names (e.g., Sarah: ... Tom: ...)",
  "duration": number (in seconds, estimate based on word count),
  "questions": [
    {{
      "id": 1,
      "type": "multiple-choice",
      "question": "Question text",
      "options": ["Option 1", "Option 2", "Option 3", "Option 4"],
      "correct": 0
    }},
    {{
      "id": 2,
      "type": "matching",
      "instruction": "Match each speaker with their statement/opinion",
      "speakers": ["Speaker 1", "Speaker 2", "Speaker 3"],
      "statements": ["Statement 1", "Statement 2", "Statement 3"],
      "matches": {{"0": 0, "1": 1, "2": 2}}
    }}
  ]
}}

Important:
- Make each exercise unique and different from previous ones
- Use natural, conversational language appropriate for the level
- Ensure questions are answerable based on the transcript
- For matching questions, ensure there are multiple speakers in the transcript
- Vary the question difficulty based on the level"""


def estimate_duration(transcript: str) -> int:
    """Seconds needed to read ``transcript`` aloud at a normal pace."""
    return math.ceil(len(transcript.split(" ")) / WORDS_PER_SECOND)


# ============================================================================
# API ENDPOINTS
# ============================================================================

@router.post("/generate")
async def generate_exercise(req: GenerateRequest, client: AIClient = Depends(get_ai_client)):
    level = (req.level or "").strip()
    if not level:
        raise HTTPException(status_code=400, detail="Missing required field: level")
    exercise_type = pick(req.exercise_type, LISTENING_EXERCISE_TYPES)
    topic = pick(req.topic, LISTENING_TOPICS)
    try:
        raw = await client.complete(
            _build_listening_prompt(level, topic, exercise_type),
            system=SYSTEM_PROMPT,
            temperature=0.9,
            max_tokens=3000,
        )
        data = extract_json_object(raw)
    except Exception as exc:
        logger.exception("Error generating listening exercise")
        raise translate_ai_error(exc, "An error occurred while creating the listening exercise. Please try again.")

    transcript = data.get("transcript")
    if not transcript or not isinstance(transcript, str) or not data.get("title") or not isinstance(data.get("questions"), list):
        raise HTTPException(status_code=500, detail=INVALID_STRUCTURE_MESSAGE)

    duration = data.get("duration")
    if not isinstance(duration, (int, float)) or isinstance(duration, bool) or duration <= 0:
        duration = estimate_duration(transcript)

    return {
        "id": int(time.time() * 1000),
        "title": data["title"],
        "level": data.get("level") or level,
        "transcript": transcript,
        "duration": duration,
        "questions": number_questions(data["questions"]),
    }


@router.post("/tts")
async def text_to_speech(req: SpeechRequest, client: AIClient = Depends(get_ai_client)):
    text = (req.text or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Missing required field: text")
    voice = (req.voice or "alloy").strip().lower()
    if voice not in TTS_VOICES:
        raise HTTPException(status_code=400, detail=f"voice must be one of {', '.join(TTS_VOICES)}")
    try:
        audio = await client.synthesize_speech(text, voice=voice, speed=1.0)
    except Exception as exc:
        logger.exception("Error generating speech")
        raise translate_ai_error(exc, "An error occurred while generating speech. Please try again.")
    return Response(
        content=audio,
        media_type="audio/mpeg",
        headers={"Content-Length": str(len(audio))},
    )
