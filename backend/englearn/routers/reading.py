"""
Reading Module Router

Generates academic reading passages with mixed question types
(multiple-choice, paragraph matching, sentence ordering) for e-TEP style
practice. The learner's answers are checked client-side or via /api/grade.
"""

from __future__ import annotations
import logging
import time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..ai_client import AIClient, get_ai_client
from ..errors import INVALID_STRUCTURE_MESSAGE, translate_ai_error
from ..jsonutil import extract_json_object
from ..topics import ACADEMIC_TOPICS, pick

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reading", tags=["reading"])

SYSTEM_PROMPT = (
    "You are an expert academic content creator specializing in English language proficiency testing. "
    "You create high-quality, research-based reading passages similar to those found in academic journals "
    "and Google Scholar articles."
)


class GenerateRequest(BaseModel):
    level: Optional[str] = None
    topic: Optional[str] = None


def _build_reading_prompt(level: str, topic: str) -> str:
    return f"""You are an academic content generator creating reading passages for the e-TEP (English Test of English Proficiency) exam. Generate a high-quality academic reading passage with questions similar to those found in Google Scholar articles or open-access academic journals.

Requirements:
1. Create a reading passage with 4-5 paragraphs (labeled as Paragraph A, B, C, D, and optionally E)
2. Each paragraph should be 80-120 words
3. The content should be academic, research-based, and similar to articles found in Google Scholar
4. Topic: {topic}
5. Level: {level} (B2, C1, or B2-C1)
6. Include citations and references to research studies (use realistic researcher names and years)
7. Use academic vocabulary appropriate for the level

Generate 5-6 questions of different types:
- 2-3 multiple-choice questions (testing comprehension, inference, and detail)
- 1-2 matching questions (matching statements to paragraphs)
- 1 ordering question (arranging sentences in logical order)

Format your response as JSON with this exact structure:
{{
  "title": "Academic title of the passage",
  "level": "{level}",
  "content": "Paragraph A: [content]\\n\\nParagraph B: [content]\\n\\nParagraph C: [content]\\n\\nParagraph D: [content]\\n\\nParagraph E: [content if needed]",
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
      "instruction": "Match each statement with the correct paragraph (A, B, C, D, or E).",
      "items": ["Statement 1", "Statement 2", "Statement 3", "Statement 4"],
      "paragraphs": ["Paragraph A", "Paragraph B", "Paragraph C", "Paragraph D"],
      "matches": {{"0": 0, "1": 2, "2": 1, "3": 3}}
    }},
    {{
      "id": 3,
      "type": "ordering",
      "instruction": "Arrange the following sentences to form a coherent paragraph.",
      "parts": ["Sentence 1", "Sentence 2", "Sentence 3", "Sentence 4"],
      "correctOrder": [1, 0, 3, 2]
    }}
  ]
}}

Important:
- Make sure the content is original and academic in nature
- Questions should test understanding of the passage, not just memorization
- For matching questions, ensure items clearly relate to specific paragraphs
- For ordering questions, create sentences that form a logical sequence
- Use realistic academic language and research terminology
- Include specific data, percentages, or findings where appropriate"""


def number_questions(questions: List[Any]) -> List[Dict[str, Any]]:
    """Give every question an id, keeping the ones the model provided."""
    numbered: List[Dict[str, Any]] = []
    for index, question in enumerate(questions):
        if not isinstance(question, dict):
            raise HTTPException(status_code=500, detail=INVALID_STRUCTURE_MESSAGE)
        numbered.append({**question, "id": question.get("id") or index + 1})
    return numbered


@router.post("/generate")
async def generate_passage(req: GenerateRequest, client: AIClient = Depends(get_ai_client)):
    level = (req.level or "").strip()
    if not level:
        raise HTTPException(status_code=400, detail="Missing required field: level")
    topic = pick(req.topic, ACADEMIC_TOPICS)
    try:
        raw = await client.complete(
            _build_reading_prompt(level, topic),
            system=SYSTEM_PROMPT,
            temperature=0.8,
            max_tokens=3000,
        )
        data = extract_json_object(raw)
    except Exception as exc:
        logger.exception("Error generating reading passage")
        raise translate_ai_error(exc, "Failed to generate reading passage")

    if not data.get("title") or not data.get("content") or not isinstance(data.get("questions"), list):
        raise HTTPException(status_code=500, detail=INVALID_STRUCTURE_MESSAGE)

    return {
        "id": int(time.time() * 1000),
        "title": data["title"],
        "level": data.get("level") or level,
        "content": data["content"],
        "questions": number_questions(data["questions"]),
    }
