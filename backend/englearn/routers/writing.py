from __future__ import annotations
import logging
import random
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ..ai_client import AIClient, get_ai_client
from ..errors import INVALID_STRUCTURE_MESSAGE, translate_ai_error
from ..jsonutil import extract_json_object
from ..topics import GRAPH_TOPICS, SOCIAL_MEDIA_TOPICS, pick

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/writing", tags=["writing"])


TASK1 = "task1"  # social media post + comment response
TASK2 = "task2"  # graph + podcast integrated task

_TASK_ALIASES = {
	"task1": TASK1,
	"independent": TASK1,
	"task2": TASK2,
	"integrated": TASK2,
}


class GenerateRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	level: Optional[str] = None
	task_type: Optional[str] = Field(default=None, alias="taskType")
	topic: Optional[str] = None


def resolve_task_type(task_type: Optional[str]) -> str:
	key = (task_type or "").strip().lower()
	if not key:
		return random.choice((TASK1, TASK2))
	if key not in _TASK_ALIASES:
		raise HTTPException(status_code=400, detail="taskType must be one of task1, task2, independent, integrated")
	return _TASK_ALIASES[key]


def _build_task2_prompt(level: str, topic: str) -> str:
	return f"""You are an e-TEP (English Test of English Proficiency) exam content creator. Generate an Integrated Writing Task 2 that includes:
1. A realistic graph/chart with data points
2. A podcast transcript related to the graph topic
3. Clear instructions for students

Topic: {topic}
Level: {level} (B1/B2, B2, B2-C1, or C1)

Requirements:
- Create a graph with 4-6 data points showing a trend over time (2010-2024 or similar range)
- Generate realistic data that makes sense for the topic
- Create a podcast transcript (3-4 main points, 150-200 words) that discusses the topic
- The podcast should connect with the graph data but also provide additional context
- Word count requirement: 200-250 words for B2-C1/C1, 150-200 words for B1/B2

Format your response as JSON with this exact structure:
{{
  "taskType": "task2",
  "title": "Integrated Writing Task 2: [Topic Name]",
  "level": "{level}",
  "graph": {{
    "title": "Graph title",
    "type": "line" or "bar" or "pie",
    "xAxis": "Time period (e.g., Years)",
    "yAxis": "Measurement unit (e.g., Percentage, Millions)",
    "dataPoints": [
      {{"label": "2010", "value": 15, "unit": "%"}},
      {{"label": "2015", "value": 22, "unit": "%"}},
      {{"label": "2020", "value": 35, "unit": "%"}},
      {{"label": "2023", "value": 48, "unit": "%"}}
    ],
    "description": "Brief description of what the graph shows"
  }},
  "podcast": {{
    "title": "Podcast title",
    "transcript": "Full transcript of the podcast (3-4 main points, 150-200 words)",
    "mainPoints": ["Point 1", "Point 2", "Point 3", "Point 4"]
  }},
  "prompt": "Full writing prompt for students",
  "tips": ["Tip 1", "Tip 2", "Tip 3", "Tip 4"],
  "wordCount": 200
}}

Important:
- Make the graph data realistic and meaningful
- Ensure the podcast transcript connects with the graph but adds new information
- Create a prompt that clearly instructs students to summarize the podcast and connect it with the graph
- Use appropriate vocabulary for the level
- Make each task unique and different from previous ones"""


def _build_task1_prompt(level: str, topic: str) -> str:
	return f"""You are an e-TEP (English Test of English Proficiency) exam content creator. Generate an Integrated Writing Task 1 (Social Media Post Response) that includes:
1. A realistic social media post (Facebook, Twitter/X, Instagram style)
2. A comment responding to the post
3. Clear instructions for students

Topic: {topic}
Level: {level} (B1/B2, B2, B2-C1, or C1)

Requirements:
- Create an engaging social media post (2-3 sentences) that expresses an opinion or shares an experience
- Create a comment (1-2 sentences) that responds to the post
- The post and comment should be natural and realistic
- Word count requirement: 100-150 words for B2-C1/C1, 80-120 words for B1/B2
- Students should respond to both the post and the comment, expressing their own opinion

Format your response as JSON with this exact structure:
{{
  "taskType": "task1",
  "title": "Integrated Writing Task 1: Social Media Response",
  "level": "{level}",
  "post": {{
    "author": "Realistic name",
    "platform": "Facebook" or "Twitter" or "Instagram",
    "content": "The social media post content (2-3 sentences)",
    "timestamp": "Realistic timestamp"
  }},
  "comment": {{
    "author": "Different realistic name",
    "content": "The comment responding to the post (1-2 sentences)"
  }},
  "prompt": "Full writing prompt for students explaining what they need to do",
  "tips": ["Tip 1", "Tip 2", "Tip 3", "Tip 4"],
  "wordCount": 120
}}

Important:
- Make the post and comment natural and engaging
- Ensure students can clearly express their opinion about the topic
- Use appropriate language for the level
- Make each task unique and different from previous ones
- The post should be thought-provoking enough to generate a meaningful response"""


@router.post("/generate")
async def generate_task(req: GenerateRequest, client: AIClient = Depends(get_ai_client)):
	level = (req.level or "").strip()
	if not level:
		raise HTTPException(status_code=400, detail="Missing required field: level")
	task_type = resolve_task_type(req.task_type)
	if task_type == TASK2:
		prompt = _build_task2_prompt(level, pick(req.topic, GRAPH_TOPICS))
		system = (
			"You are an expert e-TEP exam content creator specializing in integrated writing tasks. "
			"You create realistic, engaging, and pedagogically sound writing prompts with graphs and podcast transcripts."
		)
		max_tokens = 2500
		required = ("graph", "podcast", "prompt")
	else:
		prompt = _build_task1_prompt(level, pick(req.topic, SOCIAL_MEDIA_TOPICS))
		system = (
			"You are an expert e-TEP exam content creator specializing in integrated writing tasks. "
			"You create realistic, engaging social media posts and comments that prompt meaningful student responses."
		)
		max_tokens = 2000
		required = ("post", "comment", "prompt")

	try:
		raw = await client.complete(prompt, system=system, temperature=0.9, max_tokens=max_tokens)
		data = extract_json_object(raw)
	except Exception as exc:
		logger.exception("Error generating writing task")
		raise translate_ai_error(exc, "Failed to generate writing task")

	if any(not data.get(key) for key in required):
		raise HTTPException(status_code=500, detail=INVALID_STRUCTURE_MESSAGE)

	return {"id": int(time.time() * 1000), **data}
