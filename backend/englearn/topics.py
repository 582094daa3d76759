"""Topic pools used when a learner does not ask for a specific topic."""
from __future__ import annotations
import random
from typing import Optional, Sequence


ACADEMIC_TOPICS = [
	"cognitive psychology and memory",
	"environmental science and sustainability",
	"artificial intelligence and machine learning",
	"neuroscience and brain function",
	"social psychology and behavior",
	"educational technology",
	"climate change adaptation",
	"bilingualism and language acquisition",
	"urban planning and development",
	"public health and epidemiology",
	"renewable energy systems",
	"data science and analytics",
	"biotechnology and genetics",
	"economic development",
	"sociology and culture",
	"marine biology and oceanography",
	"space exploration and astronomy",
	"philosophy of science",
	"digital transformation",
	"sustainable agriculture",
]

GRAPH_TOPICS = [
	"renewable energy adoption",
	"online learning trends",
	"remote work statistics",
	"electric vehicle sales",
	"social media usage",
	"e-commerce growth",
	"urban population growth",
	"healthcare technology adoption",
	"sustainable agriculture practices",
	"digital payment systems",
	"climate change indicators",
	"telemedicine usage",
	"recycling rates",
	"solar panel installations",
	"public transportation usage",
	"organic food consumption",
	"cybersecurity incidents",
	"renewable energy investment",
	"carbon emissions reduction",
	"smartphone penetration",
]

SOCIAL_MEDIA_TOPICS = [
	"climate change and sustainability",
	"technology and daily life",
	"education and learning",
	"health and wellness",
	"travel and culture",
	"work-life balance",
	"social media impact",
	"environmental protection",
	"mental health awareness",
	"remote work experiences",
	"sustainable living",
	"digital detox",
	"community engagement",
	"personal development",
	"cultural diversity",
	"food and nutrition",
	"exercise and fitness",
	"reading and books",
	"music and arts",
	"volunteering and charity",
]

LISTENING_EXERCISE_TYPES = [
	"conversation",
	"job interview",
	"academic lecture",
	"university discussion",
	"business presentation",
	"podcast discussion",
	"radio interview",
	"classroom discussion",
	"meeting",
	"phone conversation",
]

LISTENING_TOPICS = [
	"daily life and routines",
	"technology and innovation",
	"education and learning",
	"environment and sustainability",
	"health and wellness",
	"travel and culture",
	"business and career",
	"science and research",
	"arts and entertainment",
	"sports and fitness",
	"food and cooking",
	"social issues",
	"history and culture",
	"psychology and behavior",
	"economics and finance",
	"climate change",
	"artificial intelligence",
	"space exploration",
	"medicine and healthcare",
	"renewable energy",
]

VIDEO_TOPICS = [
	"sustainable living practices",
	"renewable energy solutions",
	"urban planning and development",
	"educational technology",
	"healthcare innovation",
	"climate change adaptation",
	"artificial intelligence in daily life",
	"remote work trends",
	"sustainable agriculture",
	"digital transformation",
	"recycling and waste management",
	"public transportation systems",
	"renewable energy adoption",
	"online learning platforms",
	"telemedicine and healthcare",
	"smart city initiatives",
	"renewable energy investment",
	"sustainable food production",
	"green technology",
	"community development",
]

OPINION_TOPICS = [
	"social media impact on society",
	"remote work vs office work",
	"importance of learning languages",
	"technology in education",
	"environmental protection",
	"work-life balance",
	"online shopping vs traditional shopping",
	"benefits of exercise",
	"importance of reading",
	"travel and cultural experiences",
	"healthy eating habits",
	"importance of sleep",
	"social networking",
	"online learning vs classroom learning",
	"renewable energy",
	"sustainable living",
	"mental health awareness",
	"community service",
	"artificial intelligence",
	"climate change action",
]


def pick(requested: Optional[str], pool: Sequence[str]) -> str:
	requested = (requested or "").strip()
	return requested or random.choice(pool)
