from __future__ import annotations
import math
import re
from typing import Any, Dict, List, Mapping


def count_words(text: str) -> int:
	return len([w for w in re.split(r"\s+", (text or "").strip()) if w])


def _is_index(value: Any) -> bool:
	return isinstance(value, int) and not isinstance(value, bool)


def _as_index_map(value: Any) -> Dict[int, Any]:
	if not isinstance(value, Mapping):
		return {}
	out: Dict[int, Any] = {}
	for key, item in value.items():
		try:
			out[int(key)] = item
		except (TypeError, ValueError):
			continue
	return out


def is_correct(question: Mapping[str, Any], answer: Any) -> bool:
	qtype = question.get("type")
	if qtype == "multiple-choice":
		correct = question.get("correct")
		if not _is_index(answer) or not _is_index(correct):
			return False
		return answer == correct
	if qtype == "matching":
		expected = _as_index_map(question.get("matches"))
		given = _as_index_map(answer)
		if not expected or len(given) != len(expected):
			return False
		return all(_is_index(given.get(k)) and given.get(k) == v for k, v in expected.items())
	if qtype == "ordering":
		expected_order = question.get("correctOrder")
		if not isinstance(expected_order, list) or not isinstance(answer, list):
			return False
		if not all(_is_index(item) for item in answer):
			return False
		return list(answer) == list(expected_order)
	return False


def grade_answers(questions: List[Mapping[str, Any]], answers: Mapping[Any, Any]) -> Dict[str, int]:
	"""Score objective reading/listening questions.

	``answers`` is keyed by question id (string or int, as it comes back from
	JSON). Unknown question types count as wrong.
	"""
	by_id = {str(k): v for k, v in (answers or {}).items()}
	correct = 0
	for index, question in enumerate(questions):
		qid = str(question.get("id", index + 1))
		if is_correct(question, by_id.get(qid)):
			correct += 1
	total = len(questions)
	percentage = int(math.floor(correct / total * 100 + 0.5)) if total else 0
	return {"correct": correct, "total": total, "percentage": percentage}


def skill_value_for(percentage: float) -> float:
	# Completing an exercise is worth a small bonus on top of the score
	return min(100.0, percentage + 10)


def draft_skill_value(word_count: int, target_words: int) -> float:
	if target_words <= 0:
		return 0.0
	return min(100.0, word_count / target_words * 50 + 25)
