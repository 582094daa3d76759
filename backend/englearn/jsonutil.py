from __future__ import annotations
import json
import re
from typing import Any, Dict

from .errors import AIResponseError


_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")
_FIRST_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str) -> Dict[str, Any]:
	"""Parse the JSON object a model was asked to return.

	Models in JSON mode normally return a bare object, but sometimes wrap it in
	a markdown fence or surround it with prose. The fenced block and then the
	outermost brace-delimited span are only tried when the whole text is not
	JSON; valid JSON that is not an object is rejected outright.

	Raises:
		AIResponseError: if no JSON object can be recovered
	"""
	text = text or ""
	try:
		data = json.loads(text)
	except ValueError:
		data = _recover(text)
	if not isinstance(data, dict):
		raise AIResponseError("Invalid JSON response from AI")
	return data


def _recover(text: str) -> Any:
	for pattern, group in ((_FENCED_JSON, 1), (_FIRST_OBJECT, 0)):
		match = pattern.search(text)
		if not match:
			continue
		try:
			return json.loads(match.group(group))
		except ValueError:
			continue
	raise AIResponseError("Invalid JSON response from AI")
