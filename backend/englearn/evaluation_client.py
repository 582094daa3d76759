from __future__ import annotations
from typing import Any, Dict, Optional

import httpx


TIMEOUT_MESSAGE = "The request timed out. Please check your internet connection and try again."
CONNECTION_MESSAGE = "Connection error. Please check your internet connection or VPN settings and try again."
UNREACHABLE_MESSAGE = "Could not reach the server. Please check your internet connection and try again."


class EvaluationError(Exception):
	pass


class EvaluationClient:
	"""Calls ``POST /api/evaluate`` the way the practice pages do.

	Every call is bounded by a single 60 second timeout; network failures are
	reported with fixed learner-facing messages.
	"""

	def __init__(
		self,
		base_url: str = "http://localhost:8000",
		*,
		timeout: float = 60.0,
		transport: Optional[httpx.BaseTransport] = None,
	) -> None:
		self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

	def evaluate_writing(self, content: str, prompt: str, level: str) -> Dict[str, Any]:
		return self._evaluate("writing", content, prompt, level)

	def evaluate_speaking(self, transcript: str, prompt: str, level: str) -> Dict[str, Any]:
		return self._evaluate("speaking", transcript, prompt, level)

	def close(self) -> None:
		self._client.close()

	def __enter__(self) -> "EvaluationClient":
		return self

	def __exit__(self, *exc_info: Any) -> None:
		self.close()

	def _evaluate(self, kind: str, content: str, prompt: str, level: str) -> Dict[str, Any]:
		body = {"type": kind, "content": content, "prompt": prompt, "level": level}
		try:
			r = self._client.post("/api/evaluate", json=body)
		except httpx.TimeoutException:
			raise EvaluationError(TIMEOUT_MESSAGE)
		except httpx.ConnectError:
			raise EvaluationError(CONNECTION_MESSAGE)
		except httpx.TransportError:
			raise EvaluationError(UNREACHABLE_MESSAGE)

		if r.is_error:
			try:
				error_body = r.json()
			except ValueError:
				error_body = None
			detail = error_body.get("detail") if isinstance(error_body, dict) else None
			raise EvaluationError(detail or f"Evaluation failed with status {r.status_code}")

		try:
			data = r.json()
		except ValueError:
			raise EvaluationError("Invalid response format from server")
		evaluation = data.get("evaluation") if isinstance(data, dict) else None
		if not evaluation:
			raise EvaluationError("Invalid response format from server")
		return evaluation
