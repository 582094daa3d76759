from __future__ import annotations
from typing import Optional

import httpx
from fastapi import HTTPException


QUOTA_MESSAGE = "OpenAI API quota exceeded. Please check the billing settings of your OpenAI account and try again."
INVALID_KEY_MESSAGE = "Invalid OpenAI API key. Please check your configuration."
UNAVAILABLE_MESSAGE = "The OpenAI service is currently unavailable. Please try again later."
CONNECTION_MESSAGE = "Connection error. Please check your internet connection or VPN settings and try again."
INVALID_STRUCTURE_MESSAGE = "Invalid response structure from AI"

_QUOTA_MARKERS = ("quota", "billing", "exceeded", "429", "rate limit")
_NETWORK_MARKERS = ("econnrefused", "enotfound", "etimedout", "network", "timeout", "timed out", "fetch")
_AUTH_MARKERS = ("api key", "authentication")


class AIConfigError(ValueError):
	"""Raised when the AI provider cannot be used because it is not configured."""


class AIResponseError(RuntimeError):
	"""The provider answered, but not with something we can use."""


class AIServiceError(RuntimeError):
	def __init__(self, message: str, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.status_code = status_code


def status_of(exc: BaseException) -> Optional[int]:
	if isinstance(exc, httpx.HTTPStatusError):
		return exc.response.status_code
	code = getattr(exc, "status_code", None)
	if isinstance(code, int):
		return code
	return None


def translate_ai_error(exc: BaseException, default_message: str) -> HTTPException:
	"""Map a failure while talking to the AI provider to a user-facing HTTP error.

	Status codes win over message heuristics; the message checks cover errors
	that carry no response (network failures, fallback wrappers).
	"""
	if isinstance(exc, HTTPException):
		return exc
	if isinstance(exc, AIConfigError):
		return HTTPException(status_code=500, detail=str(exc))

	status = status_of(exc)
	if status == 429:
		return HTTPException(status_code=429, detail=QUOTA_MESSAGE)
	if status == 401:
		return HTTPException(status_code=401, detail=INVALID_KEY_MESSAGE)
	if status is not None and status >= 500:
		return HTTPException(status_code=503, detail=UNAVAILABLE_MESSAGE)

	if isinstance(exc, httpx.TransportError):
		return HTTPException(status_code=503, detail=CONNECTION_MESSAGE)

	message = str(exc) or ""
	lowered = message.lower()
	if any(marker in lowered for marker in _QUOTA_MARKERS):
		return HTTPException(status_code=429, detail=QUOTA_MESSAGE)
	if any(marker in lowered for marker in _NETWORK_MARKERS):
		return HTTPException(status_code=503, detail=CONNECTION_MESSAGE)
	if any(marker in lowered for marker in _AUTH_MARKERS):
		return HTTPException(status_code=401, detail=INVALID_KEY_MESSAGE)
	return HTTPException(status_code=500, detail=message or default_message)
