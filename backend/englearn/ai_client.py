from __future__ import annotations
import asyncio
import logging
import httpx
from fastapi import HTTPException
from typing import Any, Dict, List, Optional
from .errors import AIConfigError, AIResponseError, AIServiceError
from .settings import settings

logger = logging.getLogger(__name__)

# Statuses worth another attempt; everything else fails immediately
RETRYABLE_STATUSES = {408, 409, 429, 500, 502, 503, 504}

TTS_VOICES = ("alloy", "echo", "fable", "onyx", "nova", "shimmer")


class AIClient:
	"""Thin async client for an OpenAI-compatible REST API.

	Covers the three calls the app needs: chat completions, text-to-speech and
	transcription. Transient failures are retried ``max_retries`` times; text
	completions can additionally fall back to OpenRouter when it is configured.
	"""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		max_retries: Optional[int] = None,
		backoff_seconds: Optional[float] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.openai_api_key
		if not self.api_key:
			raise AIConfigError("OpenAI API key is not configured. Please set OPENAI_API_KEY in your environment variables.")
		self.base_url = (base_url or settings.openai_base_url).rstrip("/")
		self.model = model or settings.openai_model
		self.max_retries = settings.ai_max_retries if max_retries is None else max_retries
		self.backoff_seconds = settings.ai_retry_backoff_seconds if backoff_seconds is None else backoff_seconds
		self._client = httpx.AsyncClient(
			base_url=self.base_url,
			timeout=settings.ai_timeout_seconds,
			headers={"Authorization": f"Bearer {self.api_key}"},
			transport=transport,
		)
		self._fallback_client: Optional[httpx.AsyncClient] = None
		self._fallback_enabled = bool(settings.openrouter_api_key)
		self._openrouter_api_key = settings.openrouter_api_key
		self._openrouter_model = settings.openrouter_model
		self._openrouter_base_url = settings.openrouter_base_url
		self._openrouter_headers = {
			"Authorization": f"Bearer {self._openrouter_api_key}" if self._openrouter_api_key else "",
			"Content-Type": "application/json",
			"HTTP-Referer": settings.openrouter_referer,
			"X-Title": settings.openrouter_title,
		}
		if self._fallback_enabled:
			self._fallback_client = httpx.AsyncClient(timeout=settings.ai_timeout_seconds, transport=transport)

	async def complete(
		self,
		prompt: str,
		*,
		system: Optional[str] = None,
		temperature: float = 0.7,
		max_tokens: Optional[int] = None,
		json_mode: bool = True,
	) -> str:
		messages: List[Dict[str, str]] = []
		if system:
			messages.append({"role": "system", "content": system})
		messages.append({"role": "user", "content": prompt})
		payload: Dict[str, Any] = {
			"model": self.model,
			"messages": messages,
			"temperature": temperature,
		}
		if max_tokens is not None:
			payload["max_tokens"] = max_tokens
		if json_mode:
			payload["response_format"] = {"type": "json_object"}
		try:
			r = await self._request("POST", "/chat/completions", json=payload)
			return self._first_choice_text(r)
		except (httpx.HTTPError, AIResponseError) as primary_error:
			if not self._fallback_enabled:
				raise
			logger.warning("Primary completion failed (%s); trying OpenRouter fallback", primary_error)
			return await self._fallback_generate(messages, primary_error)

	async def synthesize_speech(self, text: str, *, voice: str = "alloy", speed: float = 1.0) -> bytes:
		payload = {
			"model": settings.openai_tts_model,
			"voice": voice,
			"input": text,
			"speed": speed,
		}
		r = await self._request("POST", "/audio/speech", json=payload)
		if not r.content:
			raise AIResponseError("Empty audio response from AI")
		return r.content

	async def transcribe(
		self,
		filename: str,
		content: bytes,
		content_type: Optional[str] = None,
		*,
		language: str = "en",
	) -> str:
		files = {"file": (filename or "audio.webm", content, content_type or "application/octet-stream")}
		data = {
			"model": settings.openai_transcribe_model,
			"language": language,
			"response_format": "text",
		}
		r = await self._request("POST", "/audio/transcriptions", data=data, files=files)
		return r.text.strip()

	async def aclose(self) -> None:
		await self._client.aclose()
		if self._fallback_client is not None:
			await self._fallback_client.aclose()

	async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
		attempt = 0
		while True:
			try:
				r = await self._client.request(method, path, **kwargs)
			except httpx.TransportError as net_err:
				if attempt >= self.max_retries:
					raise
				logger.warning("AI request %s %s failed (%s), retry %d/%d", method, path, net_err, attempt + 1, self.max_retries)
			else:
				if r.status_code not in RETRYABLE_STATUSES or attempt >= self.max_retries:
					r.raise_for_status()
					return r
				logger.warning("AI request %s %s returned %d, retry %d/%d", method, path, r.status_code, attempt + 1, self.max_retries)
			if self.backoff_seconds > 0:
				await asyncio.sleep(self.backoff_seconds * (2 ** attempt))
			attempt += 1

	@staticmethod
	def _first_choice_text(r: httpx.Response) -> str:
		try:
			data = r.json()
			content = data["choices"][0]["message"]["content"]
		except (ValueError, KeyError, IndexError, TypeError):
			raise AIResponseError("Invalid response from AI model")
		if not content:
			raise AIResponseError("No response from AI model")
		return content

	async def _fallback_generate(self, messages: List[Dict[str, str]], primary_error: Optional[Exception]) -> str:
		if not self._fallback_client or not self._openrouter_api_key:
			raise primary_error or RuntimeError("Fallback requested but OpenRouter is not configured")
		headers = {k: v for k, v in self._openrouter_headers.items() if v}
		payload: Dict[str, Any] = {
			"model": self._openrouter_model,
			"messages": messages,
		}
		try:
			r = await self._fallback_client.post(
				self._openrouter_base_url,
				headers=headers,
				json=payload,
			)
			r.raise_for_status()
			return self._first_choice_text(r)
		except (httpx.HTTPError, AIResponseError) as fallback_err:
			status = primary_error.response.status_code if isinstance(primary_error, httpx.HTTPStatusError) else None
			raise AIServiceError(
				f"Primary AI call failed ({primary_error}); fallback via OpenRouter also failed",
				status_code=status,
			) from fallback_err


async def get_ai_client():
	"""FastAPI dependency yielding a per-request client, closed afterwards."""
	try:
		client = AIClient()
	except AIConfigError as exc:
		raise HTTPException(status_code=500, detail=str(exc))
	try:
		yield client
	finally:
		await client.aclose()
