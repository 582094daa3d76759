import httpx
import pytest
from fastapi import HTTPException

from englearn.errors import (
	AIConfigError,
	AIServiceError,
	CONNECTION_MESSAGE,
	INVALID_KEY_MESSAGE,
	QUOTA_MESSAGE,
	UNAVAILABLE_MESSAGE,
	translate_ai_error,
)


def _status_error(code):
	request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
	response = httpx.Response(code, request=request)
	return httpx.HTTPStatusError(f"status {code}", request=request, response=response)


@pytest.mark.parametrize(
	"code, status, message",
	[
		(429, 429, QUOTA_MESSAGE),
		(401, 401, INVALID_KEY_MESSAGE),
		(500, 503, UNAVAILABLE_MESSAGE),
		(503, 503, UNAVAILABLE_MESSAGE),
	],
)
def test_status_codes(code, status, message):
	err = translate_ai_error(_status_error(code), "default")
	assert err.status_code == status
	assert err.detail == message


def test_transport_errors_are_connectivity_problems():
	err = translate_ai_error(httpx.ConnectError("boom"), "default")
	assert (err.status_code, err.detail) == (503, CONNECTION_MESSAGE)


@pytest.mark.parametrize(
	"text, status, message",
	[
		("You exceeded your current quota", 429, QUOTA_MESSAGE),
		("Rate limit reached for gpt-4o-mini", 429, QUOTA_MESSAGE),
		("getaddrinfo ENOTFOUND api.openai.com", 503, CONNECTION_MESSAGE),
		("Request timeout", 503, CONNECTION_MESSAGE),
		("Incorrect API key provided", 401, INVALID_KEY_MESSAGE),
	],
)
def test_message_heuristics(text, status, message):
	err = translate_ai_error(RuntimeError(text), "default")
	assert (err.status_code, err.detail) == (status, message)


def test_fallback_wrapper_keeps_primary_status():
	err = translate_ai_error(AIServiceError("both providers failed", status_code=401), "default")
	assert err.status_code == 401


def test_config_error_is_500_with_its_message():
	err = translate_ai_error(AIConfigError("OpenAI API key is not configured."), "default")
	assert err.status_code == 500
	assert "not configured" in err.detail


def test_unknown_errors_fall_back_to_message_or_default():
	assert translate_ai_error(RuntimeError("weird"), "default").detail == "weird"
	assert translate_ai_error(RuntimeError(""), "default").detail == "default"


def test_http_exceptions_pass_through():
	original = HTTPException(status_code=400, detail="bad")
	assert translate_ai_error(original, "default") is original
