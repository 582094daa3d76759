import json

import httpx
import pytest

from englearn.evaluation_client import (
	CONNECTION_MESSAGE,
	TIMEOUT_MESSAGE,
	UNREACHABLE_MESSAGE,
	EvaluationClient,
	EvaluationError,
)


def _client(handler):
	return EvaluationClient("http://testserver", transport=httpx.MockTransport(handler))


def test_evaluate_writing_returns_evaluation():
	seen = []

	def handler(request):
		seen.append(json.loads(request.content))
		return httpx.Response(200, json={"evaluation": {"score": 80}})

	with _client(handler) as client:
		assert client.evaluate_writing("essay", "Respond to the post.", "B2") == {"score": 80}
	assert seen[0] == {"type": "writing", "content": "essay", "prompt": "Respond to the post.", "level": "B2"}


def test_evaluate_speaking_sends_transcript():
	seen = []

	def handler(request):
		seen.append(json.loads(request.content))
		return httpx.Response(200, json={"evaluation": {"score": 60}})

	with _client(handler) as client:
		client.evaluate_speaking("I think...", "Do you agree?", "B1")
	assert seen[0]["type"] == "speaking"
	assert seen[0]["content"] == "I think..."


@pytest.mark.parametrize(
	"exc, message",
	[
		(httpx.ReadTimeout, TIMEOUT_MESSAGE),
		(httpx.ConnectError, CONNECTION_MESSAGE),
		(httpx.RemoteProtocolError, UNREACHABLE_MESSAGE),
	],
)
def test_network_failures(exc, message):
	def handler(request):
		raise exc("boom", request=request)

	with _client(handler) as client:
		with pytest.raises(EvaluationError) as info:
			client.evaluate_writing("essay", "p", "B2")
	assert str(info.value) == message


def test_server_detail_is_surfaced():
	def handler(request):
		return httpx.Response(429, json={"detail": "OpenAI API quota exceeded."})

	with _client(handler) as client:
		with pytest.raises(EvaluationError, match="quota exceeded"):
			client.evaluate_writing("essay", "p", "B2")


def test_error_without_detail():
	def handler(request):
		return httpx.Response(502, text="<html>Bad gateway</html>")

	with _client(handler) as client:
		with pytest.raises(EvaluationError, match="status 502"):
			client.evaluate_speaking("t", "p", "B2")


def test_missing_evaluation_key():
	def handler(request):
		return httpx.Response(200, json={"result": {}})

	with _client(handler) as client:
		with pytest.raises(EvaluationError, match="Invalid response format"):
			client.evaluate_writing("essay", "p", "B2")
