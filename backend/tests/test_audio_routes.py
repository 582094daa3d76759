import httpx

from englearn.errors import UNAVAILABLE_MESSAGE


def test_tts_returns_mp3(client, fake_ai):
	r = client.post("/api/listening/tts", json={"text": "Hello there.", "voice": "nova"})
	assert r.status_code == 200
	assert r.headers["content-type"] == "audio/mpeg"
	assert r.headers["content-length"] == str(len(fake_ai.audio))
	assert r.content == fake_ai.audio
	assert fake_ai.calls[0]["voice"] == "nova"


def test_tts_defaults_to_alloy(client, fake_ai):
	client.post("/api/listening/tts", json={"text": "Hello."})
	assert fake_ai.calls[0]["voice"] == "alloy"


def test_tts_requires_text(client, fake_ai):
	r = client.post("/api/listening/tts", json={"text": "   "})
	assert r.status_code == 400
	assert r.json()["detail"] == "Missing required field: text"


def test_tts_rejects_unknown_voice(client, fake_ai):
	r = client.post("/api/listening/tts", json={"text": "Hello.", "voice": "robot"})
	assert r.status_code == 400
	assert fake_ai.calls == []


def test_tts_provider_outage(client, fake_ai):
	request = httpx.Request("POST", "https://api.openai.com/v1/audio/speech")
	fake_ai.error = httpx.HTTPStatusError("bad gateway", request=request, response=httpx.Response(502, request=request))
	r = client.post("/api/listening/tts", json={"text": "Hello."})
	assert r.status_code == 503
	assert r.json()["detail"] == UNAVAILABLE_MESSAGE


def test_transcribe(client, fake_ai):
	r = client.post(
		"/api/speaking/transcribe",
		files={"audio": ("answer.webm", b"\x1aE\xdf\xa3 fake webm", "audio/webm")},
	)
	assert r.status_code == 200
	assert r.json() == {"transcript": fake_ai.transcript}
	call = fake_ai.calls[0]
	assert call["filename"] == "answer.webm"
	assert call["language"] == "en"
	assert call["size"] > 0


def test_transcribe_requires_audio(client, fake_ai):
	r = client.post("/api/speaking/transcribe", data={"other": "x"})
	assert r.status_code == 400
	assert r.json()["detail"] == "Missing required field: audio file"


def test_transcribe_rejects_empty_file(client, fake_ai):
	r = client.post("/api/speaking/transcribe", files={"audio": ("empty.webm", b"", "audio/webm")})
	assert r.status_code == 400
