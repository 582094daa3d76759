import json

import httpx

from englearn.errors import INVALID_STRUCTURE_MESSAGE, QUOTA_MESSAGE, AIServiceError

READING = {
	"title": "Memory and Sleep",
	"level": "B2",
	"content": "Paragraph A: ...\n\nParagraph B: ...",
	"questions": [
		{"type": "multiple-choice", "question": "?", "options": ["a", "b", "c", "d"], "correct": 1},
		{"id": 7, "type": "ordering", "parts": ["x", "y"], "correctOrder": [1, 0]},
	],
}


def test_reading_generate(client, fake_ai):
	fake_ai.replies.append(json.dumps(READING))
	r = client.post("/api/reading/generate", json={"level": "B2", "topic": "sleep research"})
	assert r.status_code == 200
	body = r.json()
	assert isinstance(body["id"], int)
	assert body["title"] == "Memory and Sleep"
	assert [q["id"] for q in body["questions"]] == [1, 7]

	call = fake_ai.calls[0]
	assert call["temperature"] == 0.8
	assert call["max_tokens"] == 3000
	assert "sleep research" in call["prompt"]
	assert "B2" in call["prompt"]


def test_reading_accepts_fenced_reply(client, fake_ai):
	fake_ai.replies.append("```json\n" + json.dumps(READING) + "\n```")
	r = client.post("/api/reading/generate", json={"level": "C1"})
	assert r.status_code == 200
	assert r.json()["content"].startswith("Paragraph A")


def test_reading_requires_level(client, fake_ai):
	r = client.post("/api/reading/generate", json={"topic": "x"})
	assert r.status_code == 400
	assert r.json()["detail"] == "Missing required field: level"
	assert fake_ai.calls == []


def test_reading_rejects_incomplete_structure(client, fake_ai):
	fake_ai.replies.append(json.dumps({"title": "No content", "questions": []}))
	r = client.post("/api/reading/generate", json={"level": "B2"})
	assert r.status_code == 500
	assert r.json()["detail"] == INVALID_STRUCTURE_MESSAGE


def test_reading_unparseable_reply_is_500(client, fake_ai):
	fake_ai.replies.append("I cannot help with that.")
	r = client.post("/api/reading/generate", json={"level": "B2"})
	assert r.status_code == 500
	assert r.json()["detail"] == "Invalid JSON response from AI"


def test_quota_errors_become_429(client, fake_ai):
	fake_ai.replies.append(AIServiceError("fallback failed too", status_code=429))
	r = client.post("/api/reading/generate", json={"level": "B2"})
	assert r.status_code == 429
	assert r.json()["detail"] == QUOTA_MESSAGE


def test_network_errors_become_503(client, fake_ai):
	fake_ai.replies.append(httpx.ConnectError("connection refused"))
	r = client.post("/api/listening/generate", json={"level": "B1"})
	assert r.status_code == 503


def test_writing_task2(client, fake_ai):
	fake_ai.replies.append(json.dumps({
		"taskType": "task2",
		"title": "Integrated Writing Task 2: Energy",
		"graph": {"title": "g", "dataPoints": []},
		"podcast": {"title": "p", "transcript": "t"},
		"prompt": "Summarise the podcast and connect it to the graph.",
	}))
	r = client.post("/api/writing/generate", json={"level": "B2", "taskType": "task2"})
	assert r.status_code == 200
	assert r.json()["graph"]["title"] == "g"
	assert fake_ai.calls[0]["max_tokens"] == 2500
	assert fake_ai.calls[0]["temperature"] == 0.9


def test_writing_integrated_is_task2(client, fake_ai):
	fake_ai.replies.append(json.dumps({"graph": {"a": 1}, "podcast": {"b": 2}, "prompt": "p"}))
	r = client.post("/api/writing/generate", json={"level": "C1", "taskType": "integrated"})
	assert r.status_code == 200
	assert "podcast transcript" in fake_ai.calls[0]["prompt"]


def test_writing_task1_requires_post_and_comment(client, fake_ai):
	fake_ai.replies.append(json.dumps({"post": {"content": "hi"}, "prompt": "Respond."}))
	r = client.post("/api/writing/generate", json={"level": "B2", "taskType": "task1"})
	assert r.status_code == 500
	assert fake_ai.calls[0]["max_tokens"] == 2000


def test_writing_unknown_task_type(client, fake_ai):
	r = client.post("/api/writing/generate", json={"level": "B2", "taskType": "essay"})
	assert r.status_code == 400
	assert fake_ai.calls == []


def test_listening_estimates_missing_duration(client, fake_ai):
	transcript = " ".join(["word"] * 26)
	fake_ai.replies.append(json.dumps({
		"title": "Campus talk",
		"transcript": transcript,
		"questions": [{"type": "multiple-choice", "question": "?", "options": ["a", "b"], "correct": 0}],
	}))
	r = client.post("/api/listening/generate", json={"level": "B1", "exerciseType": "lecture"})
	assert r.status_code == 200
	body = r.json()
	assert body["duration"] == 11
	assert body["questions"][0]["id"] == 1
	assert "Exercise Type: lecture" in fake_ai.calls[0]["prompt"]
	assert fake_ai.calls[0]["temperature"] == 0.9


def test_listening_keeps_model_duration(client, fake_ai):
	fake_ai.replies.append(json.dumps({"title": "t", "transcript": "a b c", "duration": 45, "questions": []}))
	r = client.post("/api/listening/generate", json={"level": "B1"})
	assert r.json()["duration"] == 45


def test_listening_requires_transcript(client, fake_ai):
	fake_ai.replies.append(json.dumps({"title": "t", "questions": []}))
	r = client.post("/api/listening/generate", json={"level": "B1"})
	assert r.status_code == 500
	assert r.json()["detail"] == INVALID_STRUCTURE_MESSAGE


def test_speaking_independent(client, fake_ai):
	fake_ai.replies.append(json.dumps({"taskType": "independent", "prompt": "Do you prefer cities?", "duration": 120}))
	r = client.post("/api/speaking/generate", json={"level": "B2", "taskType": "independent"})
	assert r.status_code == 200
	assert r.json()["prompt"] == "Do you prefer cities?"
	assert fake_ai.calls[0]["max_tokens"] == 1500


def test_speaking_integrated_needs_video(client, fake_ai):
	fake_ai.replies.append(json.dumps({"taskType": "integrated", "prompt": "Summarise the video."}))
	r = client.post("/api/speaking/generate", json={"level": "C1", "taskType": "integrated"})
	assert r.status_code == 500
	assert fake_ai.calls[0]["max_tokens"] == 2000


def test_info(client):
	r = client.get("/info")
	assert r.status_code == 200
	assert r.json()["status"] == "ok"
