def test_get_creates_default_record(client):
	r = client.get("/api/progress")
	assert r.status_code == 200
	body = r.json()
	assert body["success"] is True
	assert body["data"]["totalCompleted"] == 0
	assert body["data"]["skills"] == {"reading": 0, "writing": 0, "listening": 0, "speaking": 0}


def test_users_are_kept_apart(client):
	client.post("/api/progress/activity", json={"userId": "u1", "skill": "reading", "value": 80, "minutes": 15})
	r = client.get("/api/progress", params={"userId": "u2"})
	assert r.json()["data"]["totalCompleted"] == 0
	r = client.get("/api/progress", params={"userId": "u1"})
	assert r.json()["data"]["totalCompleted"] == 1
	assert r.json()["data"]["totalTime"] == 15


def test_post_ignores_client_overall_and_clamps(client):
	r = client.post(
		"/api/progress",
		json={
			"userId": "p",
			"totalCompleted": 12,
			"totalTime": 90,
			"overallProgress": 99,
			"skills": {"reading": 120, "writing": 60, "listening": 40, "speaking": 20},
		},
	)
	assert r.status_code == 200
	data = r.json()["data"]
	assert data["skills"]["reading"] == 100
	assert data["overallProgress"] == 55
	assert data["totalCompleted"] == 12
	assert data["achievements"] == 150


def test_patch_increments_counters(client):
	client.post("/api/progress/activity", json={"userId": "q", "skill": "writing", "value": 70, "minutes": 10})
	r = client.patch("/api/progress", json={"userId": "q", "totalCompleted": 4, "totalTime": 5, "skills": {"speaking": 50}})
	data = r.json()["data"]
	assert data["totalCompleted"] == 5
	assert data["totalTime"] == 15
	assert data["skills"]["writing"] == 70
	assert data["skills"]["speaking"] == 50
	assert data["achievements"] == 5


def test_patch_cannot_lower_achievements(client):
	client.patch("/api/progress", json={"userId": "r", "achievements": 25})
	r = client.patch("/api/progress", json={"userId": "r", "achievements": 3})
	assert r.json()["data"]["achievements"] == 25


def test_activity_rejects_unknown_skill(client):
	r = client.post("/api/progress/activity", json={"skill": "grammar", "value": 10})
	assert r.status_code == 422


def test_activity_rejects_negative_minutes(client):
	r = client.post("/api/progress/activity", json={"skill": "reading", "value": 10, "minutes": -1})
	assert r.status_code == 422
