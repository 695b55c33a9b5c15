import json

import pytest

from naijascholar import services
from naijascholar.errors import GenerationError
from naijascholar.prompts import TUTOR_PERSONALITY_PROMPTS
from naijascholar.models import TutorPersonality
from naijascholar.services import EMPTY_TUTOR_REPLY

from helpers import make_questions, sse_payloads


# ---- /api/gemini-chat ----

def test_chat_returns_text(http, fake_gemini):
	fake_gemini.reply = "Photosynthesis is how plants make food."
	r = http.post("/api/gemini-chat", json={
		"history": [{"sender": "ai", "text": "Hi!"}, {"sender": "user", "text": "Explain photosynthesis"}],
		"message": "Explain photosynthesis",
		"systemInstruction": "You are a tutor.",
	})
	assert r.status_code == 200, r.text
	assert r.json() == {"text": "Photosynthesis is how plants make food."}
	prompt, kwargs = fake_gemini.calls[0]
	assert prompt == "Explain photosynthesis"
	assert kwargs["system_instruction"] == "You are a tutor."
	assert kwargs["history"] == [{"role": "model", "parts": [{"text": "Hi!"}]}]
	assert fake_gemini.closed


def test_chat_falls_back_to_personality_template(http, fake_gemini):
	fake_gemini.reply = "Focus."
	r = http.post("/api/gemini-chat", json={"message": "hi", "personality": "Strict"})
	assert r.status_code == 200
	assert fake_gemini.calls[0][1]["system_instruction"] == TUTOR_PERSONALITY_PROMPTS[TutorPersonality.STRICT]


def test_chat_upstream_failure_is_a_500_with_message(http, fake_gemini):
	fake_gemini.error = GenerationError("Gemini request failed (403): denied", status_code=403)
	r = http.post("/api/gemini-chat", json={"message": "hi", "systemInstruction": "x"})
	assert r.status_code == 500
	assert r.json() == {"message": "Gemini request failed (403): denied", "code": "generation_failed"}
	assert fake_gemini.closed


def test_chat_rejects_get(http, fake_gemini):
	r = http.get("/api/gemini-chat")
	assert r.status_code == 405
	assert r.json()["code"] == "method_not_allowed"


def test_chat_without_credential_is_a_configuration_error(http, no_api_key):
	r = http.post("/api/gemini-chat", json={"message": "hi", "systemInstruction": "x"})
	assert r.status_code == 500
	assert r.json() == {"message": "API key is not configured.", "code": "configuration"}


def test_chat_malformed_body_is_400(http, fake_gemini):
	r = http.post("/api/gemini-chat", content=b"{not json", headers={"content-type": "application/json"})
	assert r.status_code == 400
	assert r.json()["code"] == "bad_request"
	r = http.post("/api/gemini-chat", json={"history": []})
	assert r.status_code == 400


# ---- /api/generate-test ----

def test_generate_test_returns_five_mathematics_questions(http, fake_gemini):
	fake_gemini.reply = "```json\n" + json.dumps(make_questions(5)) + "\n```"
	r = http.post("/api/generate-test", json={"subject": "Mathematics", "numberOfQuestions": 5})
	assert r.status_code == 200, r.text
	data = r.json()
	assert len(data) == 5
	for q in data:
		assert len(q["options"]) == 4
		assert q["correctAnswer"] in q["options"]
	prompt, kwargs = fake_gemini.calls[0]
	assert "exactly 5" in prompt and "Mathematics" in prompt
	assert kwargs["response_mime_type"] == "application/json"


def test_generate_test_invalid_ai_json_is_reported_distinctly(http, fake_gemini):
	fake_gemini.reply = "Sure! Here are your questions:"
	r = http.post("/api/generate-test", json={"subject": "Physics", "numberOfQuestions": 2})
	assert r.status_code == 500
	assert r.json()["code"] == "invalid_ai_response"


def test_generate_test_count_out_of_range_is_400(http, fake_gemini):
	for n in (0, 51):
		r = http.post("/api/generate-test", json={"subject": "Physics", "numberOfQuestions": n})
		assert r.status_code == 400, n
	assert fake_gemini.calls == []


def test_generate_test_trims_extra_questions(http, fake_gemini):
	fake_gemini.reply = json.dumps(make_questions(6))
	r = http.post("/api/generate-test", json={"subject": "Mathematics", "numberOfQuestions": 5})
	assert r.status_code == 200, r.text
	assert [q["question"] for q in r.json()] == [f"Mathematics question {i}?" for i in range(1, 6)]


def test_generate_test_short_reply_is_invalid_ai_response(http, fake_gemini):
	fake_gemini.reply = json.dumps(make_questions(3))
	r = http.post("/api/generate-test", json={"subject": "Mathematics", "numberOfQuestions": 5})
	assert r.status_code == 500
	assert r.json()["code"] == "invalid_ai_response"
	assert "Expected 5 questions, got 3" in r.json()["message"]
	assert fake_gemini.closed


# ---- /api/gemini-proxy ----

def test_proxy_unknown_action_is_400(http, fake_gemini):
	r = http.post("/api/gemini-proxy", json={"action": "launchRocket", "payload": {}})
	assert r.status_code == 400
	assert r.json()["message"] == "Unknown action: launchRocket"


def test_proxy_rejects_get(http, fake_gemini):
	assert http.get("/api/gemini-proxy").status_code == 405


def test_proxy_stream_emits_text_frames(http, fake_gemini):
	fake_gemini.fragments = ["Great ", "question!"]
	r = http.post("/api/gemini-proxy", json={
		"action": "getTutorResponseStream",
		"payload": {"userMessage": "What is 2+2?", "systemPrompt": "Be kind.", "history": []},
	})
	assert r.status_code == 200
	assert r.headers["content-type"].startswith("text/event-stream")
	assert sse_payloads(r.text) == [{"text": "Great "}, {"text": "question!"}]
	assert fake_gemini.closed


def test_proxy_stream_failure_ends_with_error_frame(http, fake_gemini):
	fake_gemini.fragments = ["Partial"]
	fake_gemini.stream_error = GenerationError("upstream dropped")
	r = http.post("/api/gemini-proxy", json={
		"action": "getTutorResponseStream",
		"payload": {"userMessage": "hi"},
	})
	assert r.status_code == 200
	assert sse_payloads(r.text) == [{"text": "Partial"}, {"error": "upstream dropped"}]
	assert fake_gemini.closed


def test_proxy_stream_without_text_ends_with_error_frame(http, fake_gemini):
	fake_gemini.fragments = []
	r = http.post("/api/gemini-proxy", json={
		"action": "getTutorResponseStream",
		"payload": {"userMessage": "hi"},
	})
	assert r.status_code == 200
	assert sse_payloads(r.text) == [{"error": EMPTY_TUTOR_REPLY}]
	assert fake_gemini.closed


def test_proxy_stream_requires_message_or_image(http, fake_gemini):
	r = http.post("/api/gemini-proxy", json={"action": "getTutorResponseStream", "payload": {"history": []}})
	assert r.status_code == 400


def test_proxy_explanation_for_wrong_answer(http, fake_gemini):
	fake_gemini.reply = "Abuja became the capital in 1991."
	r = http.post("/api/gemini-proxy", json={
		"action": "getExplanationForQuestion",
		"payload": {
			"question": "What is the capital of Nigeria?",
			"options": ["Lagos", "Kano", "Abuja", "Ibadan"],
			"correctAnswer": "Abuja",
			"selectedAnswer": "Lagos",
		},
	})
	assert r.status_code == 200
	assert r.json() == {"text": "Abuja became the capital in 1991."}
	prompt = fake_gemini.calls[0][0]
	assert "incorrect" in prompt and "Abuja" in prompt


def test_proxy_mock_test_returns_validated_array(http, fake_gemini):
	fake_gemini.reply = json.dumps(make_questions(3, "Chemistry"))
	r = http.post("/api/gemini-proxy", json={
		"action": "generateMockTestQuestions",
		"payload": {"subject": "Chemistry", "numberOfQuestions": 3},
	})
	assert r.status_code == 200
	assert [q["question"] for q in r.json()] == [f"Chemistry question {i}?" for i in (1, 2, 3)]


def test_proxy_without_credential(http, no_api_key):
	r = http.post("/api/gemini-proxy", json={"action": "getExplanationForQuestion", "payload": {}})
	assert r.status_code == 500
	assert r.json()["code"] == "configuration"


class CountingClient:
	opened = 0

	def __init__(self):
		type(self).opened += 1

	async def aclose(self):
		pass


@pytest.fixture
def counting_client(monkeypatch, api_key):
	monkeypatch.setattr(CountingClient, "opened", 0)
	monkeypatch.setattr(services, "GeminiClient", CountingClient)
	return CountingClient


@pytest.mark.parametrize("path, body", [
	("/api/gemini-chat", {"history": []}),
	("/api/generate-test", {"subject": "Physics", "numberOfQuestions": 0}),
	("/api/generate-test", {"numberOfQuestions": 5}),
	("/api/gemini-proxy", {"action": "getTutorResponseStream", "payload": {"history": []}}),
	("/api/gemini-proxy", {"action": "getExplanationForQuestion", "payload": {}}),
	("/api/gemini-proxy", {"action": "launchRocket", "payload": {}}),
])
def test_rejected_body_opens_no_upstream_client(http, counting_client, path, body):
	r = http.post(path, json=body)
	assert r.status_code == 400, r.text
	assert counting_client.opened == 0


# ---- content and info ----

def test_subjects_and_past_questions(http):
	assert "Mathematics" in http.get("/api/subjects").json()
	maths = http.get("/api/past-questions", params={"subject": "Mathematics"}).json()
	assert {q["id"] for q in maths} == {1, 9}
	assert http.get("/api/past-questions", params={"subject": "Music"}).json() == []
	assert len(http.get("/api/past-questions").json()) == 15


def test_info_reports_credential_presence(http, api_key):
	assert http.get("/info").json() == {"status": "ok", "gemini_configured": True}
	assert http.get("/health").json() == {"status": "ok"}
