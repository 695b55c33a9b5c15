from __future__ import annotations
import json
import logging
from typing import Any, AsyncIterator, Callable, Dict, List

from .errors import ConfigurationError
from .gemini_client import GeminiClient
from .models import ChatRequest, ExplanationRequest, MockQuestion, TutorStreamRequest
from .parsing import parse_mock_questions
from .prompts import (
	EXPLANATION_SYSTEM_INSTRUCTION,
	MOCK_TEST_SYSTEM_INSTRUCTION,
	build_explanation_prompt,
	build_mock_test_prompt,
	build_tutor_prompt,
)
from .settings import settings

logger = logging.getLogger(__name__)


EMPTY_TUTOR_REPLY = "The tutor returned an empty reply. Please rephrase your question."

ClientFactory = Callable[[], GeminiClient]


def _open_client() -> GeminiClient:
	return GeminiClient()


def get_client_factory() -> ClientFactory:
	"""Route dependency: check the credential, hand back a way to open a client.

	Dependencies resolve before the body is validated, so the route opens the
	client itself once its body is known to be good.
	"""
	if not settings.api_key:
		raise ConfigurationError("API key is not configured.")
	return _open_client


async def tutor_reply(client: GeminiClient, req: ChatRequest) -> str:
	prompt = build_tutor_prompt(
		req.personality,
		req.history,
		req.message,
		system_instruction=req.system_instruction,
	)
	return await client.generate(
		req.message,
		system_instruction=prompt.system_instruction,
		history=prompt.history,
		temperature=settings.chat_temperature,
		top_p=settings.chat_top_p,
	)


def sse_frame(data: Dict[str, Any]) -> str:
	return f"data: {json.dumps(data)}\n\n"


async def tutor_stream_frames(client: GeminiClient, req: TutorStreamRequest) -> AsyncIterator[str]:
	"""Forward upstream fragments as SSE frames, one frame per fragment.

	A failure mid-stream, or an upstream reply with no text at all, becomes a
	final ``{error}`` frame. The generator always finishes and releases the
	upstream client, whatever the outcome.
	"""
	prompt = build_tutor_prompt(
		req.personality,
		req.history,
		req.user_message,
		system_instruction=req.system_prompt,
		image=req.image,
	)
	sent = 0
	try:
		async for text in client.stream(
			prompt.parts,
			system_instruction=prompt.system_instruction,
			history=prompt.history,
			temperature=settings.chat_temperature,
			top_p=settings.chat_top_p,
		):
			sent += 1
			yield sse_frame({"text": text})
		if not sent:
			# e.g. a safety block: candidates arrive but carry no text
			logger.warning("Tutor stream finished without any text")
			yield sse_frame({"error": EMPTY_TUTOR_REPLY})
	except Exception as e:
		logger.exception("Tutor stream failed")
		yield sse_frame({"error": str(e) or "The tutor stream failed."})
	finally:
		await client.aclose()


async def explain_question(client: GeminiClient, req: ExplanationRequest) -> str:
	prompt = build_explanation_prompt(req.question, req.options, req.correct_answer, req.selected_answer)
	return await client.generate(prompt, system_instruction=EXPLANATION_SYSTEM_INSTRUCTION)


async def generate_mock_test(client: GeminiClient, subject: str, count: int) -> List[MockQuestion]:
	prompt = build_mock_test_prompt(subject, count)
	raw = await client.generate(
		prompt,
		system_instruction=MOCK_TEST_SYSTEM_INSTRUCTION,
		temperature=settings.test_temperature,
		response_mime_type="application/json",
	)
	questions = parse_mock_questions(raw, expected_count=count)
	logger.info("Generated %d %s questions", len(questions), subject)
	return questions
