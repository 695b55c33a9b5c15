from __future__ import annotations
import json
import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence

import httpx
from pydantic import ValidationError

from .models import ChatMessage, ImageAttachment, MockQuestion, PastQuestion
from .parsing import INVALID_JSON_MESSAGE, INVALID_STRUCTURE_MESSAGE
from .settings import settings

logger = logging.getLogger(__name__)

TUTOR_APOLOGY = "Sorry, I encountered an error. Please check your connection or try again later."
EMPTY_RESPONSE_MESSAGE = "Received empty response from the server."


class ServiceError(Exception):
	def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.message = message
		self.status_code = status_code


class InvalidAIResponseError(ServiceError):
	"""The request went through but the AI's output was unusable."""


def error_from_response(r: httpx.Response) -> ServiceError:
	"""Build the error for a failed response, reading its body as text first.

	Upstream error bodies are not guaranteed to be JSON: a JSON object with a
	``message`` is used when present, otherwise the raw text is the message.
	"""
	body = r.text
	message = None
	code = None
	try:
		data = json.loads(body)
	except ValueError:
		data = None
	if isinstance(data, dict):
		message = data.get("message") or data.get("error") or data.get("detail")
		code = data.get("code")
	if not isinstance(message, str) or not message:
		message = body or f"Request failed with status {r.status_code}"
	if code == "invalid_ai_response":
		return InvalidAIResponseError(message, status_code=r.status_code)
	return ServiceError(message, status_code=r.status_code)


def _wire_history(history: Sequence[ChatMessage]) -> List[Dict[str, Any]]:
	return [m.to_wire() for m in history]


class ScholarClient:
	"""Calls the proxy endpoints on behalf of the study UI."""

	def __init__(self, base_url: Optional[str] = None, *, http: Optional[httpx.Client] = None) -> None:
		self._owns_http = http is None
		self._http = http or httpx.Client(base_url=base_url or settings.proxy_base_url, timeout=60)

	def close(self) -> None:
		if self._owns_http:
			self._http.close()

	def __enter__(self) -> "ScholarClient":
		return self

	def __exit__(self, *exc_info) -> None:
		self.close()

	def _post(self, path: str, body: Dict[str, Any]) -> str:
		try:
			r = self._http.post(path, json=body)
		except httpx.HTTPError as e:
			raise ServiceError(f"Could not reach the server: {e}") from e
		if r.is_error:
			raise error_from_response(r)
		return r.text

	def get_tutor_response(self, history: Sequence[ChatMessage], message: str, system_instruction: str) -> str:
		try:
			body = self._post(
				"/api/gemini-chat",
				{"history": _wire_history(history), "message": message, "systemInstruction": system_instruction},
			)
			return json.loads(body)["text"]
		except Exception as e:
			logger.error("Error getting tutor response: %s", e)
			return TUTOR_APOLOGY

	def stream_tutor_response(
		self,
		history: Sequence[ChatMessage],
		message: str,
		system_instruction: str,
		image: Optional[ImageAttachment] = None,
	) -> Iterator[str]:
		"""Yield reply fragments from the streaming proxy action.

		An ``{error}`` frame or a transport failure ends the stream with the
		apology text, so the chat always has something to display.
		"""
		payload: Dict[str, Any] = {
			"history": _wire_history(history),
			"userMessage": message,
			"systemPrompt": system_instruction,
		}
		if image is not None:
			payload["image"] = image.to_wire()
		received = False
		try:
			with self._http.stream(
				"POST",
				"/api/gemini-proxy",
				json={"action": "getTutorResponseStream", "payload": payload},
			) as r:
				if r.is_error:
					r.read()
					raise error_from_response(r)
				for line in r.iter_lines():
					if not line.startswith("data:"):
						continue
					frame = json.loads(line[len("data:"):].strip())
					if not isinstance(frame, dict):
						raise ValueError(f"Unexpected stream frame: {line[:200]}")
					if "error" in frame:
						raise ServiceError(str(frame["error"]))
					text = frame.get("text")
					if text:
						received = True
						yield text
			if not received:
				raise ServiceError("The tutor stream ended without any text.")
		except (httpx.HTTPError, ServiceError, ValueError) as e:
			logger.error("Error streaming tutor response: %s", e)
			yield TUTOR_APOLOGY

	def generate_mock_test(self, subject: str, number_of_questions: int) -> List[MockQuestion]:
		body = self._post("/api/generate-test", {"subject": subject, "numberOfQuestions": number_of_questions})
		if not body:
			raise ServiceError(EMPTY_RESPONSE_MESSAGE)
		try:
			data = json.loads(body)
		except ValueError as e:
			raise InvalidAIResponseError(INVALID_JSON_MESSAGE) from e
		if not (isinstance(data, list) and data and isinstance(data[0], dict)
				and data[0].get("question") and data[0].get("options")):
			raise InvalidAIResponseError(INVALID_STRUCTURE_MESSAGE)
		try:
			return [MockQuestion.model_validate(item) for item in data]
		except ValidationError as e:
			raise InvalidAIResponseError(INVALID_STRUCTURE_MESSAGE) from e

	def get_explanation(
		self,
		question: str,
		options: Sequence[str],
		correct_answer: str,
		selected_answer: Optional[str] = None,
	) -> str:
		payload = {
			"question": question,
			"options": list(options),
			"correctAnswer": correct_answer,
			"selectedAnswer": selected_answer,
		}
		body = self._post("/api/gemini-proxy", {"action": "getExplanationForQuestion", "payload": payload})
		try:
			return json.loads(body)["text"]
		except (ValueError, KeyError, TypeError) as e:
			raise ServiceError("Received an unreadable explanation from the server.") from e

	def subjects(self) -> List[str]:
		body = self._get("/api/subjects")
		try:
			data = json.loads(body)
		except ValueError as e:
			raise ServiceError("Received an unreadable subject list from the server.") from e
		if not isinstance(data, list) or not all(isinstance(s, str) for s in data):
			raise ServiceError("Received an unreadable subject list from the server.")
		return data

	def past_questions(self, subject: Optional[str] = None) -> List[PastQuestion]:
		params = {"subject": subject} if subject else None
		body = self._get("/api/past-questions", params)
		try:
			return [PastQuestion.model_validate(item) for item in json.loads(body)]
		except (ValueError, TypeError) as e:
			# pydantic's ValidationError is a ValueError
			raise ServiceError("Received unreadable past questions from the server.") from e

	def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
		try:
			r = self._http.get(path, params=params)
		except httpx.HTTPError as e:
			raise ServiceError(f"Could not reach the server: {e}") from e
		if r.is_error:
			raise error_from_response(r)
		return r.text
