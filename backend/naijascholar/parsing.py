from __future__ import annotations
import json
import re
from typing import Any, List, Optional

from pydantic import ValidationError

from .errors import ResponseShapeError
from .models import MockQuestion


INVALID_JSON_MESSAGE = "The AI returned an invalid response. Please try again. The response was not valid JSON."
INVALID_STRUCTURE_MESSAGE = "Invalid test structure received from AI."

# One enclosing fence: ``` + optional language tag, body, closing ```
_FENCE = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)


def strip_code_fence(raw: str) -> str:
	text = (raw or "").strip()
	match = _FENCE.match(text)
	if match and match.group(2):
		return match.group(2).strip()
	return text


def parse_fenced_json(raw: str) -> Any:
	text = strip_code_fence(raw)
	try:
		return json.loads(text)
	except ValueError as err:
		raise ResponseShapeError(INVALID_JSON_MESSAGE) from err


def parse_mock_questions(raw: str, expected_count: Optional[int] = None) -> List[MockQuestion]:
	"""Parse a mock-test reply into validated questions.

	Either every element is a well-formed MockQuestion or ResponseShapeError is
	raised; a partial list is never returned. With ``expected_count`` a shorter
	reply is rejected and a longer one is cut down to that many questions.
	"""
	data = parse_fenced_json(raw)
	if not isinstance(data, list) or not data:
		raise ResponseShapeError(INVALID_STRUCTURE_MESSAGE)
	first = data[0]
	if not isinstance(first, dict) or not first.get("question") or not first.get("options"):
		raise ResponseShapeError(INVALID_STRUCTURE_MESSAGE)
	if expected_count is not None:
		if len(data) < expected_count:
			raise ResponseShapeError(
				f"{INVALID_STRUCTURE_MESSAGE} Expected {expected_count} questions, got {len(data)}."
			)
		data = data[:expected_count]
	questions: List[MockQuestion] = []
	for i, item in enumerate(data):
		try:
			questions.append(MockQuestion.model_validate(item))
		except ValidationError as err:
			raise ResponseShapeError(f"{INVALID_STRUCTURE_MESSAGE} Question {i + 1}: {_first_error(err)}") from err
	return questions


def _first_error(err: ValidationError) -> str:
	errors = err.errors()
	if not errors:
		return str(err)
	first = errors[0]
	loc = ".".join(str(p) for p in first.get("loc", ()))
	return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
