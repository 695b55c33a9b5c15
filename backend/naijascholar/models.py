from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
	# Python attributes are snake_case; the JSON the UI exchanges is camelCase
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

	def to_wire(self) -> Dict[str, Any]:
		return self.model_dump(by_alias=True, mode="json")


class Sender(str, Enum):
	USER = "user"
	AI = "ai"


class TutorPersonality(str, Enum):
	FRIENDLY = "Friendly"
	STRICT = "Strict"
	MOTIVATIONAL = "Motivational"


class ProxyAction(str, Enum):
	TUTOR_STREAM = "getTutorResponseStream"
	EXPLANATION = "getExplanationForQuestion"
	MOCK_TEST = "generateMockTestQuestions"


class AppView(str, Enum):
	DASHBOARD = "DASHBOARD"
	TUTOR = "TUTOR"
	MOCK_TEST = "MOCK_TEST"
	PAST_QUESTIONS = "PAST_QUESTIONS"


def _check_distinct(options: List[str]) -> None:
	if len(set(options)) != len(options):
		raise ValueError("options must not contain duplicates")


class ChatMessage(WireModel):
	sender: Sender
	text: str


class MockQuestion(WireModel):
	model_config = ConfigDict(frozen=True)

	question: str = Field(min_length=1)
	options: List[str] = Field(min_length=4, max_length=4)
	correct_answer: str

	@model_validator(mode="after")
	def _answer_is_an_option(self) -> "MockQuestion":
		_check_distinct(self.options)
		if self.correct_answer not in self.options:
			raise ValueError("correctAnswer must equal one of the options")
		return self


class PastQuestion(WireModel):
	model_config = ConfigDict(frozen=True)

	id: int
	subject: str
	year: int
	question: str
	options: List[str]
	answer: str

	@model_validator(mode="after")
	def _answer_is_an_option(self) -> "PastQuestion":
		_check_distinct(self.options)
		if self.answer not in self.options:
			raise ValueError("answer must equal one of the options")
		return self


class MockTestResult(WireModel):
	subject: str
	score: int = Field(ge=0)
	total_questions: int = Field(gt=0)
	date: str

	@model_validator(mode="after")
	def _score_within_total(self) -> "MockTestResult":
		if self.score > self.total_questions:
			raise ValueError("score cannot exceed totalQuestions")
		return self


class ImageAttachment(WireModel):
	base64_data: str
	mime_type: str


# ---- Request bodies ----

class ChatRequest(WireModel):
	history: List[ChatMessage] = Field(default_factory=list)
	message: str
	system_instruction: Optional[str] = None
	personality: Optional[TutorPersonality] = None


class TutorStreamRequest(WireModel):
	history: List[ChatMessage] = Field(default_factory=list)
	user_message: Optional[str] = None
	system_prompt: Optional[str] = None
	personality: Optional[TutorPersonality] = None
	image: Optional[ImageAttachment] = None

	@model_validator(mode="after")
	def _has_content(self) -> "TutorStreamRequest":
		if not (self.user_message or "").strip() and self.image is None:
			raise ValueError("userMessage or image is required")
		return self


class GenerateTestRequest(WireModel):
	subject: str = Field(min_length=1)
	number_of_questions: int = Field(ge=1)


class ExplanationRequest(WireModel):
	question: str = Field(min_length=1)
	options: List[str] = Field(min_length=2)
	correct_answer: str
	selected_answer: Optional[str] = None

	@model_validator(mode="after")
	def _answers_are_options(self) -> "ExplanationRequest":
		if self.correct_answer not in self.options:
			raise ValueError("correctAnswer must equal one of the options")
		if self.selected_answer is not None and self.selected_answer not in self.options:
			raise ValueError("selectedAnswer must equal one of the options")
		return self


class ProxyRequest(BaseModel):
	action: str
	payload: Dict[str, Any] = Field(default_factory=dict)
