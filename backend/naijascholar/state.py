from __future__ import annotations
from datetime import date
from typing import Dict, List, Optional, Sequence

from .client import ScholarClient, ServiceError
from .content import SUBJECTS, past_questions_for
from .models import AppView, ChatMessage, MockQuestion, MockTestResult, PastQuestion, Sender, TutorPersonality
from .prompts import TUTOR_GREETINGS, system_instruction_for


SECONDS_PER_QUESTION = 60


def score_answers(questions: Sequence[MockQuestion], answers: Sequence[Optional[str]]) -> int:
	"""Count answers that exactly match their question's correctAnswer."""
	return sum(1 for q, a in zip(questions, answers) if a is not None and a == q.correct_answer)


def make_result(subject: str, score: int, total_questions: int, *, today: Optional[date] = None) -> MockTestResult:
	stamp = (today or date.today()).strftime("%d/%m/%Y")
	return MockTestResult(subject=subject, score=score, total_questions=total_questions, date=stamp)


class AppState:
	"""Top-level UI state: the visible view plus results from this session."""

	def __init__(self) -> None:
		self.current_view = AppView.DASHBOARD
		self.results: List[MockTestResult] = []

	def navigate(self, view: AppView) -> None:
		self.current_view = view

	def add_result(self, result: MockTestResult) -> None:
		self.results.append(result)
		self.current_view = AppView.DASHBOARD

	def average_percentage(self) -> float:
		if not self.results:
			return 0.0
		return sum(r.score / r.total_questions * 100 for r in self.results) / len(self.results)

	def chart_rows(self) -> List[Dict[str, object]]:
		return [
			{"name": r.subject, "score": r.score / r.total_questions * 100, "date": r.date}
			for r in self.results
		]


class TutorSession:
	def __init__(self, client: ScholarClient, personality: TutorPersonality = TutorPersonality.FRIENDLY) -> None:
		self.client = client
		self.personality = personality
		self.messages: List[ChatMessage] = []
		self.is_loading = False
		self.reset()

	def reset(self) -> None:
		self.messages = [ChatMessage(sender=Sender.AI, text=TUTOR_GREETINGS[self.personality])]

	def set_personality(self, personality: TutorPersonality) -> None:
		self.personality = personality
		self.reset()

	def send(self, text: str) -> Optional[ChatMessage]:
		if not text.strip() or self.is_loading:
			return None
		self.messages.append(ChatMessage(sender=Sender.USER, text=text))
		self.is_loading = True
		try:
			reply = self.client.get_tutor_response(self.messages, text, system_instruction_for(self.personality))
		finally:
			self.is_loading = False
		message = ChatMessage(sender=Sender.AI, text=reply)
		self.messages.append(message)
		return message


class MockTestSession:
	# Phases: setup -> generating -> taking -> result
	def __init__(self, client: ScholarClient, subject: str = SUBJECTS[0], number_of_questions: int = 5) -> None:
		self.client = client
		self.subject = subject
		self.number_of_questions = number_of_questions
		self.phase = "setup"
		self.questions: List[MockQuestion] = []
		self.answers: List[Optional[str]] = []
		self.current_index = 0
		self.time_left = 0
		self.error: Optional[str] = None

	def start(self) -> bool:
		self.phase = "generating"
		self.error = None
		try:
			questions = self.client.generate_mock_test(self.subject, self.number_of_questions)
		except ServiceError as e:
			self.error = e.message
			self.phase = "setup"
			return False
		self.questions = questions
		self.answers = [None] * len(questions)
		self.current_index = 0
		self.time_left = len(questions) * SECONDS_PER_QUESTION
		self.phase = "taking"
		return True

	@property
	def current_question(self) -> Optional[MockQuestion]:
		if self.phase != "taking" or not self.questions:
			return None
		return self.questions[self.current_index]

	def select_answer(self, answer: str) -> None:
		if self.phase != "taking":
			return
		self.answers[self.current_index] = answer

	def next(self) -> None:
		if self.current_index < len(self.questions) - 1:
			self.current_index += 1

	def back(self) -> None:
		if self.current_index > 0:
			self.current_index -= 1

	def tick(self, seconds: int = 1) -> None:
		if self.phase != "taking":
			return
		self.time_left = max(0, self.time_left - seconds)
		if self.time_left == 0:
			self.phase = "result"

	def score(self) -> int:
		return score_answers(self.questions, self.answers)

	def submit(self, *, today: Optional[date] = None) -> MockTestResult:
		"""Score the test once and reset for the next one."""
		if self.phase not in ("taking", "result") or not self.questions:
			raise RuntimeError("no test in progress")
		result = make_result(self.subject, self.score(), len(self.questions), today=today)
		self.questions = []
		self.answers = []
		self.current_index = 0
		self.time_left = 0
		self.phase = "setup"
		return result


class PastQuestionQuiz:
	def __init__(self, subject: str = SUBJECTS[0]) -> None:
		self.subject = subject
		self.phase = "setup"
		self.questions: List[PastQuestion] = []
		self.answers: Dict[int, str] = {}
		self.current_index = 0

	def start(self) -> None:
		questions = past_questions_for(self.subject)
		if not questions:
			raise LookupError(f"No past questions available for {self.subject} at the moment.")
		self.questions = questions
		self.answers = {}
		self.current_index = 0
		self.phase = "taking"

	def select_answer(self, question_id: int, answer: str) -> None:
		self.answers[question_id] = answer

	def next(self) -> None:
		if self.current_index < len(self.questions) - 1:
			self.current_index += 1

	def back(self) -> None:
		if self.current_index > 0:
			self.current_index -= 1

	def score(self) -> int:
		return sum(1 for q in self.questions if self.answers.get(q.id) == q.answer)

	def submit(self, *, today: Optional[date] = None) -> MockTestResult:
		if self.phase != "taking" or not self.questions:
			raise RuntimeError("no quiz in progress")
		result = make_result(f"Past Qs: {self.subject}", self.score(), len(self.questions), today=today)
		self.questions = []
		self.answers = {}
		self.current_index = 0
		self.phase = "setup"
		return result
