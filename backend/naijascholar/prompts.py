from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .models import ChatMessage, ImageAttachment, Sender, TutorPersonality
from .settings import settings


TUTOR_PERSONALITY_PROMPTS: Dict[TutorPersonality, str] = {
	TutorPersonality.FRIENDLY: (
		"You are NaijaScholar AI, a friendly and encouraging tutor for Nigerian secondary school students.\n"
		"Your tone is warm, patient, and you use simple language.\n"
		"You often use positive reinforcement like \"Great question!\", \"You're doing great!\", \"Keep it up!\".\n"
		"When explaining concepts, use relatable Nigerian examples (e.g., using Naira for money problems, referencing cities like Lagos or Abuja, using common Nigerian names).\n"
		"You are preparing students for WAEC, NECO, and JAMB exams. All your explanations must be accurate and aligned with the Nigerian curriculum.\n"
		"You can also explain concepts in Nigerian Pidgin if asked."
	),
	TutorPersonality.STRICT: (
		"You are NaijaScholar AI, a strict and disciplined tutor for Nigerian secondary school students.\n"
		"Your tone is formal, direct, and focused on accuracy and results. You get straight to the point.\n"
		"You correct mistakes firmly but fairly. Your goal is to build discipline and precision.\n"
		"You demand focus and hard work. Use phrases like \"Focus.\", \"That is incorrect. The correct answer is...\", \"Pay close attention.\".\n"
		"All explanations must be precise, concise, and directly aligned with the WAEC, NECO, and JAMB syllabi. Avoid fluff.\n"
		"When explaining, use formal Nigerian examples."
	),
	TutorPersonality.MOTIVATIONAL: (
		"You are NaijaScholar AI, a motivational coach and tutor for Nigerian secondary school students.\n"
		"Your tone is inspiring, uplifting, and full of energy. You are their biggest cheerleader.\n"
		"You aim to build confidence and resilience. Use phrases like \"You have the potential to succeed!\", \"Don't give up, every great journey starts with a single step!\", \"I believe in you!\".\n"
		"You frame challenges as opportunities for growth. Remind students of their goals and why they are working so hard.\n"
		"Connect concepts to future aspirations (e.g., \"Understanding this biology concept is key to becoming a doctor!\").\n"
		"Ensure all information is accurate and relevant for WAEC, NECO, and JAMB exams."
	),
}

TUTOR_GREETINGS: Dict[TutorPersonality, str] = {
	TutorPersonality.FRIENDLY: (
		"Hi there! I'm your friendly AI tutor. What topic can I help you with today? "
		"E.g., 'Explain photosynthesis' or 'Help me with simultaneous equations'."
	),
	TutorPersonality.STRICT: "I am your AI tutor. State the subject and topic you wish to study. Let's begin.",
	TutorPersonality.MOTIVATIONAL: "Welcome! You're on the path to success. What challenge can we conquer together today?",
}

EXPLANATION_SYSTEM_INSTRUCTION = (
	"You are an expert tutor specializing in Nigerian WASSCE/NECO exam questions. "
	"Provide clear, step-by-step explanations."
)

MOCK_TEST_SYSTEM_INSTRUCTION = (
	"You are an AI that generates high-quality exam questions for Nigerian students "
	"based on the WAEC/NECO/JAMB syllabus. Output ONLY the JSON array."
)


@dataclass(frozen=True)
class TutorPrompt:
	system_instruction: str
	history: List[Dict[str, Any]] = field(default_factory=list)
	parts: List[Dict[str, Any]] = field(default_factory=list)


def system_instruction_for(personality: TutorPersonality) -> str:
	return TUTOR_PERSONALITY_PROMPTS[personality]


def history_to_contents(history: Sequence[ChatMessage], message: Optional[str] = None) -> List[Dict[str, Any]]:
	"""Map a transcript to the service's ``contents`` turns.

	The UI appends the pending user message to the transcript before sending it
	separately, so a trailing copy of ``message`` is dropped here.
	"""
	items = list(history)
	if message is not None and items and items[-1].sender == Sender.USER and items[-1].text == message:
		items = items[:-1]
	return [
		{"role": "user" if m.sender == Sender.USER else "model", "parts": [{"text": m.text}]}
		for m in items
	]


def build_tutor_prompt(
	personality: Optional[TutorPersonality],
	history: Sequence[ChatMessage],
	message: Optional[str],
	*,
	system_instruction: Optional[str] = None,
	image: Optional[ImageAttachment] = None,
) -> TutorPrompt:
	# An explicit instruction from the caller wins over the personality template
	instruction = system_instruction or system_instruction_for(personality or TutorPersonality.FRIENDLY)
	parts: List[Dict[str, Any]] = []
	if image is not None:
		parts.append({"inlineData": {"data": image.base64_data, "mimeType": image.mime_type}})
	if message:
		parts.append({"text": message})
	return TutorPrompt(
		system_instruction=instruction,
		history=history_to_contents(history, message),
		parts=parts,
	)


def build_mock_test_prompt(subject: str, count: int) -> str:
	subject = (subject or "").strip()
	if not subject:
		raise ValueError("subject is required")
	if isinstance(count, bool) or not isinstance(count, int) or count < 1 or count > settings.max_questions:
		raise ValueError(f"numberOfQuestions must be between 1 and {settings.max_questions}")
	return (
		f"Generate exactly {count} multiple-choice questions for a mock test for a Nigerian student preparing for the JAMB/WAEC exam in {subject}.\n"
		f"The questions should cover various topics within the Nigerian secondary school syllabus for {subject}.\n"
		"Each question must be multiple-choice with exactly 4 distinct options and one clear correct answer.\n"
		"Use Nigerian context and examples where appropriate (e.g., using Naira, local names, places).\n"
		f"Return the result as a JSON array of exactly {count} objects. Each object must have the following structure:\n"
		'{ "question": "The question text", "options": ["Option A", "Option B", "Option C", "Option D"], "correctAnswer": "The full text of the correct option" }\n'
		"Do not include any other text or markdown code fences like ```json in your response. Just the raw JSON array."
	)


def build_explanation_prompt(
	question: str,
	options: Sequence[str],
	correct_answer: str,
	selected_answer: Optional[str] = None,
) -> str:
	lettered = "\n".join(f"{chr(97 + idx)}. {opt}" for idx, opt in enumerate(options))
	prompt = (
		"Explain the answer to the following WASSCE/NECO style question:\n"
		f'Question: "{question}"\n'
		f"Options:\n{lettered}\n"
		f"The correct option is: {correct_answer}."
	)
	if selected_answer is None:
		prompt += (
			" Provide a detailed step-by-step explanation for solving this problem"
			" and why the correct option is the right answer."
		)
	elif selected_answer == correct_answer:
		prompt += f'\nThe student selected: "{selected_answer}". Reinforce why this student\'s answer is correct.'
	else:
		prompt += (
			f'\nThe student selected: "{selected_answer}". Explain why this student\'s answer is incorrect'
			f' and why the correct answer, "{correct_answer}", is right.'
		)
	prompt += (
		"\nKeep the explanation clear, concise, and suitable for a Nigerian secondary school student. "
		"Use Naira or local Nigerian references if relevant to the question context, but only if it makes "
		"sense for the specific question (e.g. math word problems, economics)."
	)
	return prompt
