import json


class FakeGemini:
	"""Stands in for GeminiClient inside the routes."""

	def __init__(self) -> None:
		self.reply = ""
		self.fragments = []
		self.error = None
		self.stream_error = None
		self.calls = []
		self.closed = False
		self.opened = 0

	def open(self):
		self.opened += 1
		return self

	async def generate(self, prompt, **kwargs):
		self.calls.append((prompt, kwargs))
		if self.error is not None:
			raise self.error
		return self.reply

	async def stream(self, parts, **kwargs):
		self.calls.append((parts, kwargs))
		for fragment in self.fragments:
			yield fragment
		if self.stream_error is not None:
			raise self.stream_error

	async def aclose(self):
		self.closed = True


def make_questions(n, subject="Mathematics"):
	return [
		{
			"question": f"{subject} question {i + 1}?",
			"options": [f"{i}-a", f"{i}-b", f"{i}-c", f"{i}-d"],
			"correctAnswer": f"{i}-c",
		}
		for i in range(n)
	]


def sse_payloads(body):
	return [json.loads(line[len("data:"):]) for line in body.splitlines() if line.startswith("data:")]


