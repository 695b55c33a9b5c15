from __future__ import annotations
from typing import Optional


class ConfigurationError(ValueError):
	"""The service credential is missing."""


class GenerationError(RuntimeError):
	"""The generation service failed or answered without usable text."""

	def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.status_code = status_code


class ResponseShapeError(ValueError):
	"""Model output could not be parsed, or parsed into the wrong shape."""
