from __future__ import annotations
import json
import logging
import httpx
from typing import Any, AsyncIterator, Dict, List, Optional
from .errors import ConfigurationError, GenerationError
from .settings import settings

logger = logging.getLogger(__name__)


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.api_key
		if not self.api_key:
			raise ConfigurationError("API key is not configured.")
		self.model = model or settings.gemini_model
		root = (base_url or settings.gemini_base_url).rstrip("/")
		self.generate_url = f"{root}/models/{self.model}:generateContent"
		self.stream_url = f"{root}/models/{self.model}:streamGenerateContent"
		self._client = httpx.AsyncClient(timeout=settings.gemini_timeout_seconds, transport=transport)

	async def generate(
		self,
		prompt: str,
		*,
		system_instruction: Optional[str] = None,
		history: Optional[List[Dict[str, Any]]] = None,
		temperature: Optional[float] = None,
		top_p: Optional[float] = None,
		response_mime_type: Optional[str] = None,
	) -> str:
		payload = _build_payload(
			[{"text": prompt}],
			system_instruction=system_instruction,
			history=history,
			temperature=temperature,
			top_p=top_p,
			response_mime_type=response_mime_type,
		)
		try:
			r = await self._client.post(self.generate_url, headers=self._headers(), json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			raise GenerationError(
				_upstream_message(http_err.response),
				status_code=http_err.response.status_code,
			) from http_err
		except httpx.RequestError as net_err:
			raise GenerationError(f"Could not reach the generation service: {net_err}") from net_err
		try:
			data = r.json()
		except ValueError as err:
			raise GenerationError(f"Unexpected Gemini response: {r.text[:300]}") from err
		text = _candidate_text(data)
		if not text:
			raise GenerationError(f"Unexpected Gemini response: {r.text[:300]}")
		return text

	async def stream(
		self,
		parts: List[Dict[str, Any]],
		*,
		system_instruction: Optional[str] = None,
		history: Optional[List[Dict[str, Any]]] = None,
		temperature: Optional[float] = None,
		top_p: Optional[float] = None,
	) -> AsyncIterator[str]:
		"""Yield text fragments as the service produces them.

		The streaming endpoint answers Server-Sent Events when called with
		``alt=sse``; each ``data:`` line holds one partial GenerateContentResponse.
		"""
		payload = _build_payload(
			parts,
			system_instruction=system_instruction,
			history=history,
			temperature=temperature,
			top_p=top_p,
		)
		try:
			async with self._client.stream(
				"POST",
				self.stream_url,
				params={"alt": "sse"},
				headers=self._headers(),
				json=payload,
			) as r:
				if r.is_error:
					await r.aread()
					raise GenerationError(_upstream_message(r), status_code=r.status_code)
				async for line in r.aiter_lines():
					if not line.startswith("data:"):
						continue
					body = line[len("data:"):].strip()
					if not body:
						continue
					try:
						chunk = json.loads(body)
					except ValueError as err:
						raise GenerationError(f"Malformed stream chunk from Gemini: {body[:200]}") from err
					text = _candidate_text(chunk)
					if text:
						yield text
		except httpx.RequestError as net_err:
			raise GenerationError(f"Could not reach the generation service: {net_err}") from net_err

	async def aclose(self) -> None:
		await self._client.aclose()

	def _headers(self) -> Dict[str, str]:
		return {"x-goog-api-key": self.api_key}


def _build_payload(
	parts: List[Dict[str, Any]],
	*,
	system_instruction: Optional[str] = None,
	history: Optional[List[Dict[str, Any]]] = None,
	temperature: Optional[float] = None,
	top_p: Optional[float] = None,
	response_mime_type: Optional[str] = None,
) -> Dict[str, Any]:
	contents = list(history or [])
	contents.append({"role": "user", "parts": parts})
	payload: Dict[str, Any] = {"contents": contents}
	if system_instruction:
		payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
	config: Dict[str, Any] = {}
	if temperature is not None:
		config["temperature"] = temperature
	if top_p is not None:
		config["topP"] = top_p
	if response_mime_type:
		config["responseMimeType"] = response_mime_type
	if config:
		payload["generationConfig"] = config
	return payload


def _candidate_text(data: Any) -> str:
	try:
		parts = data["candidates"][0]["content"]["parts"]
	except (KeyError, IndexError, TypeError):
		return ""
	return "".join(p.get("text", "") for p in parts if isinstance(p, dict))


def _upstream_message(r: httpx.Response) -> str:
	# Google APIs wrap failures as {"error": {"code", "message", "status"}}
	try:
		err = r.json().get("error") or {}
		message = err.get("message")
	except (ValueError, AttributeError):
		message = None
	return f"Gemini request failed ({r.status_code}): {message or r.text[:300] or r.reason_phrase}"
