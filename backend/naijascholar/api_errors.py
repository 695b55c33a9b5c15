from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import ConfigurationError, GenerationError, ResponseShapeError

logger = logging.getLogger(__name__)

_CODES_BY_STATUS: Dict[int, str] = {
	400: "bad_request",
	404: "not_found",
	405: "method_not_allowed",
	500: "internal_error",
}


class ApiError(HTTPException):
	"""HTTPException that also carries a machine-readable error code."""

	def __init__(self, status_code: int, message: str, *, code: Optional[str] = None) -> None:
		super().__init__(status_code=status_code, detail=message)
		self.code = code or _CODES_BY_STATUS.get(status_code, "error")


def error_body(message: str, code: str) -> Dict[str, Any]:
	return {"message": message, "code": code}


def to_api_error(exc: Exception) -> ApiError:
	"""Map a failure raised while serving a request to its HTTP answer."""
	if isinstance(exc, ApiError):
		return exc
	if isinstance(exc, ConfigurationError):
		return ApiError(500, str(exc), code="configuration")
	if isinstance(exc, ResponseShapeError):
		return ApiError(500, str(exc), code="invalid_ai_response")
	if isinstance(exc, GenerationError):
		return ApiError(500, str(exc), code="generation_failed")
	if isinstance(exc, ValueError):
		return ApiError(400, str(exc))
	return ApiError(500, str(exc) or "An internal server error occurred.")


def _validation_message(exc: RequestValidationError) -> str:
	parts = []
	for err in exc.errors():
		loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
		msg = err.get("msg", "invalid value")
		parts.append(f"{loc}: {msg}" if loc else msg)
	return "Malformed request body. " + "; ".join(parts) if parts else "Malformed request body."


def install_error_handlers(app: FastAPI) -> None:
	@app.exception_handler(StarletteHTTPException)
	async def _http_error(request: Request, exc: StarletteHTTPException):
		code = getattr(exc, "code", None) or _CODES_BY_STATUS.get(exc.status_code, "error")
		return JSONResponse(
			status_code=exc.status_code,
			content=error_body(str(exc.detail), code),
			headers=getattr(exc, "headers", None),
		)

	@app.exception_handler(RequestValidationError)
	async def _validation_error(request: Request, exc: RequestValidationError):
		logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
		return JSONResponse(status_code=400, content=error_body(_validation_message(exc), "bad_request"))

	@app.exception_handler(ConfigurationError)
	@app.exception_handler(GenerationError)
	@app.exception_handler(ResponseShapeError)
	async def _domain_error(request: Request, exc: Exception):
		err = to_api_error(exc)
		if err.code == "configuration":
			logger.error("Refusing %s: %s", request.url.path, exc)
		else:
			logger.error("Request to %s failed: %s", request.url.path, exc)
		return JSONResponse(status_code=err.status_code, content=error_body(str(err.detail), err.code))
