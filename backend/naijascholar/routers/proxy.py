import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask
from pydantic import ValidationError

from ..api_errors import ApiError, to_api_error
from ..models import ExplanationRequest, GenerateTestRequest, ProxyAction, ProxyRequest, TutorStreamRequest
from ..services import ClientFactory, explain_question, generate_mock_test, get_client_factory, tutor_stream_frames

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["proxy"])


def _parse_action(name: str) -> ProxyAction:
	try:
		return ProxyAction(name)
	except ValueError:
		raise ApiError(400, f"Unknown action: {name}")


def _validate(model, payload):
	try:
		return model.model_validate(payload)
	except ValidationError as e:
		raise ApiError(400, f"Malformed payload for this action: {e.errors()[0].get('msg')}") from e


@router.post("/gemini-proxy")
async def gemini_proxy(req: ProxyRequest, open_client: ClientFactory = Depends(get_client_factory)):
	client = None
	streaming = False
	try:
		action = _parse_action(req.action)
		if action == ProxyAction.TUTOR_STREAM:
			payload = _validate(TutorStreamRequest, req.payload)
			client = open_client()
			streaming = True
			# The frame generator closes the client when it finishes; the background
			# task covers a response that ends before the generator ever runs
			return StreamingResponse(
				tutor_stream_frames(client, payload),
				media_type="text/event-stream",
				headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
				background=BackgroundTask(client.aclose),
			)
		if action == ProxyAction.EXPLANATION:
			payload = _validate(ExplanationRequest, req.payload)
			client = open_client()
			text = await explain_question(client, payload)
			return {"text": text}
		payload = _validate(GenerateTestRequest, req.payload)
		client = open_client()
		questions = await generate_mock_test(client, payload.subject, payload.number_of_questions)
		return [q.to_wire() for q in questions]
	except ApiError:
		raise
	except Exception as e:
		logger.exception("Error in gemini-proxy (action=%s)", req.action)
		raise to_api_error(e) from e
	finally:
		if client is not None and not streaming:
			await client.aclose()
