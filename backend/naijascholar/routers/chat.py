import logging

from fastapi import APIRouter, Depends

from ..api_errors import to_api_error
from ..models import ChatRequest
from ..services import ClientFactory, get_client_factory, tutor_reply

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tutor"])


@router.post("/gemini-chat")
async def gemini_chat(req: ChatRequest, open_client: ClientFactory = Depends(get_client_factory)):
	client = open_client()
	try:
		text = await tutor_reply(client, req)
		return {"text": text}
	except Exception as e:
		logger.exception("Error in gemini-chat")
		raise to_api_error(e) from e
	finally:
		await client.aclose()
