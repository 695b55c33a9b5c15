import logging

from fastapi import FastAPI

from .api_errors import install_error_handlers
from .settings import settings
from .routers import health, chat, mock_test, proxy, content

logging.basicConfig(
	level=settings.log_level.upper(),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="NaijaScholar AI API")
install_error_handlers(app)
app.include_router(health.router)
app.include_router(chat.router)
app.include_router(mock_test.router)
app.include_router(proxy.router)
app.include_router(content.router)


@app.get("/info")
def root():
	return {"status": "ok", "gemini_configured": bool(settings.api_key)}
