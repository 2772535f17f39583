from __future__ import annotations

import os
from uuid import uuid4

from fastapi import Depends, FastAPI
import uvicorn

from zava.core.config.settings import ChatSettings
from zava.core.logging import configure_logging
from zava.core.logging.context import log_context

from .deps import get_chat_settings
from .routes_chat import router as chat_router

app = FastAPI(title="Zava Storefront Chat API")
configure_logging()

app.include_router(chat_router, prefix="/chat", tags=["chat"])


@app.middleware("http")
async def request_context_middleware(request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid4())
    with log_context(correlation_id=correlation_id, request_id=str(uuid4())):
        response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


@app.get("/healthz")
def healthz(settings: ChatSettings = Depends(get_chat_settings)) -> dict[str, object]:
    return {
        "ok": True,
        "chat": {
            "configured": settings.is_configured,
            "model_name": settings.model_name,
            "api_key_set": settings.has_api_key,
        },
    }


def run() -> None:
    uvicorn.run(
        "zava.apps.api.main:app",
        reload=os.getenv("ZAVA_API_RELOAD", "off").casefold() == "on",
        host=os.getenv("ZAVA_API_HOST", "127.0.0.1"),
        port=int(os.getenv("ZAVA_API_PORT", "8000")),
    )


if __name__ == "__main__":
    run()
