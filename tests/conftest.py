from __future__ import annotations

from typing import Callable

import httpx
import pytest

from zava.core.chat.service import ChatService
from zava.core.config.settings import ChatSettings
from zava.core.http.client import build_http_client

ENDPOINT = "https://zava.example/v1/chat/completions"


@pytest.fixture(autouse=True)
def clear_zava_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ZAVA_APPSETTINGS_PATH",
        "ZAVA_CHAT_ENDPOINT_URL",
        "ZAVA_CHAT_API_KEY",
        "ZAVA_CHAT_MODEL_NAME",
        "ZAVA_HTTP_TIMEOUT_S",
        "ZAVA_HTTP_CONNECT_TIMEOUT_S",
        "ZAVA_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_service(requests_seen: list[httpx.Request]) -> Callable[..., ChatService]:
    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        endpoint_url: str = ENDPOINT,
        api_key: str = "",
    ) -> ChatService:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return handler(request)

        client = build_http_client(transport=httpx.MockTransport(recording_handler))
        settings = ChatSettings(endpoint_url=endpoint_url, api_key=api_key)
        return ChatService(settings=settings, client=client)

    return factory
