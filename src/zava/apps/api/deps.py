from __future__ import annotations

from functools import lru_cache

from zava.core.chat.service import ChatService
from zava.core.config.settings import ChatSettings, load_chat_settings


@lru_cache(maxsize=1)
def get_chat_settings() -> ChatSettings:
    return load_chat_settings()


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    return ChatService(settings=get_chat_settings())
