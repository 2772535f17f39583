from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from .deps import get_chat_service
from zava.core.chat.schemas import ChatResponse
from zava.core.chat.service import ChatService

router = APIRouter()


class ChatRequest(BaseModel):
    message: str = ""


@router.post("", response_model=ChatResponse)
def chat(request: ChatRequest, service: ChatService = Depends(get_chat_service)) -> ChatResponse:
    return service.send(request.message)
