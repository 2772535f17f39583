from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict


class ChatErrorKind(str, Enum):
    VALIDATION = "validation"
    API = "api"
    NETWORK = "network"
    TIMEOUT = "timeout"
    PARSE = "parse"
    UNKNOWN = "unknown"


EMPTY_MESSAGE_ERROR = "Message cannot be empty."
NOT_CONFIGURED_ERROR = "Chat service is not configured. Please set the endpoint URL in appsettings.json."
UNPARSEABLE_RESPONSE_ERROR = "Unable to parse response from AI endpoint."
NETWORK_ERROR = "Network error: Unable to connect to the AI service."
TIMEOUT_ERROR = "Request timed out. Please try again."
PARSE_ERROR = "Error parsing response from AI service."
UNKNOWN_ERROR = "An unexpected error occurred. Please try again."


class ChatResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    message: str = ""
    error: str | None = None

    @classmethod
    def ok(cls, message: str) -> ChatResponse:
        return cls(success=True, message=message)

    @classmethod
    def failed(cls, error: str) -> ChatResponse:
        return cls(success=False, error=error)


@dataclass(frozen=True)
class ChatOutcome:
    """Result of one dispatch, tagged with the failure kind and its cause.

    ``cause`` is kept for logging and never reaches the caller.
    """

    response: ChatResponse
    kind: ChatErrorKind | None = None
    cause: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.kind is None

    @classmethod
    def success(cls, message: str) -> ChatOutcome:
        return cls(response=ChatResponse.ok(message))

    @classmethod
    def failure(cls, kind: ChatErrorKind, error: str, cause: BaseException | None = None) -> ChatOutcome:
        return cls(response=ChatResponse.failed(error), kind=kind, cause=cause)
