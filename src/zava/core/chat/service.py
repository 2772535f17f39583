from __future__ import annotations

import json
import logging
import time
from typing import Any

import httpx

from zava.core.config.settings import ChatSettings
from zava.core.http.client import post_json
from zava.core.http.errors import ZavaHTTPNetworkError, ZavaHTTPStatusError, ZavaHTTPTimeoutError
from zava.core.logging.redact import redact_string

from .schemas import (
    EMPTY_MESSAGE_ERROR,
    NETWORK_ERROR,
    NOT_CONFIGURED_ERROR,
    PARSE_ERROR,
    TIMEOUT_ERROR,
    UNKNOWN_ERROR,
    UNPARSEABLE_RESPONSE_ERROR,
    ChatErrorKind,
    ChatOutcome,
    ChatResponse,
)

MAX_TOKENS = 800
TEMPERATURE = 0.7

_FAILURE_LOG_MESSAGES = {
    ChatErrorKind.NETWORK: "Network error while calling chat endpoint",
    ChatErrorKind.TIMEOUT: "Request to chat endpoint timed out",
    ChatErrorKind.PARSE: "Error parsing response from chat endpoint",
    ChatErrorKind.UNKNOWN: "Unexpected error while calling chat endpoint",
}


class ResponseFormatError(ValueError):
    """Raised when a decoded response has fields of an unexpected type."""


def build_request_body(user_message: str) -> dict[str, Any]:
    return {
        "messages": [{"role": "user", "content": user_message}],
        "max_tokens": MAX_TOKENS,
        "temperature": TEMPERATURE,
    }


def _as_text(value: Any, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ResponseFormatError(f"{field} must be a string, got {type(value).__name__}")
    return value


def extract_reply(data: Any) -> str | None:
    """Pull the reply text out of a decoded response body.

    Tries the OpenAI-compatible ``choices[0].message.content`` first, then a
    top-level ``output`` field. Returns ``None`` when neither is present.
    """
    if not isinstance(data, dict):
        raise ResponseFormatError(f"response root must be an object, got {type(data).__name__}")

    if "choices" in data:
        choices = data["choices"]
        if not isinstance(choices, list):
            raise ResponseFormatError("choices must be an array")
        if choices:
            first = choices[0]
            if not isinstance(first, dict):
                raise ResponseFormatError("choices[0] must be an object")
            if "message" in first:
                message = first["message"]
                if not isinstance(message, dict):
                    raise ResponseFormatError("choices[0].message must be an object")
                if "content" in message:
                    return _as_text(message["content"], "choices[0].message.content")

    if "output" in data:
        return _as_text(data["output"], "output")

    return None


class ChatService:
    def __init__(
        self,
        settings: ChatSettings,
        client: httpx.Client | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings
        self.client = client
        self.logger = logger or logging.getLogger("zava.chat")

    def send(self, user_message: str) -> ChatResponse:
        rejected = self._validate(user_message)
        if rejected is not None:
            return rejected.response

        start = time.perf_counter()
        outcome = self._exchange(user_message)
        self._log_outcome(outcome, duration_ms=int((time.perf_counter() - start) * 1000))
        return outcome.response

    def _validate(self, user_message: str) -> ChatOutcome | None:
        if not user_message or not user_message.strip():
            return ChatOutcome.failure(ChatErrorKind.VALIDATION, EMPTY_MESSAGE_ERROR)

        if not self.settings.is_configured:
            self.logger.warning("Chat endpoint URL is not configured")
            return ChatOutcome.failure(ChatErrorKind.VALIDATION, NOT_CONFIGURED_ERROR)
        return None

    def _headers(self) -> dict[str, str]:
        if self.settings.has_api_key:
            return {"Authorization": f"Bearer {self.settings.api_key}"}
        return {}

    def _exchange(self, user_message: str) -> ChatOutcome:
        try:
            self.logger.info(
                "Sending message to chat endpoint",
                extra={"extra_fields": {"model": self.settings.model_name, "message_len": len(user_message)}},
            )
            response = post_json(
                self.settings.endpoint_url,
                build_request_body(user_message),
                headers=self._headers(),
                client=self.client,
                redact_url=True,
            )
            self.logger.info("Received response from chat endpoint")
        except ZavaHTTPStatusError as exc:
            return ChatOutcome.failure(ChatErrorKind.API, f"API call failed: {exc.status_code}", cause=exc)
        except ZavaHTTPTimeoutError as exc:
            return ChatOutcome.failure(ChatErrorKind.TIMEOUT, TIMEOUT_ERROR, cause=exc)
        except ZavaHTTPNetworkError as exc:
            return ChatOutcome.failure(ChatErrorKind.NETWORK, NETWORK_ERROR, cause=exc)
        except Exception as exc:
            return ChatOutcome.failure(ChatErrorKind.UNKNOWN, UNKNOWN_ERROR, cause=exc)

        return self._read_reply(response)

    def _read_reply(self, response: httpx.Response) -> ChatOutcome:
        try:
            reply = extract_reply(json.loads(response.text))
        except (json.JSONDecodeError, ResponseFormatError) as exc:
            return ChatOutcome.failure(ChatErrorKind.PARSE, PARSE_ERROR, cause=exc)
        except Exception as exc:
            return ChatOutcome.failure(ChatErrorKind.UNKNOWN, UNKNOWN_ERROR, cause=exc)

        if reply is None:
            return ChatOutcome.failure(ChatErrorKind.PARSE, UNPARSEABLE_RESPONSE_ERROR)
        return ChatOutcome.success(reply)

    def _log_outcome(self, outcome: ChatOutcome, duration_ms: int) -> None:
        fields: dict[str, object] = {
            "ok": outcome.ok,
            "duration_ms": duration_ms,
            "error_kind": outcome.kind.value if outcome.kind else None,
        }
        if outcome.ok:
            self.logger.info("chat_call", extra={"extra_fields": fields})
            return

        cause = outcome.cause
        if isinstance(cause, ZavaHTTPStatusError):
            self.logger.error(
                "API call failed with status %s: %s",
                cause.status_code,
                redact_string(cause.body),
                extra={"extra_fields": fields},
            )
        elif cause is None:
            self.logger.warning("Chat endpoint response had no recognizable reply", extra={"extra_fields": fields})
        else:
            self.logger.error(_FAILURE_LOG_MESSAGES[outcome.kind], exc_info=cause, extra={"extra_fields": fields})
