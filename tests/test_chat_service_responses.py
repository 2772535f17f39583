from __future__ import annotations

import json

import httpx
import pytest

from zava.core.chat.schemas import PARSE_ERROR, UNPARSEABLE_RESPONSE_ERROR
from zava.core.chat.service import MAX_TOKENS, TEMPERATURE


def test_openai_style_reply_is_returned(make_service) -> None:
    service = make_service(
        lambda request: httpx.Response(200, json={"choices": [{"message": {"content": "Hello!"}}]})
    )

    result = service.send("hi")

    assert result.success is True
    assert result.message == "Hello!"
    assert result.error is None


def test_output_field_is_used_as_fallback(make_service) -> None:
    service = make_service(lambda request: httpx.Response(200, json={"output": "Hi there"}))

    result = service.send("hi")

    assert result.success is True
    assert result.message == "Hi there"


def test_choice_without_message_falls_back_to_output(make_service) -> None:
    service = make_service(lambda request: httpx.Response(200, json={"choices": [{"text": "x"}], "output": "fallback"}))

    assert service.send("hi").message == "fallback"


def test_null_content_becomes_empty_message(make_service) -> None:
    service = make_service(lambda request: httpx.Response(200, json={"choices": [{"message": {"content": None}}]}))

    result = service.send("hi")

    assert result.success is True
    assert result.message == ""


@pytest.mark.parametrize("body", [{}, {"choices": []}, {"id": "abc", "object": "chat.completion"}])
def test_unrecognized_shape_is_reported(make_service, body) -> None:
    service = make_service(lambda request: httpx.Response(200, json=body))

    result = service.send("hi")

    assert result.success is False
    assert result.error == UNPARSEABLE_RESPONSE_ERROR


def test_http_error_status_is_reported(make_service) -> None:
    service = make_service(lambda request: httpx.Response(500, text="upstream exploded"))

    result = service.send("hi")

    assert result.success is False
    assert result.error == "API call failed: 500"


def test_client_error_status_is_reported(make_service) -> None:
    service = make_service(lambda request: httpx.Response(401, json={"error": "bad key"}))

    assert service.send("hi").error == "API call failed: 401"


def test_invalid_json_is_a_parse_error(make_service) -> None:
    service = make_service(lambda request: httpx.Response(200, text="<html>not json</html>"))

    result = service.send("hi")

    assert result.success is False
    assert result.error == PARSE_ERROR


@pytest.mark.parametrize(
    "body",
    [
        ["not", "an", "object"],
        {"choices": {"message": {"content": "x"}}},
        {"choices": ["x"]},
        {"choices": [{"message": "x"}]},
        {"choices": [{"message": {"content": 42}}]},
        {"output": {"text": "x"}},
    ],
)
def test_wrongly_typed_fields_are_parse_errors(make_service, body) -> None:
    service = make_service(lambda request: httpx.Response(200, json=body))

    result = service.send("hi")

    assert result.success is False
    assert result.error == PARSE_ERROR


def test_request_body_and_content_type(make_service, requests_seen) -> None:
    service = make_service(lambda request: httpx.Response(200, json={"output": "ok"}))

    service.send("Was kostet der Stuhl? ☕")

    assert len(requests_seen) == 1
    request = requests_seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://zava.example/v1/chat/completions"
    assert request.headers["Content-Type"] == "application/json; charset=utf-8"
    assert json.loads(request.content.decode("utf-8")) == {
        "messages": [{"role": "user", "content": "Was kostet der Stuhl? ☕"}],
        "max_tokens": MAX_TOKENS,
        "temperature": TEMPERATURE,
    }


def test_model_name_is_not_sent(make_service, requests_seen) -> None:
    service = make_service(lambda request: httpx.Response(200, json={"output": "ok"}))

    service.send("hi")

    assert "model" not in json.loads(requests_seen[0].content)


def test_redirect_to_moved_endpoint_is_followed(make_service, requests_seen) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/chat/completions":
            return httpx.Response(307, headers={"Location": "https://zava.example/new"})
        return httpx.Response(200, json={"output": "moved"})

    result = make_service(handler).send("hi")

    assert result.success is True
    assert result.message == "moved"
    assert [request.url.path for request in requests_seen] == ["/v1/chat/completions", "/new"]
    assert requests_seen[1].method == "POST"
    assert json.loads(requests_seen[1].content)["messages"][0]["content"] == "hi"
