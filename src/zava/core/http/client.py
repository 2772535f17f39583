from __future__ import annotations

import json
import os
import threading

import httpx

from .errors import ZavaHTTPNetworkError, ZavaHTTPStatusError, ZavaHTTPTimeoutError

_DEFAULT_TIMEOUT_S = 100.0
_DEFAULT_CONNECT_TIMEOUT_S = 10.0
_DEFAULT_USER_AGENT = "ZavaStorefront/1.0"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"

_client: httpx.Client | None = None
_client_lock = threading.Lock()


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _build_timeout(total_s: float | None = None) -> httpx.Timeout:
    connect_s = max(0.1, _get_float_env("ZAVA_HTTP_CONNECT_TIMEOUT_S", _DEFAULT_CONNECT_TIMEOUT_S))
    read_total = max(0.1, total_s if total_s is not None else _get_float_env("ZAVA_HTTP_TIMEOUT_S", _DEFAULT_TIMEOUT_S))
    return httpx.Timeout(read_total, connect=min(connect_s, read_total))


def build_http_client(transport: httpx.BaseTransport | None = None) -> httpx.Client:
    user_agent = os.getenv("ZAVA_HTTP_USER_AGENT", _DEFAULT_USER_AGENT)
    return httpx.Client(
        timeout=_build_timeout(),
        headers={"User-Agent": user_agent},
        follow_redirects=True,
        transport=transport,
    )


def get_http_client() -> httpx.Client:
    global _client
    if _client is not None:
        return _client

    with _client_lock:
        if _client is None:
            _client = build_http_client()
    return _client


def _safe_url(url: str, redact_url: bool) -> str:
    if redact_url:
        return "[redacted-url]"
    return url


def _read_body_text(response: httpx.Response) -> str:
    try:
        return response.text
    except (httpx.StreamError, UnicodeDecodeError):
        return ""


def encode_json_body(payload: object) -> bytes:
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def post_json(
    url: str,
    payload: object,
    *,
    headers: dict[str, str] | None = None,
    timeout_override: float | None = None,
    client: httpx.Client | None = None,
    redact_url: bool = False,
) -> httpx.Response:
    """Send a single JSON POST and return the 2xx response.

    Transport failures are raised as ``ZavaHTTPTimeoutError`` or
    ``ZavaHTTPNetworkError``; non-2xx statuses as ``ZavaHTTPStatusError``
    carrying the status code and the body text. Nothing is retried.
    """
    merged_headers = {"Content-Type": JSON_CONTENT_TYPE}
    merged_headers.update(headers or {})

    http_client = client or get_http_client()
    safe_url = _safe_url(url, redact_url)

    try:
        response = http_client.post(
            url,
            content=encode_json_body(payload),
            headers=merged_headers,
            timeout=_build_timeout(timeout_override) if timeout_override is not None else httpx.USE_CLIENT_DEFAULT,
        )
    except httpx.TimeoutException as exc:
        raise ZavaHTTPTimeoutError(f"HTTP request timed out for {safe_url}: {exc.__class__.__name__}") from exc
    except httpx.HTTPError as exc:
        raise ZavaHTTPNetworkError(f"HTTP request error for {safe_url}: {exc.__class__.__name__}") from exc

    status = response.status_code
    if 200 <= status < 300:
        return response
    raise ZavaHTTPStatusError(f"HTTP status {status} for {safe_url}", status_code=status, body=_read_body_text(response))
