"""OpenAI chat completion client for the tutor chat."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from ..config import OPENAI_API_URL, OPENAI_TIMEOUT_SECONDS
from ..utils.redact import redact_secrets
from .schemas import CompletionRequest

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    ok: bool
    model: str
    call_id: uuid.UUID
    content: Optional[str]
    usage: Optional[dict[str, Any]]
    raw_response: Optional[dict[str, Any]]
    latency_ms: Optional[int]
    status_code: Optional[int]
    error_text: Optional[str]


_CLIENT: httpx.AsyncClient | None = None


def set_client(client: httpx.AsyncClient | None) -> None:
    global _CLIENT
    _CLIENT = client


def _get_client(timeout_seconds: float) -> httpx.AsyncClient:
    global _CLIENT
    if _CLIENT is not None:
        return _CLIENT
    logger.warning("Completion httpx client not set via lifespan; creating a fallback client.")
    _CLIENT = httpx.AsyncClient(timeout=timeout_seconds)
    return _CLIENT


def _extract_content(data: Any) -> Optional[str]:
    """Return choices[0].message.content when the response has that shape."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


def _failure(
    model: str,
    call_id: uuid.UUID,
    *,
    latency_ms: Optional[int],
    status_code: Optional[int],
    error_text: str,
) -> CompletionResult:
    return CompletionResult(
        ok=False,
        model=model,
        call_id=call_id,
        content=None,
        usage=None,
        raw_response=None,
        latency_ms=latency_ms,
        status_code=status_code,
        error_text=error_text,
    )


async def query_completion(
    messages: List[Dict[str, str]],
    *,
    api_key: str,
    model: str,
    temperature: float,
    call_id: uuid.UUID | None = None,
    timeout_seconds: Optional[float] = None,
) -> CompletionResult:
    """
    POST one chat completion request. No retries.

    Failures come back as `ok=False` results; cancellation of the awaiting task
    propagates as asyncio.CancelledError.
    """
    call_id = call_id or uuid.uuid4()
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    payload = CompletionRequest(model=model, messages=messages, temperature=temperature).model_dump()

    timeout = timeout_seconds if timeout_seconds is not None else OPENAI_TIMEOUT_SECONDS
    client = _get_client(timeout)

    start = time.monotonic()
    try:
        resp = await client.post(
            OPENAI_API_URL,
            headers=headers,
            json=payload,
            timeout=timeout,
        )
        latency_ms = int((time.monotonic() - start) * 1000)

        status_code = resp.status_code
        if status_code < 200 or status_code >= 300:
            reason = getattr(resp, "reason_phrase", "") or ""
            error_text = resp.text or f"{status_code} {reason}".strip()
            error_text = redact_secrets(error_text, api_key)
            logger.warning(
                "completion_http_error call_id=%s status=%s detail=%s",
                call_id,
                status_code,
                error_text[:500],
            )
            return _failure(
                model,
                call_id,
                latency_ms=latency_ms,
                status_code=status_code,
                error_text=error_text,
            )

        data = resp.json()
        usage = data.get("usage") if isinstance(data, dict) and isinstance(data.get("usage"), dict) else None
        content = _extract_content(data)
        if content is None:
            logger.info("completion_unexpected_shape call_id=%s", call_id)

        return CompletionResult(
            ok=True,
            model=model,
            call_id=call_id,
            content=content,
            usage=usage,
            raw_response=data if isinstance(data, dict) else None,
            latency_ms=latency_ms,
            status_code=status_code,
            error_text=None,
        )

    except Exception as e:
        latency_ms = int((time.monotonic() - start) * 1000)
        error_text = redact_secrets(str(e) or "request failed", api_key)
        logger.warning("completion_failed call_id=%s model=%s error=%s", call_id, model, error_text)
        return _failure(
            model,
            call_id,
            latency_ms=latency_ms,
            status_code=None,
            error_text=error_text,
        )
