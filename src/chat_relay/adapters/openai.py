# src/chat_relay/adapters/openai.py
from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI, OpenAIError

from chat_relay.models import Provider, RelayFailure, RelaySuccess


def build_request(model: str, messages: List[Dict[str, str]]) -> Dict[str, Any]:
    # model + messages verbatim; the SDK owns the rest of the envelope
    return {"model": model, "messages": messages}


def extract_reply(completion: Any) -> Optional[str]:
    content = completion.choices[0].message.content
    return content if isinstance(content, str) else None


async def chat(
    cfg: dict,
    model: str,
    api_key: str,
    messages: List[Dict[str, str]],
    transport: Optional[httpx.AsyncBaseTransport] = None,
):
    """
    OpenAI adapter via the official SDK (chat.completions.create).

    There is no fallback literal for this provider: a failure rendered
    through RelayFailure.render() raises UpstreamError, mirroring the SDK
    throwing to the caller.
    """
    t0 = time.time()

    def _fail(reason, detail, status_code=None):
        return RelayFailure(
            provider=Provider.openai,
            model=model,
            reason=reason,
            status_code=status_code,
            detail=detail,
            fallback=cfg.get("fallback"),
            latency_ms=int((time.time() - t0) * 1000),
        )

    kwargs: Dict[str, Any] = {
        "api_key": api_key,
        "base_url": cfg.get("base_url") or None,
        "max_retries": 0,
        "timeout": cfg.get("timeout_s"),
    }
    if transport is not None:
        kwargs["http_client"] = httpx.AsyncClient(transport=transport)

    try:
        async with AsyncOpenAI(**kwargs) as client:
            completion = await client.chat.completions.create(**build_request(model, messages))
    except APIStatusError as ex:
        return _fail("http_status", str(ex)[:400], status_code=ex.status_code)
    except APIConnectionError as ex:
        return _fail("transport", f"{type(ex).__name__}: {ex}")
    except UnicodeError as ex:
        return _fail("transport", f"{type(ex).__name__}: {ex}")
    except (OpenAIError, ValueError) as ex:
        return _fail("schema", f"{type(ex).__name__}: {ex}")

    try:
        text = extract_reply(completion)
    except (AttributeError, IndexError, TypeError) as ex:
        return _fail("schema", f"{type(ex).__name__}: {ex}")
    if text is None:
        return _fail("schema", "choices[0].message.content is empty")

    return RelaySuccess(
        provider=Provider.openai,
        model=model,
        text=text,
        latency_ms=int((time.time() - t0) * 1000),
    )
