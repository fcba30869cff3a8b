# src/chat_relay/core/relay.py
"""
Provider relay: one inbound chat contract, four upstream wire formats.

complete_result() is the primary channel and returns RelaySuccess or
RelayFailure. complete() is the compatibility surface returning a plain
reply string, with failures rendered as the provider's fallback literal.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import httpx
from pydantic import SecretStr

from chat_relay.adapters import anthropic, gemini, groq, openai
from chat_relay.core.config import get_provider_cfg
from chat_relay.core.trace import relay_trace
from chat_relay.models import ChatMessage, Provider, RelayFailure, RelayResult

logger = logging.getLogger(__name__)

# One adapter module per provider; each exposes async chat(cfg, model, api_key, messages, transport)
ADAPTERS = {
    Provider.gemini: gemini,
    Provider.openai: openai,
    Provider.groq: groq,
    Provider.anthropic: anthropic,
}

MessageLike = Union[ChatMessage, Mapping[str, Any]]


def _as_dict(m: MessageLike) -> Dict[str, str]:
    if isinstance(m, ChatMessage):
        return m.model_dump()
    return {"role": str(m["role"]), "content": str(m["content"])}


def _reveal(credential: Union[str, SecretStr]) -> str:
    if isinstance(credential, SecretStr):
        return credential.get_secret_value()
    return credential


async def complete_result(
    provider: Union[Provider, str],
    model: str,
    credential: Union[str, SecretStr],
    messages: Iterable[MessageLike],
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    cfg: Optional[Dict[str, Any]] = None,
) -> RelayResult:
    """
    Forward one conversation to `provider` and return the normalized result.

    - Exactly one upstream call; no retries, no caching.
    - `model` and `credential` are forwarded as-is, never validated here.
    - An empty `messages` list is forwarded too.
    - Raises ValueError only for a provider outside the Provider enum.
    """
    provider = Provider(provider)
    adapter = ADAPTERS[provider]
    pcfg = get_provider_cfg(provider.value, cfg)
    msgs = [_as_dict(m) for m in messages]

    relay_trace("upstream.start", provider=provider.value, model=model, messages=len(msgs))
    result = await adapter.chat(pcfg, model, _reveal(credential), msgs, transport=transport)

    if isinstance(result, RelayFailure):
        logger.warning(
            "relay failure: provider=%s model=%s reason=%s status_code=%s detail=%s",
            provider.value,
            model,
            result.reason,
            result.status_code,
            result.detail[:200],
        )
    relay_trace(
        "upstream.done",
        provider=provider.value,
        model=model,
        status=result.status,
        latency_ms=result.latency_ms,
    )
    return result


async def complete(
    provider: Union[Provider, str],
    model: str,
    credential: Union[str, SecretStr],
    messages: Iterable[MessageLike],
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    cfg: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Reply text for one turn, e.g. "hi there", or the fallback literal
    ("[gemini error]", "[groq error]", "[anthropic error]") when the upstream
    call fails. The openai path has no fallback and raises UpstreamError.
    """
    result = await complete_result(
        provider, model, credential, messages, transport=transport, cfg=cfg
    )
    return result.render()
