# src/chat_relay/adapters/anthropic.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from chat_relay.adapters._http import JSON_HEADERS, extractor, relay_post
from chat_relay.models import Provider

extract_reply = extractor(["content", 0, "text"])


def build_payload(cfg: dict, model: str, messages: List[Dict[str, str]]) -> Dict[str, Any]:
    return {
        "model": model,
        "max_tokens": int(cfg.get("max_tokens", 1024)),
        "messages": [{"role": m["role"], "content": m["content"]} for m in messages],
    }


async def chat(
    cfg: dict,
    model: str,
    api_key: str,
    messages: List[Dict[str, str]],
    transport: Optional[httpx.AsyncBaseTransport] = None,
):
    """
    Anthropic Messages API adapter.

    cfg is the provider slice from providers.yml, e.g.:
      {
        "base_url": "https://api.anthropic.com/v1",
        "api_version": "2023-06-01",
        "max_tokens": 1024,
        "fallback": "[anthropic error]"
      }
    """
    url = cfg["base_url"].rstrip("/") + "/messages"
    headers = {
        **JSON_HEADERS,
        "x-api-key": api_key,
        "anthropic-version": cfg.get("api_version", "2023-06-01"),
    }
    return await relay_post(
        Provider.anthropic,
        cfg,
        model,
        url,
        build_payload(cfg, model, messages),
        headers,
        extract_reply,
        transport=transport,
    )
