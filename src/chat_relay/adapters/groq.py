# src/chat_relay/adapters/groq.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from chat_relay.adapters._http import JSON_HEADERS, extractor, relay_post
from chat_relay.models import Provider

extract_reply = extractor(["choices", 0, "message", "content"])


def build_payload(model: str, messages: List[Dict[str, str]]) -> Dict[str, Any]:
    # OpenAI-compatible: roles pass through unchanged
    return {"model": model, "messages": messages}


async def chat(
    cfg: dict,
    model: str,
    api_key: str,
    messages: List[Dict[str, str]],
    transport: Optional[httpx.AsyncBaseTransport] = None,
):
    """Groq adapter (OpenAI-compatible /chat/completions)."""
    url = cfg["base_url"].rstrip("/") + "/chat/completions"
    headers = {**JSON_HEADERS, "Authorization": f"Bearer {api_key}"}
    return await relay_post(
        Provider.groq,
        cfg,
        model,
        url,
        build_payload(model, messages),
        headers,
        extract_reply,
        transport=transport,
    )
