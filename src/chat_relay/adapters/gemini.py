# src/chat_relay/adapters/gemini.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from chat_relay.adapters._http import JSON_HEADERS, extractor, relay_post
from chat_relay.models import Provider

extract_reply = extractor(["candidates", 0, "content", "parts", 0, "text"])


def _role(role: str) -> str:
    # Gemini only knows "user" and "model"
    return "user" if role == "user" else "model"


def build_payload(messages: List[Dict[str, str]]) -> Dict[str, Any]:
    return {
        "contents": [
            {"role": _role(m["role"]), "parts": [{"text": m["content"]}]}
            for m in messages
        ]
    }


def endpoint(cfg: dict, model: str) -> str:
    return f"{cfg['base_url'].rstrip('/')}/models/{model}:generateContent"


async def chat(
    cfg: dict,
    model: str,
    api_key: str,
    messages: List[Dict[str, str]],
    transport: Optional[httpx.AsyncBaseTransport] = None,
):
    """
    POST {base_url}/models/{model}:generateContent?key={api_key}
    Reply: candidates[0].content.parts[0].text, else "[gemini error]".
    """
    return await relay_post(
        Provider.gemini,
        cfg,
        model,
        endpoint(cfg, model),
        build_payload(messages),
        dict(JSON_HEADERS),
        extract_reply,
        params={"key": api_key},
        transport=transport,
    )
