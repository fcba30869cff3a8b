# src/chat_relay/adapters/_http.py
"""
Shared plumbing for the raw-HTTP adapters (gemini, groq, anthropic).

Every call is one POST with a JSON body. Network failure, non-2xx and a
body without the reply path all come back as a RelayFailure carrying the
provider's fallback literal; nothing here raises for upstream faults.
"""
from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional, Sequence, Union

import httpx

from chat_relay.models import Provider, RelayFailure, RelaySuccess

JSON_HEADERS = {"Content-Type": "application/json"}

PathKey = Union[str, int]


def dig(data: Any, path: Sequence[PathKey]) -> Any:
    """Follow a fixed JSON path; None as soon as a step is missing."""
    cur = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(cur, list) or len(cur) <= key:
                return None
            cur = cur[key]
        else:
            if not isinstance(cur, dict) or key not in cur:
                return None
            cur = cur[key]
    return cur


def extractor(path: Sequence[PathKey]) -> Callable[[Any], Optional[str]]:
    def _extract(data: Any) -> Optional[str]:
        value = dig(data, path)
        return value if isinstance(value, str) else None
    return _extract


def _ms(t0: float) -> int:
    return int((time.time() - t0) * 1000)


async def relay_post(
    provider: Provider,
    cfg: Dict[str, Any],
    model: str,
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    extract: Callable[[Any], Optional[str]],
    *,
    params: Optional[Dict[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
):
    t0 = time.time()
    fallback = cfg.get("fallback")

    def _fail(reason, detail, status_code=None):
        # the gemini key travels in the query string
        for secret in (params or {}).values():
            if secret:
                detail = detail.replace(secret, "***")
        return RelayFailure(
            provider=provider,
            model=model,
            reason=reason,
            status_code=status_code,
            detail=detail,
            fallback=fallback,
            latency_ms=_ms(t0),
        )

    try:
        async with httpx.AsyncClient(transport=transport, timeout=cfg.get("timeout_s")) as client:
            req = client.build_request("POST", url, json=payload, headers=headers, params=params)
            r = await client.send(req)
    except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as ex:
        # e.g. a non-ASCII credential that cannot be encoded into a header
        return _fail("transport", f"{type(ex).__name__}: {ex}")

    if r.status_code >= 300:
        return _fail("http_status", r.text[:400], status_code=r.status_code)

    # ---- Safe JSON parse ----
    try:
        data = r.json()
    except ValueError as ex:
        return _fail("schema", f"invalid JSON: {ex} :: {r.text[:200]}", status_code=r.status_code)

    text = extract(data)
    if text is None:
        return _fail("schema", f"reply path missing :: {str(data)[:400]}", status_code=r.status_code)

    return RelaySuccess(provider=provider, model=model, text=text, latency_ms=_ms(t0))
