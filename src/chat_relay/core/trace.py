# src/chat_relay/core/trace.py
from __future__ import annotations
import logging
import os
import time
from typing import Any, Mapping

_log = logging.getLogger("chat_relay.trace")


def trace_enabled() -> bool:
    return (os.getenv("RELAY_TRACE", "")).lower() in ("1", "true", "yes", "on")


def _fmt_kv(d: Mapping[str, Any]) -> str:
    return " ".join(f"{k}={d[k]}" for k in d)


def relay_trace(event: str, **kv: Any) -> None:
    """
    Emit a single-line structured log ONLY when RELAY_TRACE=true.
    Example:
      [relay] upstream.done ts=... provider=groq model=llama3-70b-8192 status=ok latency_ms=412

    Callers must never pass the credential.
    """
    if not trace_enabled():
        return
    kv2 = {"ts": int(time.time()), **kv}
    _log.info("[relay] %s %s", event, _fmt_kv(kv2))
