# src/chat_relay/client.py
"""
Caller-side view of the relay, as used by the conversation layer.

The relay already turns most upstream faults into a fallback reply, so the
only thing checked here is whether the /api/chat call itself succeeded.
Anything else becomes one fixed message that is shown inline and not
stored as a conversation message.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

import requests

from chat_relay.core.config import client_cfg

logger = logging.getLogger(__name__)

_CLIENT_CFG = client_cfg()

REQUEST_FAILED_MESSAGE: str = _CLIENT_CFG.get(
    "request_failed_message", "エラーが発生しました。もう一度お試しください。"
)

# model preselected for each provider when the user has not picked one
DEFAULT_MODELS: Dict[str, str] = dict(_CLIENT_CFG.get("default_models") or {})


@dataclass(frozen=True)
class ReplyOutcome:
    ok: bool
    text: str
    status_code: Optional[int] = None


class RelayClient:
    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 300):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def send(
        self,
        messages: Sequence[Mapping[str, Any]],
        provider: str,
        model: Optional[str],
        api_key: str,
    ) -> ReplyOutcome:
        body: Dict[str, Any] = {
            "messages": _plain(messages),
            "provider": provider,
            "model": model or DEFAULT_MODELS.get(provider, ""),
            "apiKey": api_key,
        }
        try:
            r = requests.post(f"{self.base_url}/api/chat", json=body, timeout=self.timeout)
        except requests.RequestException as ex:
            logger.warning("relay unreachable: %s", type(ex).__name__)
            return ReplyOutcome(ok=False, text=REQUEST_FAILED_MESSAGE)

        if not r.ok:
            logger.warning("relay returned %s for provider=%s", r.status_code, provider)
            return ReplyOutcome(ok=False, text=REQUEST_FAILED_MESSAGE, status_code=r.status_code)

        try:
            data = r.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            logger.warning("relay returned an unexpected body for provider=%s", provider)
            return ReplyOutcome(ok=False, text=REQUEST_FAILED_MESSAGE, status_code=r.status_code)
        reply = data.get("reply")
        return ReplyOutcome(ok=True, text=reply if isinstance(reply, str) else "", status_code=r.status_code)


def _plain(messages: Sequence[Mapping[str, Any]]) -> List[Dict[str, str]]:
    # persisted rows carry id/session_id too; the relay only takes role + content
    return [{"role": m["role"], "content": m["content"]} for m in messages]
