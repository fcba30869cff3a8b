# src/chat_relay/app.py
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

# Load .env from project root before config/logging read the environment
ROOT_DIR = Path(__file__).resolve().parents[2]
load_dotenv(ROOT_DIR / ".env")

from chat_relay.core.logging import setup_logging  # noqa: E402
setup_logging()

from chat_relay.core.config import cors_origins  # noqa: E402
from chat_relay.core.relay import complete_result  # noqa: E402
from chat_relay.models import RelayRequest, ReplyEnvelope, UpstreamError  # noqa: E402

logger = logging.getLogger(__name__)

app = FastAPI(title="Chat Relay", version="0.1.0")

# CORS so the browser chat client can call the relay directly
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Outbound transport for upstream calls. None -> httpx default; tests override this."""
    return None


@app.get("/healthz")
def health():
    return {"status": "ok"}


@app.post("/api/chat", response_model=ReplyEnvelope)
async def chat(
    req: RelayRequest,
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_transport),
) -> ReplyEnvelope:
    """
    Compatibility endpoint: {messages, provider, model, apiKey} -> {reply}.

    Upstream failures come back as the provider's fallback literal with 200.
    Only a failure with no fallback (openai) turns into a 502.
    """
    result = await complete_result(
        req.provider, req.model, req.api_key, req.messages, transport=transport
    )
    try:
        reply = result.render()
    except UpstreamError as ex:
        raise HTTPException(status_code=502, detail=f"upstream_error: {ex}")
    return ReplyEnvelope(reply=reply)


@app.post("/v1/chat")
async def chat_result(
    req: RelayRequest,
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_transport),
) -> Dict[str, Any]:
    """
    Structured endpoint: same body as /api/chat, returns the discriminated result:
      {"status": "ok", "provider": ..., "model": ..., "text": ..., "latency_ms": ...}
      {"status": "error", "provider": ..., "model": ..., "reason": ..., "status_code": ..., "detail": ...}
    """
    result = await complete_result(
        req.provider, req.model, req.api_key, req.messages, transport=transport
    )
    logger.info(
        "v1_chat: provider=%s model=%s messages=%d status=%s",
        req.provider.value,
        req.model,
        len(req.messages),
        result.status,
    )
    return result.model_dump(mode="json")
