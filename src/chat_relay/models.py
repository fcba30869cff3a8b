# src/chat_relay/models.py
from __future__ import annotations
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr

Role = Literal["user", "assistant"]


class Provider(str, Enum):
    gemini = "gemini"
    openai = "openai"
    groq = "groq"
    anthropic = "anthropic"


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class RelayRequest(BaseModel):
    """Inbound body shared by /api/chat and /v1/chat."""

    model_config = ConfigDict(populate_by_name=True)

    messages: List[ChatMessage] = Field(default_factory=list)
    provider: Provider
    model: str
    api_key: SecretStr = Field(alias="apiKey")


class ReplyEnvelope(BaseModel):
    reply: str


class UpstreamError(RuntimeError):
    """Raised when a failed call has no fallback literal to render."""

    def __init__(self, failure: "RelayFailure"):
        super().__init__(f"[{failure.provider.value}] {failure.reason}: {failure.detail}")
        self.failure = failure


class RelaySuccess(BaseModel):
    status: Literal["ok"] = "ok"
    provider: Provider
    model: str
    text: str
    latency_ms: int = 0

    def render(self) -> str:
        return self.text


FailureReason = Literal["transport", "http_status", "schema"]


class RelayFailure(BaseModel):
    status: Literal["error"] = "error"
    provider: Provider
    model: str
    reason: FailureReason
    status_code: Optional[int] = None
    detail: str = ""
    fallback: Optional[str] = Field(default=None, exclude=True)
    latency_ms: int = 0

    def render(self) -> str:
        """
        Compatibility rendering: the provider's fallback literal
        (e.g. "[groq error]"). Providers without one raise UpstreamError.
        """
        if self.fallback is None:
            raise UpstreamError(self)
        return self.fallback


RelayResult = Annotated[Union[RelaySuccess, RelayFailure], Field(discriminator="status")]
