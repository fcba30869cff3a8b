# src/chat_relay/core/logging.py
from __future__ import annotations
import logging
import os
import re

FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-8s %(name)s %(message)s"
DATEFMT = "%Y-%m-%dT%H:%M:%S"

# loggers that print request URLs/headers; the gemini key rides in ?key=
_CHATTY = ("httpx", "httpcore", "openai")

_SECRET_PATTERNS = [
    re.compile(r"(key=)[^&\s\"']+"),
    re.compile(r"(Bearer\s+)[^\s\"']+", re.IGNORECASE),
    re.compile(r"(x-api-key['\"]?\s*[:=]\s*['\"]?)[^\s\"',}]+", re.IGNORECASE),
]


def redact(text: str) -> str:
    """Mask anything shaped like a provider credential."""
    for pat in _SECRET_PATTERNS:
        text = pat.sub(r"\1***", text)
    return text


class CredentialFilter(logging.Filter):
    """Rewrites a record's rendered message with credentials masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        masked = redact(msg)
        if masked != msg:
            record.msg, record.args = masked, None
        return True


def _level(default: str = "INFO") -> int:
    name = (os.getenv("LOG_LEVEL", default) or default).strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.getLevelName(default)


def setup_logging() -> None:
    """
    Configure root logging once. Idempotent.
    LOG_LEVEL controls verbosity (default INFO); chatty HTTP loggers stay at WARNING.
    """
    for name in _CHATTY:
        logging.getLogger(name).setLevel(logging.WARNING)

    root = logging.getLogger()
    root.setLevel(_level())

    # uvicorn / pytest may already own the handlers; only add ours when none exist
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=FORMAT, datefmt=DATEFMT))
        root.addHandler(handler)

    for handler in root.handlers:
        if not any(isinstance(f, CredentialFilter) for f in handler.filters):
            handler.addFilter(CredentialFilter())
