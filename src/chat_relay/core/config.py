# src/chat_relay/core/config.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List

import yaml


# --- Load providers.yml once at startup into global CFG ----------------------

# This file lives at: src/chat_relay/core/config.py
# providers.yml sits next to the package root: src/chat_relay/providers.yml
PKG_DIR = Path(__file__).resolve().parents[1]
CFG_PATH = Path(os.getenv("CHAT_RELAY_CONFIG") or PKG_DIR / "providers.yml")


def load_config(path: Path | str = CFG_PATH) -> Dict[str, Any]:
    with Path(path).open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


CFG: Dict[str, Any] = load_config()


def get_provider_cfg(provider: str, cfg: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Return the config slice for one provider, e.g.:
      {"base_url": "https://api.groq.com/openai/v1", "fallback": "[groq error]", "timeout_s": 300.0}

    timeout_s comes from the same cfg's http section unless the slice sets its own.

    Raises KeyError if the provider is not configured.
    """
    if cfg is None:
        cfg = CFG

    providers = cfg.get("providers") or {}
    if provider not in providers:
        raise KeyError(f"Provider {provider!r} missing from providers.yml")
    pcfg = dict(providers[provider] or {})
    pcfg.setdefault("timeout_s", http_timeout(cfg))
    return pcfg


def cors_origins(cfg: Dict[str, Any] | None = None) -> List[str]:
    if cfg is None:
        cfg = CFG
    return list((cfg.get("cors") or {}).get("allow_origins") or [])


def client_cfg(cfg: Dict[str, Any] | None = None) -> Dict[str, Any]:
    if cfg is None:
        cfg = CFG
    return dict(cfg.get("client") or {})


def http_timeout(cfg: Dict[str, Any] | None = None) -> float | None:
    if cfg is None:
        cfg = CFG
    val = (cfg.get("http") or {}).get("timeout_s")
    return float(val) if val is not None else None
