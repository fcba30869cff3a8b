import pytest

from chat_relay.core.config import CFG, cors_origins, get_provider_cfg, http_timeout, load_config


def test_provider_slices_present():
    assert set(CFG["providers"]) == {"gemini", "openai", "groq", "anthropic"}


def test_fallback_literals():
    assert get_provider_cfg("gemini")["fallback"] == "[gemini error]"
    assert get_provider_cfg("groq")["fallback"] == "[groq error]"
    assert get_provider_cfg("anthropic")["fallback"] == "[anthropic error]"
    assert get_provider_cfg("openai")["fallback"] is None


def test_anthropic_fixed_values():
    cfg = get_provider_cfg("anthropic")
    assert cfg["api_version"] == "2023-06-01"
    assert cfg["max_tokens"] == 1024


def test_unknown_provider_raises_key_error():
    with pytest.raises(KeyError):
        get_provider_cfg("mistral")


def test_slice_is_a_copy():
    get_provider_cfg("groq")["fallback"] = "changed"
    assert get_provider_cfg("groq")["fallback"] == "[groq error]"


def test_load_config_from_custom_file(tmp_path):
    p = tmp_path / "relay.yml"
    p.write_text(
        "providers:\n  groq:\n    base_url: http://localhost:9999\n    fallback: '[x]'\n"
        "cors:\n  allow_origins: [http://a]\nhttp:\n  timeout_s: 5\n",
        encoding="utf-8",
    )
    cfg = load_config(p)
    assert get_provider_cfg("groq", cfg)["base_url"] == "http://localhost:9999"
    assert cors_origins(cfg) == ["http://a"]
    assert http_timeout(cfg) == 5.0
    assert get_provider_cfg("groq", cfg)["timeout_s"] == 5.0
    assert http_timeout({}) is None


def test_provider_slice_carries_default_timeout():
    assert get_provider_cfg("anthropic")["timeout_s"] == 300.0
