# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-15
# Description: test_config.py
# -----------------------------------------------------------------------------
import pytest

from config.Config import Config


def _set_required(monkeypatch):
    monkeypatch.setenv("OPENAI_BASE_URL", "http://localhost:11434/v1")
    monkeypatch.setenv("OPENAI_API_KEY", "ollama")
    monkeypatch.setenv("OPENAI_CHAT_MODEL", "llama3.1")


def test_from_env_reads_required_fields(monkeypatch):
    _set_required(monkeypatch)
    monkeypatch.delenv("ADVISOR_CHROMA_MODE", raising=False)

    cfg = Config.from_env()

    assert cfg.openai_chat_model == "llama3.1"
    assert cfg.chroma_mode == "memory"


def test_missing_required_env_fails_fast(monkeypatch):
    for name in Config.OPENAI_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(ValueError) as exc:
        Config.from_env()
    assert "OPENAI_API_KEY" in str(exc.value)


def test_local_chroma_needs_path():
    with pytest.raises(ValueError) as exc:
        Config(openai_base_url="u", openai_api_key="k", openai_chat_model="m", chroma_mode="local")
    assert "ADVISOR_CHROMA_PATH" in str(exc.value)


def test_cloud_chroma_needs_credentials():
    with pytest.raises(ValueError) as exc:
        Config(openai_base_url="u", openai_api_key="k", openai_chat_model="m", chroma_mode="cloud")
    assert "CHROMA_API_KEY" in str(exc.value)


def test_unknown_chroma_mode_rejected():
    with pytest.raises(ValueError):
        Config(openai_base_url="u", openai_api_key="k", openai_chat_model="m", chroma_mode="redis")


def test_summary_hides_api_key():
    cfg = Config(openai_base_url="u", openai_api_key="secret", openai_chat_model="m")
    assert "secret" not in str(cfg.summary())
