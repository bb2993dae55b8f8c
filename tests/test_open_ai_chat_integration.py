# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-15
# Description: test_open_ai_chat_integration.py
# -----------------------------------------------------------------------------
import os

import pytest

from chat.OpenAIChat import OpenAIChat
from config.Config import Config
from embedding.FeatureEncoder import LLMFeatureEncoder


def _missing_openai_chat_env_vars() -> list[str]:
    """Env var names derived from Config.ENV_VARS to avoid duplication."""
    openai_env_names = [
        Config.ENV_VARS["openai_api_key"],
        Config.ENV_VARS["openai_base_url"],
        Config.ENV_VARS["openai_chat_model"],
    ]
    return [name for name in openai_env_names if not os.getenv(name)]


def _skip_if_missing_prereqs():
    missing = _missing_openai_chat_env_vars()
    if missing:
        pytest.skip(f"Missing env vars for the chat endpoint: {', '.join(missing)}")


@pytest.mark.integration
def test_openai_chat_simple_roundtrip():
    """
    Integration test:
      - instantiate OpenAIChat against the configured endpoint
      - send a tiny prompt
      - verify response is returned
    """
    _skip_if_missing_prereqs()

    chat = OpenAIChat(cfg=Config.from_env())
    resp = chat.simple_chat(
        user_text="Reply with a single word: OK",
        system_text="You are a test assistant.",
        temperature=0.0,
        max_tokens=5,
    )

    assert isinstance(resp, dict)
    assert "OK" in resp["answer"].strip().upper()


@pytest.mark.integration
def test_openai_chat_stream_produces_deltas():
    _skip_if_missing_prereqs()

    chat = OpenAIChat(cfg=Config.from_env())
    deltas = list(chat.stream("Count from one to five in words.", max_tokens=30, temperature=0.0))

    assert deltas
    assert "".join(deltas).strip()


@pytest.mark.integration
def test_live_skill_encoding_is_three_dimensional():
    """A live model may reply badly; either way the encoder returns 3 values in [0, 1]."""
    _skip_if_missing_prereqs()

    encoder = LLMFeatureEncoder(OpenAIChat(cfg=Config.from_env()), completion_kwargs={"temperature": 0.0, "max_tokens": 32})
    vec = encoder.encode("Python", category="Programming", level="Advanced")

    assert len(vec) == 3
    assert all(0.0 <= v <= 1.0 for v in vec)


@pytest.mark.integration
def test_openai_chat_healthcheck():
    _skip_if_missing_prereqs()
    assert OpenAIChat(cfg=Config.from_env()).healthcheck() is True
