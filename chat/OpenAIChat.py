# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: OpenAIChat
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Iterator

from openai import OpenAI

from utility.logging_utils import get_class_logger

Message = Dict[str, str]  # {"role": "system"|"user"|"assistant", "content": "..."}


@dataclass
class OpenAIChat:
    """
        Completion capability for the advisor chat.

        Works against any OpenAI-compatible endpoint (OpenAI, Ollama /v1, vLLM).

        Expected Config fields:
          cfg.openai_api_key: str
          cfg.openai_base_url: str
          cfg.openai_chat_model: str  (e.g. "gpt-4o-mini", "llama3.1")
    """

    cfg: Any
    logger: Any = None
    client: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

        if not getattr(self.cfg, "openai_api_key", None):
            raise ValueError("Config is missing openai_api_key")

        self.model = getattr(self.cfg, "openai_chat_model", None)
        if not self.model:
            raise ValueError("Config missing openai_chat_model.")

        if self.client is None:
            self.client = OpenAI(
                api_key=self.cfg.openai_api_key,
                base_url=getattr(self.cfg, "openai_base_url", None) or None,
            )

        self.logger.info("OpenAIChat initialised (model=%s)", self.model)

    # Standard chat call
    def chat(
            self,
            messages: List[Message],
            temperature: float = 0.0,
            max_tokens: int = 512,
            top_p: float = 1.0,
            extra_params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        if not messages:
            raise ValueError("messages must be non-empty.")

        params: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "top_p": top_p,
        }
        if extra_params:
            params.update(extra_params)

        self.logger.debug(
            "Chat request: model=%s temp=%s max_tokens=%s top_p=%s",
            self.model, temperature, max_tokens, top_p
        )

        resp = self.client.chat.completions.create(**params)
        self.logger.debug("Raw ChatCompletion response: %r", resp)
        return resp

    # Streaming chat call
    def chat_stream(
            self,
            messages: List[Message],
            temperature: float = 0.0,
            max_tokens: int = 512,
            top_p: float = 1.0,
            extra_params: Optional[Dict[str, Any]] = None,
    ) -> Iterator[str]:
        if not messages:
            raise ValueError("messages must be non-empty.")

        params: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "top_p": top_p,
            "stream": True,
        }
        if extra_params:
            params.update(extra_params)

        stream = self.client.chat.completions.create(**params)

        try:
            for event in stream:
                # usage / keep-alive chunks carry no choices
                if not getattr(event, "choices", None):
                    continue
                delta = event.choices[0].delta
                if delta and getattr(delta, "content", None):
                    yield delta.content
        finally:
            close = getattr(stream, "close", None)
            if callable(close):
                close()

    # Prompt-in / text-out helpers used by the pipeline
    def complete(self, prompt: str, **kwargs: Any) -> str:
        """Blocking completion of a single user prompt."""
        resp = self.chat([{"role": "user", "content": prompt}], **kwargs)
        try:
            content = resp.choices[0].message.content or ""
        except (AttributeError, IndexError) as e:
            self.logger.error("Unexpected chat response format: %s", e, exc_info=True)
            raise RuntimeError(f"Unexpected chat response format: {e}") from e

        self.logger.debug("Token usage: %r", getattr(resp, "usage", None))
        return content

    def stream(self, prompt: str, **kwargs: Any) -> Iterator[str]:
        """Lazy, ordered, finite sequence of text deltas for a single user prompt."""
        return self.chat_stream([{"role": "user", "content": prompt}], **kwargs)

    def simple_chat(
            self,
            user_text: str,
            system_text: Optional[str] = None,
            **kwargs: Any,
    ) -> dict:
        messages: List[Message] = []
        if system_text:
            messages.append({"role": "system", "content": system_text})
        messages.append({"role": "user", "content": user_text})

        resp = self.chat(messages, **kwargs)

        try:
            content = resp.choices[0].message.content or ""
        except (AttributeError, IndexError) as e:
            self.logger.error("Unexpected chat response format: %s", e, exc_info=True)
            raise RuntimeError(f"Unexpected chat response format: {e}") from e

        self.logger.info("Chat answer generated (model=%s)", getattr(resp, "model", None))

        return {
            "answer": content,
            "raw": resp,
            "usage": getattr(resp, "usage", None),
            "model": getattr(resp, "model", None),
        }

    def healthcheck(self) -> bool:
        try:
            _ = self.simple_chat("ping", max_tokens=5, temperature=0.0)
            return True
        except Exception as e:
            self.logger.warning("Chat healthcheck failed: %s", e)
            return False
