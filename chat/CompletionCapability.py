# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: CompletionCapability
# -----------------------------------------------------------------------------
from typing import Any, Iterator, Protocol, runtime_checkable


@runtime_checkable
class CompletionCapability(Protocol):
    """What the pipeline needs from a language model (OpenAIChat satisfies it)."""

    def complete(self, prompt: str, **kwargs: Any) -> str:
        ...

    def stream(self, prompt: str, **kwargs: Any) -> Iterator[str]:
        ...
