# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-13
# Description: conftest.py
# -----------------------------------------------------------------------------

import os
import sys
from pathlib import Path
from typing import Iterator, List, Optional

import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# unit tests never mount the operator UI
os.environ.setdefault("ADVISOR_MOUNT_UI", "false")


class FakeCompletion:
    """
    Stand-in for the OpenAI-compatible completion capability.

    complete() returns `replies` in order (the last one repeats);
    stream() yields `chunks`, raising `stream_error` after `fail_after` chunks.
    """

    def __init__(
            self,
            replies: Optional[List[str]] = None,
            chunks: Optional[List[str]] = None,
            stream_error: Optional[BaseException] = None,
            fail_after: Optional[int] = None,
    ):
        self.replies = list(replies or ["ok"])
        self.chunks = list(chunks or [])
        self.stream_error = stream_error
        self.fail_after = fail_after
        self.prompts: List[str] = []
        self.pulled = 0
        self.stream_closed = False

    def complete(self, prompt: str, **kwargs) -> str:
        self.prompts.append(prompt)
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0]

    def stream(self, prompt: str, **kwargs) -> Iterator[str]:
        self.prompts.append(prompt)
        return self._gen()

    def _gen(self) -> Iterator[str]:
        try:
            for i, chunk in enumerate(self.chunks):
                if self.fail_after is not None and i >= self.fail_after:
                    raise self.stream_error or RuntimeError("upstream failed")
                self.pulled += 1
                yield chunk
        finally:
            self.stream_closed = True

    def healthcheck(self) -> bool:
        return True


@pytest.fixture
def fake_completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture
def fake_completion_factory():
    return FakeCompletion
