# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: AdvisorErrors
# -----------------------------------------------------------------------------
from typing import Any, Optional


class AdvisorError(Exception):
    """Base class for retrieval/augmentation pipeline errors."""


class EntityNotFound(AdvisorError):
    """
    Subject user or document is missing.
    The only condition that halts a chat request outright.
    """

    def __init__(self, entity_kind: str, entity_id: Any):
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        super().__init__(f"{entity_kind} not found: {entity_id!r}")


class EncodingDegraded(AdvisorError):
    """Model output could not be parsed into a feature vector."""

    def __init__(self, key: str, reply: Optional[str], reason: str):
        self.key = key
        self.reply = reply
        self.reason = reason
        super().__init__(f"encoding for {key!r} degraded: {reason} (reply={reply!r})")


class StoreUnavailable(AdvisorError):
    """Candidate store or vector cache store could not be reached."""

    def __init__(self, store_name: str, cause: Optional[BaseException] = None):
        self.store_name = store_name
        self.cause = cause
        super().__init__(f"{store_name} unavailable: {cause}")


class StreamDeliveryFailure(AdvisorError):
    """Delta production or sink delivery failed mid-stream."""


class SinkClosed(StreamDeliveryFailure):
    """The consumer side of a stream went away or stopped reading."""
