# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: StreamDeliveryCoordinator.py
# -----------------------------------------------------------------------------
import logging
import queue
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Optional, Protocol, Tuple, runtime_checkable

from chat.CompletionCapability import CompletionCapability
from exceptions.AdvisorErrors import SinkClosed, StreamDeliveryFailure
from utility.logging_utils import get_class_logger

EVENT_DELTA = "delta"
EVENT_DONE = "done"
EVENT_ERROR = "error"


@dataclass(frozen=True)
class StreamEvent:
    """One delta of model output, tagged with a fresh id."""
    event_id: str
    text: str


@runtime_checkable
class DeltaSink(Protocol):
    def send(self, event: StreamEvent) -> None:
        ...

    def complete(self) -> None:
        ...

    def complete_with_error(self, error: BaseException) -> None:
        ...


class QueueSink:
    """
    Bounded channel between the delivery thread (producer) and a consumer such
    as an HTTP response generator.

    `send` blocks while the queue is full, for at most `put_timeout` seconds,
    then gives up with SinkClosed. Once the consumer calls `close()` (or stops
    iterating `events()`), every further `send` raises SinkClosed.

    A producer that gives up leaves no room for its error event, so `events()`
    reports the reason itself once the buffered deltas are drained.
    """

    _POLL_SEC = 0.1

    def __init__(self, maxsize: int = 64, put_timeout: float = 30.0):
        self._queue: "queue.Queue[Tuple[str, Any]]" = queue.Queue(maxsize=maxsize)
        self._closed = threading.Event()
        self._abort_reason: Optional[SinkClosed] = None
        self.put_timeout = put_timeout

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def _put(self, item: Tuple[str, Any]) -> None:
        deadline = time.monotonic() + self.put_timeout
        while True:
            if self._closed.is_set():
                raise SinkClosed("stream consumer has disconnected")
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                reason = SinkClosed(f"stream consumer did not read for {self.put_timeout:.1f}s")
                self._abort_reason = reason
                self._closed.set()
                raise reason
            try:
                self._queue.put(item, timeout=min(self._POLL_SEC, remaining))
                return
            except queue.Full:
                continue

    # producer side
    def send(self, event: StreamEvent) -> None:
        self._put((EVENT_DELTA, event))

    def complete(self) -> None:
        self._put((EVENT_DONE, None))

    def complete_with_error(self, error: BaseException) -> None:
        self._put((EVENT_ERROR, error))

    # consumer side
    def close(self) -> None:
        self._closed.set()
        # unblock a producer waiting on a full queue
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break

    def events(self) -> Iterator[Tuple[str, Any]]:
        """Yield (kind, payload) until a done/error event; closes the sink on exit."""
        try:
            while True:
                try:
                    kind, payload = self._queue.get(timeout=self._POLL_SEC)
                except queue.Empty:
                    if self._closed.is_set():
                        yield EVENT_ERROR, self._abort_reason or SinkClosed("stream closed before completion")
                        return
                    continue
                yield kind, payload
                if kind in (EVENT_DONE, EVENT_ERROR):
                    return
        finally:
            self.close()


@dataclass
class StreamHandle:
    """Returned to the initiating caller; delivery continues on `thread`."""
    stream_id: str
    thread: Optional[threading.Thread] = None
    result: Dict[str, Any] = field(default_factory=dict)

    def join(self, timeout: Optional[float] = None) -> bool:
        if self.thread is not None:
            self.thread.join(timeout)
        return self.done

    @property
    def done(self) -> bool:
        return self.thread is not None and not self.thread.is_alive()

    @property
    def text(self) -> Optional[str]:
        return self.result.get("text")


class StreamDeliveryCoordinator:
    """
    Pushes model deltas to a sink as they are produced.

      - every delta gets a fresh uuid and is forwarded immediately
      - producer failure or sink failure: one complete_with_error, then stop
        (no retry; the upstream iterator is closed)
      - normal exhaustion: complete()
    """

    def __init__(
            self,
            completion: CompletionCapability,
            *,
            completion_kwargs: Optional[Dict[str, Any]] = None,
            logger: Optional[logging.Logger] = None,
    ):
        self.completion = completion
        self.completion_kwargs = completion_kwargs or {}
        self.logger = logger or get_class_logger(self.__class__)

    def deliver(self, prompt: str, sink: DeltaSink, stream_id: str = "") -> Optional[str]:
        """
        Runs to completion on the calling thread.
        Returns the concatenated text on success, None if the stream failed.
        """
        parts = []

        try:
            deltas = iter(self.completion.stream(prompt, **self.completion_kwargs))
        except Exception as e:
            self.logger.error("stream %s: could not start upstream stream: %s", stream_id, e)
            self._fail(sink, StreamDeliveryFailure(f"upstream stream failed to start: {e}"), stream_id)
            return None

        try:
            while True:
                try:
                    delta = next(deltas)
                except StopIteration:
                    break
                except Exception as e:
                    self.logger.error(
                        "stream %s: upstream failed after %d deltas: %s", stream_id, len(parts), e
                    )
                    self._fail(sink, StreamDeliveryFailure(f"upstream stream failed: {e}"), stream_id)
                    return None

                if not delta:
                    continue

                event = StreamEvent(event_id=str(uuid.uuid4()), text=delta)
                try:
                    sink.send(event)
                except Exception as e:
                    self.logger.warning(
                        "stream %s: sink rejected delta %d, stopping: %s", stream_id, len(parts) + 1, e
                    )
                    self._fail(sink, e, stream_id)
                    return None
                parts.append(delta)
        finally:
            close = getattr(deltas, "close", None)
            if callable(close):
                close()

        try:
            sink.complete()
        except Exception as e:
            self.logger.warning("stream %s: sink failed on completion: %s", stream_id, e)
            return None

        self.logger.info("stream %s: delivered %d deltas", stream_id, len(parts))
        return "".join(parts)

    def _fail(self, sink: DeltaSink, error: BaseException, stream_id: str) -> None:
        try:
            sink.complete_with_error(error)
        except Exception as e:
            # consumer already gone; nothing left to notify
            self.logger.debug("stream %s: error signal not delivered: %s", stream_id, e)

    def start(
            self,
            prompt: str,
            sink: DeltaSink,
            on_complete: Optional[Callable[[str], None]] = None,
    ) -> StreamHandle:
        """Detach delivery onto its own thread and return immediately."""
        handle = StreamHandle(stream_id=uuid.uuid4().hex)

        def _run() -> None:
            text = self.deliver(prompt, sink, stream_id=handle.stream_id)
            handle.result["text"] = text
            if text is not None and on_complete is not None:
                try:
                    on_complete(text)
                except Exception as e:
                    self.logger.exception("stream %s: on_complete callback failed: %s", handle.stream_id, e)

        handle.thread = threading.Thread(
            target=_run,
            name=f"advisor-stream-{handle.stream_id[:8]}",
            daemon=True,
        )
        handle.thread.start()
        self.logger.info("stream %s: started", handle.stream_id)
        return handle
