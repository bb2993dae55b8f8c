# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: test_stream_delivery_coordinator.py
# -----------------------------------------------------------------------------
import threading
import time
import uuid

import pytest

from exceptions.AdvisorErrors import SinkClosed, StreamDeliveryFailure
from services.StreamDeliveryCoordinator import (
    DeltaSink,
    QueueSink,
    StreamDeliveryCoordinator,
    StreamEvent,
)


class RecordingSink:
    """Collects everything the coordinator pushes; optionally fails on the Nth send."""

    def __init__(self, fail_on_send=None):
        self.fail_on_send = fail_on_send
        self.sent = []
        self.send_attempts = 0
        self.completed = 0
        self.errors = []

    def send(self, event):
        self.send_attempts += 1
        if self.fail_on_send is not None and self.send_attempts >= self.fail_on_send:
            raise ConnectionResetError("client went away")
        self.sent.append(event)

    def complete(self):
        self.completed += 1

    def complete_with_error(self, error):
        self.errors.append(error)


def test_recording_sink_satisfies_protocol():
    assert isinstance(RecordingSink(), DeltaSink)
    assert isinstance(QueueSink(), DeltaSink)


def test_deltas_forwarded_in_order_with_fresh_ids(fake_completion_factory):
    completion = fake_completion_factory(chunks=["Hello", ", ", "founder", "!"])
    sink = RecordingSink()

    text = StreamDeliveryCoordinator(completion).deliver("prompt", sink)

    assert text == "Hello, founder!"
    assert [e.text for e in sink.sent] == ["Hello", ", ", "founder", "!"]
    ids = [e.event_id for e in sink.sent]
    assert len(set(ids)) == 4
    for event_id in ids:
        uuid.UUID(event_id)
    assert sink.completed == 1
    assert sink.errors == []


def test_sink_failure_on_second_chunk_stops_and_signals_error_once(fake_completion_factory):
    completion = fake_completion_factory(chunks=["one", "two", "three", "four"])
    sink = RecordingSink(fail_on_send=2)

    text = StreamDeliveryCoordinator(completion).deliver("prompt", sink)

    assert text is None
    assert [e.text for e in sink.sent] == ["one"]
    assert sink.send_attempts == 2
    assert len(sink.errors) == 1
    assert sink.completed == 0
    # upstream released; the remaining deltas were never pulled
    assert completion.stream_closed is True
    assert completion.pulled == 2


def test_upstream_failure_signals_error_once(fake_completion_factory):
    completion = fake_completion_factory(chunks=["a", "b", "c"], stream_error=TimeoutError("read timeout"), fail_after=1)
    sink = RecordingSink()

    text = StreamDeliveryCoordinator(completion).deliver("prompt", sink)

    assert text is None
    assert [e.text for e in sink.sent] == ["a"]
    assert len(sink.errors) == 1
    assert isinstance(sink.errors[0], StreamDeliveryFailure)
    assert sink.completed == 0


def test_empty_deltas_are_skipped(fake_completion_factory):
    completion = fake_completion_factory(chunks=["", "x", ""])
    sink = RecordingSink()
    assert StreamDeliveryCoordinator(completion).deliver("prompt", sink) == "x"
    assert len(sink.sent) == 1


def test_start_returns_immediately_and_runs_on_named_thread(fake_completion_factory):
    release = threading.Event()

    class SlowCompletion:
        def stream(self, prompt, **kwargs):
            release.wait(5.0)
            yield "late"

    sink = RecordingSink()
    done = []
    handle = StreamDeliveryCoordinator(SlowCompletion()).start("prompt", sink, on_complete=done.append)

    assert handle.thread.name.startswith("advisor-stream-")
    assert handle.done is False
    release.set()
    assert handle.join(timeout=5.0) is True
    assert handle.text == "late"
    assert done == ["late"]


def test_on_complete_not_called_after_failure(fake_completion_factory):
    completion = fake_completion_factory(chunks=["a", "b"], fail_after=1)
    done = []
    handle = StreamDeliveryCoordinator(completion).start("prompt", RecordingSink(), on_complete=done.append)
    handle.join(timeout=5.0)
    assert done == []
    assert handle.text is None


# ---------------------------------------------------------------- QueueSink
def test_queue_sink_events_end_with_done():
    sink = QueueSink(maxsize=4)
    sink.send(StreamEvent("1", "a"))
    sink.complete()
    events = list(sink.events())
    assert [k for k, _ in events] == ["delta", "done"]
    assert sink.closed is True


def test_queue_sink_send_after_close_raises():
    sink = QueueSink(maxsize=4)
    sink.close()
    with pytest.raises(SinkClosed):
        sink.send(StreamEvent("1", "a"))


def test_queue_sink_applies_backpressure_then_times_out():
    sink = QueueSink(maxsize=1, put_timeout=0.3)
    sink.send(StreamEvent("1", "a"))

    started = time.monotonic()
    with pytest.raises(SinkClosed):
        sink.send(StreamEvent("2", "b"))
    assert time.monotonic() - started >= 0.25
    assert sink.closed is True


def test_slow_consumer_still_receives_terminal_error(fake_completion_factory):
    completion = fake_completion_factory(chunks=[f"c{i}" for i in range(10)])
    sink = QueueSink(maxsize=2, put_timeout=0.3)
    handle = StreamDeliveryCoordinator(completion).start("prompt", sink)

    # the producer gives up while nobody reads
    assert handle.join(timeout=5.0) is True
    assert handle.text is None

    received = []
    consumer = threading.Thread(target=lambda: received.extend(sink.events()), daemon=True)
    consumer.start()
    consumer.join(timeout=2.0)

    assert not consumer.is_alive()
    assert [kind for kind, _ in received] == ["delta", "delta", "error"]
    assert [p.text for kind, p in received if kind == "delta"] == ["c0", "c1"]
    assert isinstance(received[-1][1], SinkClosed)
    assert completion.stream_closed is True


def test_consumer_disconnect_stops_producer(fake_completion_factory):
    completion = fake_completion_factory(chunks=[f"c{i}" for i in range(100)])
    sink = QueueSink(maxsize=1, put_timeout=5.0)
    coordinator = StreamDeliveryCoordinator(completion)

    handle = coordinator.start("prompt", sink)
    events = sink.events()
    first_kind, first = next(events)
    events.close()  # consumer goes away

    assert handle.join(timeout=5.0) is True
    assert first_kind == "delta" and first.text == "c0"
    assert handle.text is None
    assert completion.pulled < 100
    assert completion.stream_closed is True
