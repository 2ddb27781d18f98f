from __future__ import annotations

import threading
import time

import pytest

from coursesync.domain.model import ChangeKind
from coursesync.domain.ports import ChangeEvent, ContentVersionSnapshot
from coursesync.domain.push_back import DispatcherClosedError, PushBackDispatcher, PushOutcome


def _event(version_id: int, kind: ChangeKind = ChangeKind.UPDATED) -> ChangeEvent:
    return ChangeEvent(
        kind=kind,
        row=ContentVersionSnapshot(
            version_id=version_id,
            version_code=f"CODE-{version_id}",
            class_id=1,
            pathway_id=1,
            version_number="v1.0",
        ),
    )


class _RecordingHandler:
    def __init__(self) -> None:
        self.handled: list[tuple[int, ChangeKind]] = []
        self._lock = threading.Lock()

    def __call__(self, event: ChangeEvent) -> PushOutcome:
        with self._lock:
            self.handled.append((event.version_id, event.kind))
        return PushOutcome(event=event)


def test_events_for_one_record_keep_receipt_order() -> None:
    handler = _RecordingHandler()
    kinds = [ChangeKind.INSERTED, ChangeKind.UPDATED, ChangeKind.UPDATED, ChangeKind.DELETED]

    with PushBackDispatcher(handler, workers=3) as dispatcher:
        for kind in kinds:
            dispatcher.submit(_event(5, kind))
            dispatcher.submit(_event(6))

    assert [kind for version_id, kind in handler.handled if version_id == 5] == kinds
    assert len(dispatcher.outcomes) == 8


def test_stalled_partition_does_not_block_others() -> None:
    release = threading.Event()
    handled: list[int] = []

    def handler(event: ChangeEvent) -> PushOutcome:
        if event.version_id == 0:
            release.wait(timeout=5)
        handled.append(event.version_id)
        return PushOutcome(event=event)

    dispatcher = PushBackDispatcher(handler, workers=2)
    dispatcher.submit(_event(0))
    dispatcher.submit(_event(1))

    deadline = time.monotonic() + 5
    while 1 not in handled and time.monotonic() < deadline:
        time.sleep(0.01)
    assert handled == [1]

    release.set()
    dispatcher.close()
    assert sorted(handled) == [0, 1]


def test_partitioning_is_stable_per_record() -> None:
    with PushBackDispatcher(_RecordingHandler(), workers=4) as dispatcher:
        assert dispatcher.partition_for(_event(9)) == dispatcher.partition_for(_event(9))
        assert dispatcher.partition_for(_event(9)) != dispatcher.partition_for(_event(10))


def test_handler_exceptions_do_not_kill_workers() -> None:
    calls: list[int] = []

    def handler(event: ChangeEvent) -> PushOutcome:
        calls.append(event.version_id)
        if event.version_id == 1:
            raise RuntimeError("boom")
        return PushOutcome(event=event)

    with PushBackDispatcher(handler, workers=1) as dispatcher:
        dispatcher.submit(_event(1))
        dispatcher.submit(_event(2))

    assert calls == [1, 2]
    assert [outcome.event.version_id for outcome in dispatcher.outcomes] == [2]


def test_submit_after_close_is_rejected() -> None:
    dispatcher = PushBackDispatcher(_RecordingHandler(), workers=1)
    dispatcher.close()

    with pytest.raises(DispatcherClosedError):
        dispatcher.submit(_event(1))


def test_worker_count_must_be_positive() -> None:
    with pytest.raises(ValueError, match="at least 1"):
        PushBackDispatcher(_RecordingHandler(), workers=0)


def test_drain_waits_for_in_flight_events_without_closing() -> None:
    release = threading.Event()
    handled: list[int] = []

    def handler(event: ChangeEvent) -> PushOutcome:
        release.wait(timeout=5)
        handled.append(event.version_id)
        return PushOutcome(event=event)

    with PushBackDispatcher(handler, workers=2) as dispatcher:
        dispatcher.submit(_event(1))
        dispatcher.submit(_event(2))
        threading.Timer(0.05, release.set).start()

        dispatcher.drain()

        assert sorted(handled) == [1, 2]
        dispatcher.submit(_event(3))

    assert sorted(handled) == [1, 2, 3]


def test_take_outcomes_hands_each_outcome_over_once() -> None:
    with PushBackDispatcher(_RecordingHandler(), workers=2) as dispatcher:
        dispatcher.submit(_event(1))
        dispatcher.submit(_event(2))
        dispatcher.drain()

        first = dispatcher.take_outcomes()
        assert sorted(outcome.event.version_id for outcome in first) == [1, 2]
        assert dispatcher.take_outcomes() == []

        dispatcher.submit(_event(3))

    assert [outcome.event.version_id for outcome in dispatcher.outcomes] == [3]
