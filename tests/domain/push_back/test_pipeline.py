from __future__ import annotations

import pytest

from coursesync.domain.model import ChangeKind, ContentVersionLineage
from coursesync.domain.ports import ChangeEvent, ContentVersionSnapshot
from coursesync.domain.push_back import PushBackPipeline, PushState
from tests.helpers.rows import RecordingSink


def _event(kind: ChangeKind, *, version_id: int = 7, code: str = "ACM-M1-INT-v1.0") -> ChangeEvent:
    return ChangeEvent(
        kind=kind,
        row=ContentVersionSnapshot(
            version_id=version_id,
            version_code=code,
            class_id=1,
            pathway_id=1,
            version_number="v1.0",
        ),
    )


def _lineage(version_id: int) -> ContentVersionLineage:
    return ContentVersionLineage(
        version_id=version_id,
        version_code="ACM-M1-INT-v1.0",
        version_number="v1.0",
        status="Open",
        drive_link=None,
        notes=None,
        class_name="Intro",
        class_number=1,
        module_name="M1",
        module_number=1,
        programme_name="Leadership",
        cohort_name="Default",
        client_name="Acme",
    )


def _unreachable_loader(_version_id: int) -> ContentVersionLineage | None:
    raise AssertionError("delete events must not read the store")


@pytest.mark.parametrize("kind", [ChangeKind.INSERTED, ChangeKind.UPDATED])
def test_upsert_events_walk_every_state(kind: ChangeKind) -> None:
    sink = RecordingSink()
    pipeline = PushBackPipeline(sink=sink, load_lineage=_lineage)

    outcome = pipeline.handle(_event(kind))

    assert outcome.trail == [
        PushState.RECEIVED,
        PushState.RESOLVING,
        PushState.TRANSFORMED,
        PushState.PUSHED,
    ]
    assert sink.upserts == ["ACM-M1-INT-v1.0"]
    assert outcome.error is None


def test_delete_event_sends_exactly_one_deletion() -> None:
    sink = RecordingSink()
    pipeline = PushBackPipeline(sink=sink, load_lineage=_unreachable_loader)

    outcome = pipeline.handle(_event(ChangeKind.DELETED))

    assert outcome.trail == [PushState.RECEIVED, PushState.PUSHED]
    assert sink.calls == [("delete", "ACM-M1-INT-v1.0", None)]


def test_missing_lineage_fails_without_push() -> None:
    sink = RecordingSink()
    pipeline = PushBackPipeline(sink=sink, load_lineage=lambda _version_id: None)

    outcome = pipeline.handle(_event(ChangeKind.INSERTED))

    assert outcome.state is PushState.FAILED
    assert outcome.trail[-2] is PushState.RESOLVING
    assert "not found" in (outcome.error or "")
    assert sink.calls == []


def test_sink_failure_is_terminal_and_not_retried() -> None:
    sink = RecordingSink(fail_codes={"ACM-M1-INT-v1.0"})
    pipeline = PushBackPipeline(sink=sink, load_lineage=_lineage)

    outcome = pipeline.handle(_event(ChangeKind.UPDATED))

    assert outcome.state is PushState.FAILED
    assert outcome.trail[-2] is PushState.TRANSFORMED
    assert len(sink.calls) == 1


def test_unexpected_errors_are_contained() -> None:
    def broken_loader(_version_id: int) -> ContentVersionLineage | None:
        raise RuntimeError("database went away")

    pipeline = PushBackPipeline(sink=RecordingSink(), load_lineage=broken_loader)

    outcome = pipeline.handle(_event(ChangeKind.INSERTED))

    assert outcome.state is PushState.FAILED
    assert outcome.error == "database went away"
