"""Application services for keeping the content sheet and the catalog in step."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from coursesync.domain.errors import ContentVersionNotFoundError
from coursesync.domain.model import ChangeKind
from coursesync.domain.ports import ChangeEvent, ContentVersionSnapshot
from coursesync.domain.reconciliation import ReconciliationEngine

if TYPE_CHECKING:
    from collections.abc import Callable

    from coursesync.domain.model import ContentVersionLineage
    from coursesync.domain.ports import CatalogUnitOfWork, RowSource
    from coursesync.domain.push_back import (
        LineageLoader,
        PushBackDispatcher,
        PushBackPipeline,
        PushOutcome,
    )
    from coursesync.domain.reconciliation import ReconciliationSummary

    type UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]

log = getLogger(__name__)


def reconcile_catalog(
    *,
    source: RowSource,
    unit_of_work_factory: UnitOfWorkFactory,
) -> ReconciliationSummary:
    """Fetch every sheet row and reconcile it into the store in one transaction.

    The fetch happens before a unit of work is opened, so a
    ``SourceUnavailableError`` aborts the run without any write.
    """

    rows = list(source())
    log.info("Fetched %s rows from the sheet", len(rows))

    with unit_of_work_factory() as uow:
        summary = ReconciliationEngine(uow.repositories).reconcile(rows)
        uow.commit()

    for line in summary.describe():
        log.info("Reconciliation %s", line)
    return summary


def lineage_loader(unit_of_work_factory: UnitOfWorkFactory) -> LineageLoader:
    """Return a loader that reads one lineage per call in its own unit of work."""

    def load(version_id: int) -> ContentVersionLineage | None:
        with unit_of_work_factory() as uow:
            return uow.repositories.content_versions.get_lineage(version_id)

    return load


def push_content_version(
    version_code: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    pipeline: PushBackPipeline,
) -> PushOutcome:
    """Push one stored content version to the sheet on demand."""

    with unit_of_work_factory() as uow:
        version = uow.repositories.content_versions.get_by_code(version_code)
        if version is None:
            raise ContentVersionNotFoundError(version_code)
        snapshot = ContentVersionSnapshot.of(version)

    return pipeline.handle(ChangeEvent(kind=ChangeKind.UPDATED, row=snapshot))


def update_content_version(
    version_code: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    status: str | None = None,
    drive_link: str | None = None,
    notes: str | None = None,
) -> ContentVersionSnapshot:
    """Change the store-owned attributes of a content version; ``None`` leaves a value as is."""

    with unit_of_work_factory() as uow:
        version = uow.repositories.content_versions.get_by_code(version_code)
        if version is None:
            raise ContentVersionNotFoundError(version_code)
        if status is not None:
            version.status = status
        if drive_link is not None:
            version.drive_link = drive_link
        if notes is not None:
            version.notes = notes
        uow.commit()
        snapshot = ContentVersionSnapshot.of(version)

    log.info("Updated content version %s", version_code)
    return snapshot


def delete_content_version(
    version_code: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
) -> ContentVersionSnapshot:
    """Delete a content version; returns the row as it was before deletion."""

    with unit_of_work_factory() as uow:
        repository = uow.repositories.content_versions
        version = repository.get_by_code(version_code)
        if version is None:
            raise ContentVersionNotFoundError(version_code)
        snapshot = ContentVersionSnapshot.of(version)
        repository.remove(version)
        uow.commit()

    log.info("Deleted content version %s", version_code)
    return snapshot


def relay_change_outbox(
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    dispatcher: PushBackDispatcher,
    batch_size: int,
) -> int:
    """Hand one batch of outbox changes to ``dispatcher`` and acknowledge it.

    The batch is acknowledged only after every push in it has finished, so a
    crash in between delivers the same changes again on the next run. Returns
    the number of changes relayed.
    """

    with unit_of_work_factory() as uow:
        entries = uow.repositories.changes.fetch_pending(batch_size)
    if not entries:
        return 0

    for entry in entries:
        dispatcher.submit(entry.event)
    dispatcher.drain()

    with unit_of_work_factory() as uow:
        uow.repositories.changes.mark_consumed([entry.entry_id for entry in entries])
        uow.commit()

    log.debug("Relayed %s outbox changes up to #%s", len(entries), entries[-1].entry_id)
    return len(entries)


def discard_change_backlog(*, unit_of_work_factory: UnitOfWorkFactory, batch_size: int) -> int:
    """Acknowledge every waiting outbox change without pushing it."""

    discarded = 0
    with unit_of_work_factory() as uow:
        outbox = uow.repositories.changes
        while entries := outbox.fetch_pending(batch_size):
            outbox.mark_consumed([entry.entry_id for entry in entries])
            discarded += len(entries)
        uow.commit()

    if discarded:
        log.info("Skipped %s changes recorded before watching started", discarded)
    return discarded
