"""Application orchestration entry points."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from coursesync.adapters.sheets import SheetsRowSink, SheetsRowSource
from coursesync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    is_started,
    startup,
)
from coursesync.config import get_sync_config
from coursesync.domain import data_integration
from coursesync.domain.model import EntityType
from coursesync.domain.push_back import PushBackDispatcher, PushBackPipeline

if TYPE_CHECKING:
    from coursesync.domain.ports import (
        CatalogUnitOfWork,
        ChangeListener,
        ContentVersionSnapshot,
        RowSink,
        RowSource,
    )
    from coursesync.domain.push_back import PushOutcome
    from coursesync.domain.reconciliation import ReconciliationSummary

log = getLogger(__name__)


class CatalogUnitOfWorkFactory(Protocol):
    def __call__(self, *, change_listener: ChangeListener | None = None) -> CatalogUnitOfWork: ...


@dataclass(slots=True)
class SheetSyncResult:
    summary: ReconciliationSummary
    pushes: list[PushOutcome] = field(default_factory=list)

    @property
    def push_failures(self) -> list[PushOutcome]:
        return [outcome for outcome in self.pushes if not outcome.pushed]


@dataclass(slots=True)
class ChangeResult:
    snapshot: ContentVersionSnapshot
    pushes: list[PushOutcome] = field(default_factory=list)


@dataclass(slots=True)
class WatchStats:
    relayed: int = 0
    skipped: int = 0
    pushed: int = 0
    push_failures: int = 0

    def record(self, relayed: int, pushes: list[PushOutcome]) -> None:
        self.relayed += relayed
        failures = sum(1 for outcome in pushes if not outcome.pushed)
        self.pushed += len(pushes) - failures
        self.push_failures += failures


def ensure_started() -> None:
    """Start the SQLAlchemy adapter unless a caller already did."""

    if not is_started():
        startup()


def _bind(
    factory: CatalogUnitOfWorkFactory,
    listener: ChangeListener | None = None,
) -> Callable[[], CatalogUnitOfWork]:
    def build() -> CatalogUnitOfWork:
        return factory(change_listener=listener)

    return build


@contextmanager
def push_back_dispatcher(
    *,
    sink: RowSink | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory = SqlAlchemyCatalogUnitOfWork,
    workers: int | None = None,
) -> Iterator[PushBackDispatcher]:
    """Run a push-back worker pool for the duration of the block; closing drains it."""

    pipeline = PushBackPipeline(
        sink=sink or SheetsRowSink(),
        load_lineage=data_integration.lineage_loader(_bind(unit_of_work_factory)),
    )
    dispatcher = PushBackDispatcher(
        pipeline.handle,
        workers=workers or get_sync_config().push_workers,
    )
    with dispatcher:
        yield dispatcher


def reconcile_sheet(
    *,
    source: RowSource | None = None,
    sink: RowSink | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory = SqlAlchemyCatalogUnitOfWork,
    push_back: bool = False,
) -> SheetSyncResult:
    """Reconcile the sheet into the store, optionally pushing created versions back."""

    ensure_started()
    effective_source = source or SheetsRowSource()
    log.info("Starting sheet reconciliation (push_back=%s)", push_back)

    if not push_back:
        summary = data_integration.reconcile_catalog(
            source=effective_source,
            unit_of_work_factory=_bind(unit_of_work_factory),
        )
        return SheetSyncResult(summary=summary)

    with push_back_dispatcher(sink=sink, unit_of_work_factory=unit_of_work_factory) as dispatcher:
        summary = data_integration.reconcile_catalog(
            source=effective_source,
            unit_of_work_factory=_bind(unit_of_work_factory, dispatcher.submit),
        )
    result = SheetSyncResult(summary=summary, pushes=dispatcher.outcomes)
    log.info(
        "Finished sheet reconciliation: created=%s, skipped=%s, pushed=%s, push_failures=%s",
        summary.created,
        summary.skipped,
        len(result.pushes) - len(result.push_failures),
        len(result.push_failures),
    )
    return result


def push_content_version(
    version_code: str,
    *,
    sink: RowSink | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory = SqlAlchemyCatalogUnitOfWork,
) -> PushOutcome:
    ensure_started()
    factory = _bind(unit_of_work_factory)
    pipeline = PushBackPipeline(
        sink=sink or SheetsRowSink(),
        load_lineage=data_integration.lineage_loader(factory),
    )
    return data_integration.push_content_version(
        version_code,
        unit_of_work_factory=factory,
        pipeline=pipeline,
    )


def update_content_version(
    version_code: str,
    *,
    status: str | None = None,
    drive_link: str | None = None,
    notes: str | None = None,
    sink: RowSink | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory = SqlAlchemyCatalogUnitOfWork,
) -> ChangeResult:
    ensure_started()
    with push_back_dispatcher(sink=sink, unit_of_work_factory=unit_of_work_factory) as dispatcher:
        snapshot = data_integration.update_content_version(
            version_code,
            unit_of_work_factory=_bind(unit_of_work_factory, dispatcher.submit),
            status=status,
            drive_link=drive_link,
            notes=notes,
        )
    return ChangeResult(snapshot=snapshot, pushes=dispatcher.outcomes)


def delete_content_version(
    version_code: str,
    *,
    sink: RowSink | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory = SqlAlchemyCatalogUnitOfWork,
) -> ChangeResult:
    ensure_started()
    with push_back_dispatcher(sink=sink, unit_of_work_factory=unit_of_work_factory) as dispatcher:
        snapshot = data_integration.delete_content_version(
            version_code,
            unit_of_work_factory=_bind(unit_of_work_factory, dispatcher.submit),
        )
    return ChangeResult(snapshot=snapshot, pushes=dispatcher.outcomes)


def catalog_stats(
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory = SqlAlchemyCatalogUnitOfWork,
) -> dict[EntityType, int]:
    """Return the number of stored records per entity type."""

    ensure_started()
    with _bind(unit_of_work_factory)() as uow:
        repositories = uow.repositories
        return {
            EntityType.CLIENT: repositories.clients.count(),
            EntityType.PROGRAMME: repositories.programmes.count(),
            EntityType.MODULE: repositories.modules.count(),
            EntityType.CLASS: repositories.classes.count(),
            EntityType.PATHWAY: repositories.pathways.count(),
            EntityType.CONTENT_VERSION: repositories.content_versions.count(),
        }


def watch_changes(
    *,
    sink: RowSink | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory = SqlAlchemyCatalogUnitOfWork,
    poll_interval: float | None = None,
    batch_size: int | None = None,
    skip_backlog: bool = False,
    until_idle: bool = False,
    stop: threading.Event | None = None,
) -> WatchStats:
    """Push every content-version change any writer commits, until stopped.

    Changes are read from the store's change outbox in commit order, so
    writes made outside this process are pushed as well. With ``until_idle``
    the watcher returns once the outbox is empty instead of polling again.
    """

    ensure_started()
    config = get_sync_config()
    interval = config.watch_interval_seconds if poll_interval is None else poll_interval
    size = batch_size or config.watch_batch_size
    factory = _bind(unit_of_work_factory)
    stop = stop or threading.Event()
    stats = WatchStats()

    if skip_backlog:
        stats.skipped = data_integration.discard_change_backlog(
            unit_of_work_factory=factory,
            batch_size=size,
        )

    log.info("Watching content-version changes (poll every %ss)", interval)
    with push_back_dispatcher(sink=sink, unit_of_work_factory=unit_of_work_factory) as dispatcher:
        while not stop.is_set():
            relayed = data_integration.relay_change_outbox(
                unit_of_work_factory=factory,
                dispatcher=dispatcher,
                batch_size=size,
            )
            stats.record(relayed, dispatcher.take_outcomes())
            if relayed:
                continue
            if until_idle:
                break
            stop.wait(interval)

    log.info(
        "Stopped watching: relayed=%s, pushed=%s, push_failures=%s",
        stats.relayed,
        stats.pushed,
        stats.push_failures,
    )
    return stats
