"""Content-version change notifications derived from session flush/commit events."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import event

from coursesync.domain.model import ChangeKind, ContentVersion
from coursesync.domain.ports import ChangeEvent, ContentVersionSnapshot

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, SessionTransaction

    from coursesync.domain.ports import ChangeListener

log = getLogger(__name__)


class SessionChangeFeed:
    """Buffer content-version changes per flush and publish them after the root commit.

    Nothing is published for a transaction that is rolled back or closed without
    committing. Events are published in flush order.
    """

    def __init__(self, listener: ChangeListener) -> None:
        self._listener = listener
        self._pending: list[ChangeEvent] = []
        self._committed = False
        self._savepoints: list[int] = []
        self._session: Session | None = None

    def attach(self, session: Session) -> SessionChangeFeed:
        event.listen(session, "after_flush", self._after_flush)
        event.listen(session, "after_commit", self._after_commit)
        event.listen(session, "after_transaction_create", self._after_transaction_create)
        event.listen(session, "after_transaction_end", self._after_transaction_end)
        self._session = session
        return self

    def detach(self) -> None:
        if self._session is None:
            return
        event.remove(self._session, "after_flush", self._after_flush)
        event.remove(self._session, "after_commit", self._after_commit)
        event.remove(self._session, "after_transaction_create", self._after_transaction_create)
        event.remove(self._session, "after_transaction_end", self._after_transaction_end)
        self._session = None
        self._pending.clear()
        self._savepoints.clear()

    def _after_flush(self, session: Session, _flush_context: object) -> None:
        for instance in session.new:
            if isinstance(instance, ContentVersion):
                self._record(ChangeKind.INSERTED, instance)
        for instance in session.dirty:
            if isinstance(instance, ContentVersion) and session.is_modified(instance):
                self._record(ChangeKind.UPDATED, instance)
        for instance in session.deleted:
            if isinstance(instance, ContentVersion):
                self._record(ChangeKind.DELETED, instance)

    def _after_commit(self, _session: Session) -> None:
        self._committed = True

    def _after_transaction_create(
        self, _session: Session, transaction: SessionTransaction
    ) -> None:
        if transaction.nested:
            self._savepoints.append(len(self._pending))

    def _after_transaction_end(self, _session: Session, transaction: SessionTransaction) -> None:
        if transaction.parent is not None:
            if transaction.nested:
                # savepoint release also fires after_commit; a rollback drops its changes
                mark = self._savepoints.pop() if self._savepoints else len(self._pending)
                if not self._committed:
                    del self._pending[mark:]
                self._committed = False
            return

        events, self._pending = self._pending, []
        committed, self._committed = self._committed, False
        if not committed:
            if events:
                log.debug("Discarding %s uncommitted content-version changes", len(events))
            return
        for change in events:
            try:
                self._listener(change)
            except Exception:
                log.exception("Change listener failed for %s %s", change.kind, change.version_code)

    def _record(self, kind: ChangeKind, version: ContentVersion) -> None:
        self._pending.append(ChangeEvent(kind=kind, row=ContentVersionSnapshot.of(version)))
