"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from coursesync.adapters.sqlalchemy.mappings import (
    client_pathway_table,
    client_table,
    content_version_change_table,
    content_version_table,
    course_class_table,
    module_table,
    programme_table,
)
from coursesync.domain.errors import StoreWriteConflictError
from coursesync.domain.model import (
    ChangeKind,
    Client,
    ClientPathway,
    ContentVersion,
    ContentVersionLineage,
    CourseClass,
    Entity,
    Module,
    Programme,
)
from coursesync.domain.ports import ChangeEvent, ContentVersionSnapshot, OutboxEntry

if TYPE_CHECKING:
    from collections.abc import Collection

    from sqlalchemy import Table
    from sqlalchemy.orm import Session

log = getLogger(__name__)


class SqlAlchemyCatalogRepository[TEntity: Entity, TIdentity: tuple[object, ...]]:
    """Find-by-identity and savepoint-guarded insert for one catalog table.

    ``identity_columns`` lists the table columns making up the entity's identity
    tuple, in the same order as ``Entity.identity``.
    """

    table: ClassVar[Table]
    identity_columns: ClassVar[tuple[str, ...]]

    def __init__(self, session: Session, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    def find_ids(self, identities: Collection[TIdentity]) -> dict[TIdentity, int]:
        wanted = set(identities)
        if not wanted:
            return {}

        columns = [self.table.c[name] for name in self.identity_columns]
        stmt = select(self.table.c.id, *columns)
        for position, column in enumerate(columns):
            stmt = stmt.where(column.in_({identity[position] for identity in wanted}))

        # each column is filtered independently, so drop cross-product matches
        found: dict[TIdentity, int] = {}
        for surrogate, *values in self.session.execute(stmt).tuples():
            identity = tuple(values)
            if identity in wanted:
                found[identity] = surrogate  # type: ignore[index]
        return found

    def add(self, entity: TEntity) -> int:
        try:
            with self.session.begin_nested():
                self.session.add(entity)
                self.session.flush()
        except IntegrityError as exc:
            log.debug("Insert of %s %r rejected: %s", entity.entity_type, entity.identity, exc)
            raise StoreWriteConflictError(entity.entity_type, entity.identity) from exc
        return entity.require_id()

    def count(self) -> int:
        stmt = select(func.count()).select_from(self.table)
        return int(self.session.execute(stmt).scalar_one())


class SqlAlchemyClientRepository(SqlAlchemyCatalogRepository[Client, tuple[str]]):
    table = client_table
    identity_columns = ("client_name",)

    def __init__(self, session: Session) -> None:
        super().__init__(session, Client)


class SqlAlchemyProgrammeRepository(SqlAlchemyCatalogRepository[Programme, tuple[str]]):
    table = programme_table
    identity_columns = ("programme_name",)

    def __init__(self, session: Session) -> None:
        super().__init__(session, Programme)


class SqlAlchemyModuleRepository(SqlAlchemyCatalogRepository[Module, tuple[int, str]]):
    table = module_table
    identity_columns = ("programme_id", "module_name")

    def __init__(self, session: Session) -> None:
        super().__init__(session, Module)


class SqlAlchemyClassRepository(SqlAlchemyCatalogRepository[CourseClass, tuple[int, str]]):
    table = course_class_table
    identity_columns = ("module_id", "class_name")

    def __init__(self, session: Session) -> None:
        super().__init__(session, CourseClass)


class SqlAlchemyPathwayRepository(
    SqlAlchemyCatalogRepository[ClientPathway, tuple[int, int, str]]
):
    table = client_pathway_table
    identity_columns = ("client_id", "programme_id", "cohort_name")

    def __init__(self, session: Session) -> None:
        super().__init__(session, ClientPathway)


class SqlAlchemyContentVersionRepository(
    SqlAlchemyCatalogRepository[ContentVersion, tuple[int, int, str]]
):
    table = content_version_table
    identity_columns = ("class_id", "pathway_id", "version_number")

    def __init__(self, session: Session) -> None:
        super().__init__(session, ContentVersion)

    def get(self, version_id: int) -> ContentVersion | None:
        return self.session.get(ContentVersion, version_id)

    def get_by_code(self, version_code: str) -> ContentVersion | None:
        stmt = (
            select(ContentVersion)
            .where(content_version_table.c.version_code == version_code)
            .order_by(content_version_table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def get_lineage(self, version_id: int) -> ContentVersionLineage | None:
        cv = content_version_table
        klass = course_class_table
        module = module_table
        programme = programme_table
        pathway = client_pathway_table
        client = client_table

        stmt = (
            select(
                cv.c.id.label("version_id"),
                cv.c.version_code,
                cv.c.version_number,
                cv.c.status,
                cv.c.drive_link,
                cv.c.notes,
                klass.c.class_name,
                klass.c.class_number,
                module.c.module_name,
                module.c.module_number,
                programme.c.programme_name,
                pathway.c.cohort_name,
                client.c.client_name,
            )
            .select_from(cv)
            .outerjoin(klass, klass.c.id == cv.c.class_id)
            .outerjoin(module, module.c.id == klass.c.module_id)
            .outerjoin(programme, programme.c.id == module.c.programme_id)
            .outerjoin(pathway, pathway.c.id == cv.c.pathway_id)
            .outerjoin(client, client.c.id == pathway.c.client_id)
            .where(cv.c.id == version_id)
        )
        row = self.session.execute(stmt).mappings().one_or_none()
        if row is None:
            return None
        return ContentVersionLineage(**row)

    def remove(self, entity: ContentVersion) -> None:
        self.session.delete(entity)
        self.session.flush()


class SqlAlchemyChangeOutbox:
    """Reads and acknowledges rows the content_version triggers wrote to the outbox."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def fetch_pending(self, limit: int) -> list[OutboxEntry]:
        outbox = content_version_change_table
        stmt = (
            select(outbox)
            .where(outbox.c.consumed_at.is_(None))
            .order_by(outbox.c.id)
            .limit(limit)
        )
        return [
            OutboxEntry(
                entry_id=row.id,
                event=ChangeEvent(
                    kind=ChangeKind(row.kind),
                    row=ContentVersionSnapshot(
                        version_id=row.version_id,
                        version_code=row.version_code,
                        class_id=row.class_id,
                        pathway_id=row.pathway_id,
                        version_number=row.version_number,
                        status=row.status,
                        delivery_method=row.delivery_method,
                        drive_link=row.drive_link,
                        notes=row.notes,
                    ),
                ),
            )
            for row in self.session.execute(stmt)
        ]

    def mark_consumed(self, entry_ids: Collection[int]) -> None:
        if not entry_ids:
            return
        outbox = content_version_change_table
        stmt = (
            update(outbox)
            .where(outbox.c.id.in_(list(entry_ids)))
            .values(consumed_at=datetime.now(UTC))
        )
        self.session.execute(stmt)

    def count_pending(self) -> int:
        outbox = content_version_change_table
        stmt = select(func.count()).select_from(outbox).where(outbox.c.consumed_at.is_(None))
        return int(self.session.execute(stmt).scalar_one())


if TYPE_CHECKING:
    from coursesync.domain.ports import ChangeOutbox

    _outbox_check: ChangeOutbox = SqlAlchemyChangeOutbox(session=None)  # type: ignore[arg-type]
