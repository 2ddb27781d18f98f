"""SQLAlchemy-backed unit of work for the curriculum catalog."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from coursesync.adapters.sqlalchemy.change_feed import SessionChangeFeed
from coursesync.adapters.sqlalchemy.mappings import start_mappers
from coursesync.adapters.sqlalchemy.migrations import upgrade_head
from coursesync.adapters.sqlalchemy.repositories import (
    SqlAlchemyChangeOutbox,
    SqlAlchemyClassRepository,
    SqlAlchemyClientRepository,
    SqlAlchemyContentVersionRepository,
    SqlAlchemyModuleRepository,
    SqlAlchemyPathwayRepository,
    SqlAlchemyProgrammeRepository,
)
from coursesync.config.storage import get_database_config
from coursesync.domain.ports import CatalogRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Connection, Engine

    from coursesync.domain.ports import ChangeListener


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call coursesync.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def _set_autocommit_driver(dbapi_connection: Any, _connection_record: object) -> None:
    dbapi_connection.isolation_level = None


def _emit_begin(connection: Connection) -> None:
    connection.exec_driver_sql("BEGIN")


def enable_sqlite_savepoints(engine: Engine) -> Engine:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINTs nest inside the outer transaction.

    pysqlite otherwise defers BEGIN until the first DML statement, which turns a
    leading SAVEPOINT into the outer transaction.
    """

    if engine.dialect.name != "sqlite" or event.contains(engine, "begin", _emit_begin):
        return engine
    event.listen(engine, "connect", _set_autocommit_driver)
    event.listen(engine, "begin", _emit_begin)
    return engine


def create_catalog_engine(database_uri: str | None = None) -> Engine:
    uri = database_uri or get_database_config().uri
    return enable_sqlite_savepoints(create_engine(uri, future=True))


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, migrate the schema and build the session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is not None:
        resolved_engine = enable_sqlite_savepoints(engine)
    else:
        resolved_engine = create_catalog_engine(database_uri)
    start_mappers()
    upgrade_head(engine=resolved_engine)
    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections."""

    def __init__(self, *, change_listener: ChangeListener | None = None) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None
        self._change_listener = change_listener
        self._change_feed: SessionChangeFeed | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        if self._change_listener is not None:
            self._change_feed = SessionChangeFeed(self._change_listener).attach(self.session)
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        if self._change_feed is not None:
            self._change_feed.detach()
            self._change_feed = None
        self.session = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyCatalogUnitOfWork(BaseSqlAlchemyUnitOfWork[CatalogRepositories]):
    """Unit of work over every catalog repository.

    Pass ``change_listener`` to receive content-version changes after each commit.
    """

    def _build_repositories(self, session: Session) -> CatalogRepositories:
        return CatalogRepositories(
            clients=SqlAlchemyClientRepository(session),
            programmes=SqlAlchemyProgrammeRepository(session),
            modules=SqlAlchemyModuleRepository(session),
            classes=SqlAlchemyClassRepository(session),
            pathways=SqlAlchemyPathwayRepository(session),
            content_versions=SqlAlchemyContentVersionRepository(session),
            changes=SqlAlchemyChangeOutbox(session),
        )


if TYPE_CHECKING:
    from coursesync.domain.ports import CatalogUnitOfWork

    _uow_check: CatalogUnitOfWork = SqlAlchemyCatalogUnitOfWork()
