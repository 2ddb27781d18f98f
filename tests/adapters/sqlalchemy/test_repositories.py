from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from coursesync.adapters.sqlalchemy.repositories import (
    SqlAlchemyChangeOutbox,
    SqlAlchemyClassRepository,
    SqlAlchemyClientRepository,
    SqlAlchemyContentVersionRepository,
    SqlAlchemyModuleRepository,
    SqlAlchemyPathwayRepository,
    SqlAlchemyProgrammeRepository,
)
from coursesync.domain.errors import StoreWriteConflictError
from coursesync.domain.model import (
    ChangeKind,
    Client,
    ClientPathway,
    ContentVersion,
    CourseClass,
    Module,
    Programme,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def _seed_chain(session: Session) -> dict[str, int]:
    client_id = SqlAlchemyClientRepository(session).add(Client(client_name="Acme"))
    programme_id = SqlAlchemyProgrammeRepository(session).add(
        Programme(programme_name="Leadership")
    )
    module_id = SqlAlchemyModuleRepository(session).add(
        Module(programme_id=programme_id, module_name="M1", module_number=1)
    )
    class_id = SqlAlchemyClassRepository(session).add(
        CourseClass(module_id=module_id, class_name="Intro", class_number=1)
    )
    pathway_id = SqlAlchemyPathwayRepository(session).add(
        ClientPathway(client_id=client_id, programme_id=programme_id)
    )
    return {
        "client": client_id,
        "programme": programme_id,
        "module": module_id,
        "class": class_id,
        "pathway": pathway_id,
    }


def test_add_assigns_surrogate_keys(sqlite_session: Session) -> None:
    ids = _seed_chain(sqlite_session)

    assert all(isinstance(value, int) for value in ids.values())
    assert SqlAlchemyClientRepository(sqlite_session).count() == 1


def test_duplicate_identity_raises_conflict_and_keeps_transaction(
    sqlite_session: Session,
) -> None:
    repository = SqlAlchemyClientRepository(sqlite_session)
    first_id = repository.add(Client(client_name="Acme"))

    with pytest.raises(StoreWriteConflictError) as excinfo:
        repository.add(Client(client_name="Acme"))

    assert excinfo.value.identity == ("Acme",)
    # the savepoint rolled back alone; earlier work is still usable
    repository.add(Client(client_name="Beta"))
    sqlite_session.commit()
    assert repository.find_ids([("Acme",), ("Beta",)])[("Acme",)] == first_id
    assert repository.count() == 2


def test_find_ids_filters_composite_cross_matches(sqlite_session: Session) -> None:
    programmes = SqlAlchemyProgrammeRepository(sqlite_session)
    p1 = programmes.add(Programme(programme_name="Leadership"))
    p2 = programmes.add(Programme(programme_name="Sales"))
    modules = SqlAlchemyModuleRepository(sqlite_session)
    m1 = modules.add(Module(programme_id=p1, module_name="M1"))
    modules.add(Module(programme_id=p2, module_name="M2"))

    found = modules.find_ids([(p1, "M1"), (p1, "M2"), (p2, "M1")])

    assert found == {(p1, "M1"): m1}


def test_find_ids_with_no_identities_skips_query(sqlite_session: Session) -> None:
    assert SqlAlchemyClientRepository(sqlite_session).find_ids([]) == {}


def test_content_version_lookup_and_lineage(sqlite_session: Session) -> None:
    ids = _seed_chain(sqlite_session)
    repository = SqlAlchemyContentVersionRepository(sqlite_session)
    version_id = repository.add(
        ContentVersion(
            class_id=ids["class"],
            pathway_id=ids["pathway"],
            version_code="ACM-M1-INT-v1.0",
            drive_link="https://drive/x",
        )
    )

    found = repository.get_by_code("ACM-M1-INT-v1.0")
    lineage = repository.get_lineage(version_id)

    assert found is not None
    assert found.id == version_id
    assert lineage is not None
    assert lineage.client_name == "Acme"
    assert lineage.programme_name == "Leadership"
    assert lineage.module_number == 1
    assert lineage.class_name == "Intro"
    assert lineage.cohort_name == "Default"
    assert lineage.drive_link == "https://drive/x"
    assert repository.get_lineage(version_id + 100) is None
    assert repository.get_by_code("missing") is None


def test_remove_deletes_content_version(sqlite_session: Session) -> None:
    ids = _seed_chain(sqlite_session)
    repository = SqlAlchemyContentVersionRepository(sqlite_session)
    repository.add(
        ContentVersion(
            class_id=ids["class"], pathway_id=ids["pathway"], version_code="ACM-M1-INT-v1.0"
        )
    )
    version = repository.get_by_code("ACM-M1-INT-v1.0")
    assert version is not None

    repository.remove(version)

    assert repository.count() == 0


def test_outbox_records_every_write_in_commit_order(sqlite_session: Session) -> None:
    ids = _seed_chain(sqlite_session)
    repository = SqlAlchemyContentVersionRepository(sqlite_session)
    repository.add(
        ContentVersion(
            class_id=ids["class"], pathway_id=ids["pathway"], version_code="ACM-M1-INT-v1.0"
        )
    )
    version = repository.get_by_code("ACM-M1-INT-v1.0")
    assert version is not None
    version.notes = "moved"
    sqlite_session.flush()
    repository.remove(version)

    entries = SqlAlchemyChangeOutbox(sqlite_session).fetch_pending(10)

    assert [entry.event.kind for entry in entries] == [
        ChangeKind.INSERTED,
        ChangeKind.UPDATED,
        ChangeKind.DELETED,
    ]
    assert [entry.entry_id for entry in entries] == sorted(entry.entry_id for entry in entries)
    assert entries[1].event.row.notes == "moved"
    assert entries[2].event.version_code == "ACM-M1-INT-v1.0"
    assert entries[2].event.row.class_id == ids["class"]


def test_consumed_outbox_entries_are_not_fetched_again(sqlite_session: Session) -> None:
    ids = _seed_chain(sqlite_session)
    repository = SqlAlchemyContentVersionRepository(sqlite_session)
    for code in ("ACM-M1-INT-v1.0", "ACM-M1-INT-v2.0"):
        repository.add(
            ContentVersion(
                class_id=ids["class"],
                pathway_id=ids["pathway"],
                version_code=code,
                version_number=code.rsplit("-", 1)[1],
            )
        )
    outbox = SqlAlchemyChangeOutbox(sqlite_session)
    first = outbox.fetch_pending(1)

    outbox.mark_consumed([entry.entry_id for entry in first])
    outbox.mark_consumed([])

    assert outbox.count_pending() == 1
    remaining = outbox.fetch_pending(10)
    assert [entry.event.version_code for entry in remaining] == ["ACM-M1-INT-v2.0"]
