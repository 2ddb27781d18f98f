from __future__ import annotations

import pytest

from coursesync.domain.errors import TransformError
from coursesync.domain.model import ContentVersionLineage
from coursesync.domain.push_back import project_lineage
from coursesync.domain.reconciliation import ReconciliationEngine
from tests.helpers.catalog import FakeCatalogStore
from tests.helpers.rows import make_row


def _lineage(**overrides: object) -> ContentVersionLineage:
    values: dict[str, object] = {
        "version_id": 7,
        "version_code": "ACM-M1-INT-v1.0",
        "version_number": "v1.0",
        "status": "Open",
        "drive_link": "https://drive/x",
        "notes": None,
        "class_name": "Intro",
        "class_number": 1,
        "module_name": "M1",
        "module_number": 1,
        "programme_name": "Leadership",
        "cohort_name": "Default",
        "client_name": "Acme",
    }
    values.update(overrides)
    return ContentVersionLineage(**values)  # type: ignore[arg-type]


def test_projection_fills_every_column() -> None:
    row = project_lineage(_lineage())

    assert row.version_code == "ACM-M1-INT-v1.0"
    assert row.status == "Open"
    assert row.client_name == "Acme"
    assert row.programme == "Leadership"
    assert row.cohort == "Default"
    assert row.module_no == "1"
    assert row.class_no == "1"
    assert row.version == "v1.0"
    assert row.material_type == "Slide Deck"
    assert row.delivery_method == "Virtual"
    assert row.delivery_date == ""
    assert row.notes == ""
    assert row.link == "https://drive/x"


def test_missing_values_become_empty_strings() -> None:
    row = project_lineage(
        _lineage(status=None, module_number=None, class_number=None, client_name=None)
    )

    assert row.status == "Open"
    assert row.module_no == ""
    assert row.class_no == ""
    assert row.client_name == ""


def test_blank_code_cannot_be_projected() -> None:
    with pytest.raises(TransformError):
        project_lineage(_lineage(version_code="  "))


def test_round_trip_replaces_type_and_delivery_method() -> None:
    store = FakeCatalogStore()
    ReconciliationEngine(store.repositories()).reconcile(
        [make_row(material_type="Workbook", delivery_method="In person")]
    )
    version = store.content_versions.all()[0]
    klass = store.classes.all()[0]
    lineage = store.content_versions.get_lineage(version.require_id())
    assert lineage is not None

    row = project_lineage(lineage)

    # the store keeps the sheet's values; the pushed row does not
    assert (klass.material_type, version.delivery_method) == ("Workbook", "In person")
    assert (row.material_type, row.delivery_method) == ("Slide Deck", "Virtual")
