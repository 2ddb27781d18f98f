from __future__ import annotations

from coursesync.adapters.sheets import (
    GetAllDataResponse,
    OutboundRowPayload,
    outbound_payload,
    parse_sheet_row,
)
from coursesync.domain.model import OutboundRow


def test_sheet_row_payload_uses_header_labels_and_blanks_to_none() -> None:
    response = GetAllDataResponse.model_validate(
        {
            "success": True,
            "data": [
                {
                    "Client Name": " Acme ",
                    "Programme": "Leadership",
                    "Cohort": "",
                    "Module No.": 1,
                    "Module Name": "M1",
                    "Class No.": 2.0,
                    "Class Name": "Intro",
                    "Version": "v1",
                    "Delivery Date": "2024-05-01",
                    "Unrelated Column": "ignored",
                }
            ],
        }
    )

    row = parse_sheet_row(response.data[0])

    assert row.client_name == "Acme"
    assert row.cohort is None
    assert row.module_no == "1"
    assert row.class_no == "2"
    assert row.status is None
    assert row.link is None


def test_missing_data_defaults_to_empty_list() -> None:
    response = GetAllDataResponse.model_validate({"success": False, "message": "quota"})

    assert response.data == []
    assert response.message == "quota"


def test_outbound_payload_serializes_sheet_columns() -> None:
    row = OutboundRow(
        version_code="ACM-M1-INT-v1.0",
        status="Open",
        client_name="Acme",
        programme="Leadership",
        cohort="Default",
        module_no="1",
        module_name="M1",
        class_no="1",
        material_type="Slide Deck",
        class_name="Intro",
        version="v1.0",
        delivery_method="Virtual",
        delivery_date="",
        notes="",
        link="",
    )

    payload = outbound_payload(row)

    assert payload["Version Code"] == "ACM-M1-INT-v1.0"
    assert payload["Client Name"] == "Acme"
    assert payload["Module No."] == "1"
    assert payload["Type"] == "Slide Deck"
    assert payload["Delivery Method"] == "Virtual"
    assert payload["Delivery Date"] == ""
    assert set(payload) == {
        field.serialization_alias for field in OutboundRowPayload.model_fields.values()
    }
