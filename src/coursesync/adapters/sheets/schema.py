"""Pydantic models describing the Apps Script web app payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if value is None:
        return None
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int | float):
        # spreadsheet cells holding numbers arrive as JSON numbers
        value = str(int(value)) if float(value).is_integer() else str(value)
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class SheetsBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SheetRowPayload(SheetsBaseModel):
    """One row of ``getAllData``, keyed by the sheet's header labels."""

    client_name: str | None = Field(default=None, alias="Client Name")
    programme: str | None = Field(default=None, alias="Programme")
    programme_type: str | None = Field(default=None, alias="Programme Type")
    cohort: str | None = Field(default=None, alias="Cohort")
    module_no: str | None = Field(default=None, alias="Module No.")
    module_name: str | None = Field(default=None, alias="Module Name")
    class_no: str | None = Field(default=None, alias="Class No.")
    material_type: str | None = Field(default=None, alias="Type")
    class_name: str | None = Field(default=None, alias="Class Name")
    version: str | None = Field(default=None, alias="Version")
    status: str | None = Field(default=None, alias="Status")
    delivery_method: str | None = Field(default=None, alias="Delivery Method")
    notes: str | None = Field(default=None, alias="Notes")
    link: str | None = Field(default=None, alias="Link")

    _normalize_cells = field_validator("*", mode="before")(_blank_to_none)


class GetAllDataResponse(SheetsBaseModel):
    success: bool
    data: list[SheetRowPayload] = Field(default_factory=list)
    message: str | None = None


class ActionResponse(SheetsBaseModel):
    success: bool
    message: str | None = None


class OutboundRowPayload(SheetsBaseModel):
    """Body of ``updateData``; serialized with the sheet's header labels."""

    version_code: str = Field(serialization_alias="Version Code")
    status: str = Field(serialization_alias="Status")
    client_name: str = Field(serialization_alias="Client Name")
    programme: str = Field(serialization_alias="Programme")
    cohort: str = Field(serialization_alias="Cohort")
    module_no: str = Field(serialization_alias="Module No.")
    module_name: str = Field(serialization_alias="Module Name")
    class_no: str = Field(serialization_alias="Class No.")
    material_type: str = Field(serialization_alias="Type")
    class_name: str = Field(serialization_alias="Class Name")
    version: str = Field(serialization_alias="Version")
    delivery_method: str = Field(serialization_alias="Delivery Method")
    delivery_date: str = Field(serialization_alias="Delivery Date")
    notes: str = Field(serialization_alias="Notes")
    link: str = Field(serialization_alias="Link")

    def to_wire(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class DeleteRowPayload(SheetsBaseModel):
    version_code: str
