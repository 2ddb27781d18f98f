"""Row source and row sink backed by the Apps Script web app in front of the sheet."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from coursesync.adapters.http_resilience import ResilientClient
from coursesync.config.sheets import get_sheets_config
from coursesync.domain.errors import SinkUnavailableError, SourceUnavailableError
from coursesync.domain.ports import RowSink, RowSource

from .schema import ActionResponse, DeleteRowPayload, GetAllDataResponse
from .translator import outbound_payload, parse_sheet_row

if TYPE_CHECKING:
    from collections.abc import Callable

    from coursesync.config.http_resilience import ResilienceConfig
    from coursesync.config.sheets import SheetsConfig
    from coursesync.domain.model import OutboundRow, SheetRow

log = getLogger(__name__)

GET_ALL_DATA = "getAllData"
UPDATE_DATA = "updateData"
DELETE_DATA = "deleteData"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class SheetsRowSource:
    """Fetch every row of the content sheet in one ``getAllData`` call."""

    config: SheetsConfig = field(default_factory=get_sheets_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self) -> list[SheetRow]:
        return asyncio.run(self._fetch_rows_async())

    async def _fetch_rows_async(self) -> list[SheetRow]:
        log.info("Fetching rows from the content sheet")
        async with self.client_factory(self.config.resilience) as client:
            try:
                response = await client.get(self.config.api_url, params={"action": GET_ALL_DATA})
                response.raise_for_status()
                payload = GetAllDataResponse.model_validate(response.json())
            except httpx.HTTPError as exc:
                raise SourceUnavailableError(f"Sheet fetch failed: {exc}") from exc
            except (ValueError, ValidationError) as exc:
                raise SourceUnavailableError(f"Unexpected sheet payload: {exc}") from exc

        if not payload.success:
            raise SourceUnavailableError(payload.message or "Failed to fetch sheet data")

        rows = [parse_sheet_row(row) for row in payload.data]
        log.info("Fetched %s rows from the content sheet", len(rows))
        return rows


@dataclass(slots=True)
class SheetsRowSink:
    """Write content versions back to the sheet, keyed by display code."""

    config: SheetsConfig = field(default_factory=get_sheets_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def upsert_row(self, version_code: str, row: OutboundRow) -> None:
        if row.version_code != version_code:
            raise SinkUnavailableError(
                f"Row for {row.version_code!r} cannot be written under {version_code!r}"
            )
        asyncio.run(self._post_async(UPDATE_DATA, version_code, outbound_payload(row)))

    def delete_row(self, version_code: str) -> None:
        body = DeleteRowPayload(version_code=version_code).model_dump()
        asyncio.run(self._post_async(DELETE_DATA, version_code, body))

    async def _post_async(self, action: str, version_code: str, body: dict[str, str]) -> None:
        async with self.client_factory(self.config.resilience) as client:
            try:
                response = await client.post(
                    self.config.api_url,
                    params={"action": action},
                    json=body,
                )
                response.raise_for_status()
                result = ActionResponse.model_validate(response.json())
            except httpx.HTTPError as exc:
                raise SinkUnavailableError(f"{action} for {version_code} failed: {exc}") from exc
            except (ValueError, ValidationError) as exc:
                raise SinkUnavailableError(
                    f"{action} for {version_code} returned an unexpected payload: {exc}"
                ) from exc

        if not result.success:
            raise SinkUnavailableError(result.message or f"{action} for {version_code} failed")
        log.debug("%s succeeded for %s", action, version_code)


if TYPE_CHECKING:
    _source_check: RowSource = SheetsRowSource()
    _sink_check: RowSink = SheetsRowSink()
