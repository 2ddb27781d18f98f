from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest

from coursesync.adapters.sheets import SheetsRowSink, SheetsRowSource
from coursesync.domain.errors import SinkUnavailableError, SourceUnavailableError
from coursesync.domain.model import OutboundRow

if TYPE_CHECKING:
    from collections.abc import Callable

    from coursesync.config import SheetsConfig

    from .conftest import ClientFactory

    type MakeFactory = Callable[[Callable[[httpx.Request], httpx.Response]], ClientFactory]


def _outbound(code: str = "ACM-M1-INT-v1.0") -> OutboundRow:
    return OutboundRow(
        version_code=code,
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


def test_source_fetches_all_rows(
    sheets_config: SheetsConfig,
    make_client_factory: MakeFactory,
) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "success": True,
                "data": [
                    {"Client Name": "Acme", "Class Name": "Intro"},
                    {"Client Name": "Beta", "Class Name": ""},
                ],
            },
        )

    source = SheetsRowSource(config=sheets_config, client_factory=make_client_factory(handler))

    rows = source()

    assert [row.client_name for row in rows] == ["Acme", "Beta"]
    assert rows[1].class_name is None
    assert requests[0].method == "GET"
    assert requests[0].url.params["action"] == "getAllData"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"success": False, "message": "No access"}),
        httpx.Response(200, text="<html>login</html>"),
        httpx.Response(200, json={"success": True, "data": "not-a-list"}),
        httpx.Response(503, json={"success": False}),
    ],
)
def test_source_failures_raise_source_unavailable(
    sheets_config: SheetsConfig,
    make_client_factory: MakeFactory,
    response: httpx.Response,
) -> None:
    source = SheetsRowSource(
        config=sheets_config,
        client_factory=make_client_factory(lambda _request: response),
    )

    with pytest.raises(SourceUnavailableError):
        source()


def test_sink_posts_update_with_sheet_columns(
    sheets_config: SheetsConfig,
    make_client_factory: MakeFactory,
) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"success": True})

    sink = SheetsRowSink(config=sheets_config, client_factory=make_client_factory(handler))

    sink.upsert_row("ACM-M1-INT-v1.0", _outbound())

    assert len(requests) == 1
    assert requests[0].method == "POST"
    assert requests[0].url.params["action"] == "updateData"
    body = json.loads(requests[0].content)
    assert body["Version Code"] == "ACM-M1-INT-v1.0"
    assert body["Status"] == "Open"


def test_sink_posts_delete_with_version_code(
    sheets_config: SheetsConfig,
    make_client_factory: MakeFactory,
) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"success": True})

    sink = SheetsRowSink(config=sheets_config, client_factory=make_client_factory(handler))

    sink.delete_row("ACM-M1-INT-v1.0")

    assert requests[0].url.params["action"] == "deleteData"
    assert json.loads(requests[0].content) == {"version_code": "ACM-M1-INT-v1.0"}


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"success": False, "message": "Row not found"}),
        httpx.Response(500, text="error"),
    ],
)
def test_sink_failures_raise_sink_unavailable(
    sheets_config: SheetsConfig,
    make_client_factory: MakeFactory,
    response: httpx.Response,
) -> None:
    sink = SheetsRowSink(
        config=sheets_config,
        client_factory=make_client_factory(lambda _request: response),
    )

    with pytest.raises(SinkUnavailableError):
        sink.delete_row("ACM-M1-INT-v1.0")


def test_sink_rejects_mismatched_code(
    sheets_config: SheetsConfig,
    make_client_factory: MakeFactory,
) -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    sink = SheetsRowSink(config=sheets_config, client_factory=make_client_factory(handler))

    with pytest.raises(SinkUnavailableError):
        sink.upsert_row("OTHER", _outbound())
