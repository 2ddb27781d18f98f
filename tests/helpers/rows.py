"""Reusable sheet rows, row sources and sinks for sync tests."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from coursesync.domain.errors import SinkUnavailableError, SourceUnavailableError
from coursesync.domain.model import SheetRow

if TYPE_CHECKING:
    from coursesync.domain.model import OutboundRow

ACME_ROW_DEFAULTS: dict[str, str | None] = {
    "client_name": "Acme",
    "programme": "Leadership",
    "module_no": "Module 1",
    "module_name": "M1",
    "class_no": "Class 1",
    "class_name": "Intro",
}


def make_row(**overrides: str | None) -> SheetRow:
    """Return an Acme leadership row; ``overrides`` replace individual cells."""

    values = {**ACME_ROW_DEFAULTS, **overrides}
    return SheetRow(**values)


def acme_rows(versions: tuple[str, str] = ("v1", "v2")) -> list[SheetRow]:
    """Two rows for one class delivered to the default cohort, in two versions."""

    return [make_row(version=version) for version in versions]


@dataclass(slots=True)
class FakeRowSource:
    rows: list[SheetRow] = field(default_factory=list)
    error: str | None = None
    calls: int = 0

    def __call__(self) -> list[SheetRow]:
        self.calls += 1
        if self.error is not None:
            raise SourceUnavailableError(self.error)
        return list(self.rows)


type SinkCall = tuple[Literal["upsert", "delete"], str, OutboundRow | None]


@dataclass(slots=True)
class RecordingSink:
    """Sink recording every call; codes in ``fail_codes`` raise ``SinkUnavailableError``."""

    fail_codes: set[str] = field(default_factory=set[str])
    calls: list[SinkCall] = field(default_factory=list[SinkCall])
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def upsert_row(self, version_code: str, row: OutboundRow) -> None:
        self._record(("upsert", version_code, row))

    def delete_row(self, version_code: str) -> None:
        self._record(("delete", version_code, None))

    @property
    def upserts(self) -> list[str]:
        return [code for kind, code, _row in self.calls if kind == "upsert"]

    @property
    def deletes(self) -> list[str]:
        return [code for kind, code, _row in self.calls if kind == "delete"]

    def _record(self, call: SinkCall) -> None:
        with self._lock:
            self.calls.append(call)
        if call[1] in self.fail_codes:
            raise SinkUnavailableError(f"sheet rejected {call[1]}")
