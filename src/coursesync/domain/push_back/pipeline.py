"""State machine that pushes one store change back to the sheet."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from coursesync.domain.errors import LineageNotFoundError, PushBackError
from coursesync.domain.model import ChangeKind

from .projection import project_lineage

if TYPE_CHECKING:
    from coursesync.domain.model import ContentVersionLineage, OutboundRow
    from coursesync.domain.ports import ChangeEvent, RowSink

log = getLogger(__name__)

LineageLoader = Callable[[int], "ContentVersionLineage | None"]


class PushState(StrEnum):
    RECEIVED = "received"
    RESOLVING = "resolving"
    TRANSFORMED = "transformed"
    PUSHED = "pushed"
    FAILED = "failed"


@dataclass(slots=True)
class PushOutcome:
    """Where one event ended up, and every state it passed through."""

    event: ChangeEvent
    trail: list[PushState] = field(default_factory=lambda: [PushState.RECEIVED])
    row: OutboundRow | None = None
    error: str | None = None

    @property
    def state(self) -> PushState:
        return self.trail[-1]

    @property
    def pushed(self) -> bool:
        return self.state is PushState.PUSHED

    def advance(self, state: PushState) -> None:
        self.trail.append(state)


@dataclass(slots=True)
class PushBackPipeline:
    """Handle change events one at a time; failures are logged, never retried."""

    sink: RowSink
    load_lineage: LineageLoader

    def __call__(self, event: ChangeEvent) -> PushOutcome:
        return self.handle(event)

    def handle(self, event: ChangeEvent) -> PushOutcome:
        outcome = PushOutcome(event=event)
        try:
            if event.kind is ChangeKind.DELETED:
                # the ancestors may already be gone; the old code is all we need
                self.sink.delete_row(event.version_code)
            else:
                outcome.advance(PushState.RESOLVING)
                lineage = self.load_lineage(event.version_id)
                if lineage is None:
                    raise LineageNotFoundError(event.version_id)
                outcome.row = project_lineage(lineage)
                outcome.advance(PushState.TRANSFORMED)
                self.sink.upsert_row(outcome.row.version_code, outcome.row)
        except PushBackError as exc:
            self._fail(outcome, exc)
            log.error(
                "Push-back of %s %s failed in state %s: %s",
                event.kind,
                event.version_code,
                outcome.trail[-2],
                exc,
            )
            return outcome
        except Exception as exc:  # noqa: BLE001
            self._fail(outcome, exc)
            log.exception("Unexpected push-back failure for %s %s", event.kind, event.version_code)
            return outcome

        outcome.advance(PushState.PUSHED)
        log.info("Pushed %s of %s to the sheet", event.kind, event.version_code)
        return outcome

    @staticmethod
    def _fail(outcome: PushOutcome, exc: BaseException) -> None:
        outcome.error = str(exc) or type(exc).__name__
        outcome.advance(PushState.FAILED)
