"""Reverse direction: push committed content-version changes back to the sheet."""

from __future__ import annotations

from .dispatcher import DispatcherClosedError, PushBackDispatcher
from .pipeline import LineageLoader, PushBackPipeline, PushOutcome, PushState
from .projection import PUSHED_DELIVERY_METHOD, PUSHED_MATERIAL_TYPE, project_lineage

__all__ = [
    "PUSHED_DELIVERY_METHOD",
    "PUSHED_MATERIAL_TYPE",
    "DispatcherClosedError",
    "LineageLoader",
    "PushBackDispatcher",
    "PushBackPipeline",
    "PushOutcome",
    "PushState",
    "project_lineage",
]
