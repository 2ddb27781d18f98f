"""Synchronization defaults for the push-back workers and the change watcher."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_float, optional_env_int

DEFAULT_PUSH_WORKERS = 4
DEFAULT_WATCH_INTERVAL_SECONDS = 2.0
DEFAULT_WATCH_BATCH_SIZE = 100


@dataclass(frozen=True, slots=True)
class SyncConfig:
    push_workers: int = DEFAULT_PUSH_WORKERS
    watch_interval_seconds: float = DEFAULT_WATCH_INTERVAL_SECONDS
    watch_batch_size: int = DEFAULT_WATCH_BATCH_SIZE


def get_sync_config() -> SyncConfig:
    workers = optional_env_int("COURSESYNC_PUSH_WORKERS", minimum=1)
    interval = optional_env_float("COURSESYNC_WATCH_INTERVAL")
    batch_size = optional_env_int("COURSESYNC_WATCH_BATCH", minimum=1)
    return SyncConfig(
        push_workers=workers or DEFAULT_PUSH_WORKERS,
        watch_interval_seconds=DEFAULT_WATCH_INTERVAL_SECONDS if interval is None else interval,
        watch_batch_size=batch_size or DEFAULT_WATCH_BATCH_SIZE,
    )
