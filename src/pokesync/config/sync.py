"""Synchronization defaults for the catalog engine."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int

DEFAULT_BATCH_SIZE = 50
DEFAULT_BATCH_DELAY_SECONDS = 0.5
DEFAULT_BOOTSTRAP_TARGET = 300


@dataclass(frozen=True, slots=True)
class SyncConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS
    bootstrap_target: int = DEFAULT_BOOTSTRAP_TARGET


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        batch_delay_seconds=env_float(
            "POKESYNC_BATCH_DELAY_SECONDS", DEFAULT_BATCH_DELAY_SECONDS, minimum=0.0
        ),
        bootstrap_target=env_int("POKESYNC_BOOTSTRAP_TARGET", DEFAULT_BOOTSTRAP_TARGET, minimum=0),
    )
