"""Data models for the fluid_indexer package."""

from fluid_indexer.models.events import (
    EventLog,
    LogMeta,
    ProgramCreated,
    ProgramFunded,
    ProgramSignerUpdated,
    ProgramStopped,
    ProgramCancelled,
    LockerCreatedEvent,
    FluidStreamClaimed,
    FluidStreamsClaimed,
)
from fluid_indexer.models.entities import (
    ZERO_ADDRESS,
    ZERO_HASH,
    Program,
    Locker,
    LockerCreated,
    FluidStreamClaimEvent,
    ClaimEventUnit,
    StoreCounts,
)
from fluid_indexer.models.keys import LogKey
from fluid_indexer.models.records import IndexRunSummary
from fluid_indexer.models.config import IndexerConfig

__all__ = [
    "EventLog", "LogMeta",
    "ProgramCreated", "ProgramFunded", "ProgramSignerUpdated",
    "ProgramStopped", "ProgramCancelled",
    "LockerCreatedEvent", "FluidStreamClaimed", "FluidStreamsClaimed",
    "ZERO_ADDRESS", "ZERO_HASH",
    "Program", "Locker", "LockerCreated", "FluidStreamClaimEvent",
    "ClaimEventUnit", "StoreCounts",
    "LogKey",
    "IndexRunSummary",
    "IndexerConfig",
]
