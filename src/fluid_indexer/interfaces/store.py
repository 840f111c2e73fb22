"""EntityStore protocol - persists indexed entity records."""

from __future__ import annotations

from typing import Protocol

from fluid_indexer.models.entities import (
    ClaimEventUnit,
    FluidStreamClaimEvent,
    Locker,
    LockerCreated,
    Program,
    StoreCounts,
)


class EntityStore(Protocol):
    """Keyed record storage used by the mappers.

    Every ``save_*`` is an upsert by the record's ``id`` and is durable
    when it returns.
    """

    # ── Lifecycle ──────────────────────────────────────────

    async def initialize(self) -> None:
        """Create tables if they don't exist."""
        ...

    async def close(self) -> None:
        ...

    # ── Programs ───────────────────────────────────────────

    async def get_program(self, program_id: str) -> Program | None:
        ...

    async def save_program(self, program: Program) -> None:
        ...

    async def get_all_programs(self) -> list[Program]:
        ...

    # ── Lockers ────────────────────────────────────────────

    async def get_locker(self, address: str) -> Locker | None:
        ...

    async def save_locker(self, locker: Locker) -> None:
        ...

    async def get_all_lockers(self) -> list[Locker]:
        ...

    async def get_locker_created(self, key: str) -> LockerCreated | None:
        ...

    async def save_locker_created(self, record: LockerCreated) -> None:
        ...

    async def get_locker_created_log(self) -> list[LockerCreated]:
        ...

    # ── Claims ─────────────────────────────────────────────

    async def get_claim_event(self, key: str) -> FluidStreamClaimEvent | None:
        ...

    async def save_claim_event(self, record: FluidStreamClaimEvent) -> None:
        ...

    async def get_claim_events(self, locker: str | None = None) -> list[FluidStreamClaimEvent]:
        ...

    async def get_claim_unit(self, key: str) -> ClaimEventUnit | None:
        ...

    async def save_claim_unit(self, unit: ClaimEventUnit) -> None:
        ...

    async def get_claim_units(self, event_id: str) -> list[ClaimEventUnit]:
        ...

    # ── Stats ──────────────────────────────────────────────

    async def counts(self) -> StoreCounts:
        ...
