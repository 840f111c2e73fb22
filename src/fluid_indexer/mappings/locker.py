"""FluidLocker handlers - claim events and their per-program units."""

from __future__ import annotations

import logging

from fluid_indexer.interfaces.store import EntityStore
from fluid_indexer.models.entities import ClaimEventUnit, FluidStreamClaimEvent
from fluid_indexer.models.events import FluidStreamClaimed, FluidStreamsClaimed, LogMeta

log = logging.getLogger(__name__)


async def _save_claim_event(meta: LogMeta, store: EntityStore) -> FluidStreamClaimEvent:
    claim = FluidStreamClaimEvent(
        id=meta.key.hex,
        locker=meta.address,
        claimer=meta.tx_from,
        block_number=meta.block_number,
        block_timestamp=meta.block_timestamp,
        transaction_hash=meta.tx_hash,
    )
    await store.save_claim_event(claim)
    return claim


async def handle_fluid_stream_claimed(event: FluidStreamClaimed, store: EntityStore) -> None:
    claim = await _save_claim_event(event.log, store)

    await store.save_claim_unit(ClaimEventUnit(
        id=event.log.key.hex,
        event=claim.id,
        program_id=str(event.program_id),
        amount=event.total_program_units,
    ))
    log.info(
        "Claim on locker %s: program %d, %d units",
        claim.locker, event.program_id, event.total_program_units,
    )


async def handle_fluid_streams_claimed(event: FluidStreamsClaimed, store: EntityStore) -> None:
    if len(event.program_ids) != len(event.total_program_units):
        raise ValueError(
            f"FluidStreamsClaimed in tx {event.log.tx_hash}: "
            f"{len(event.program_ids)} program ids but "
            f"{len(event.total_program_units)} unit amounts"
        )

    claim = await _save_claim_event(event.log, store)

    key = event.log.key
    for i, (program_id, units) in enumerate(zip(event.program_ids, event.total_program_units)):
        await store.save_claim_unit(ClaimEventUnit(
            id=key.child(i).hex,
            event=claim.id,
            program_id=str(program_id),
            amount=int(units),
        ))
    log.info("Bulk claim on locker %s: %d programs", claim.locker, len(event.program_ids))
