"""FluidEPProgramManager handlers - one Program record per programId."""

from __future__ import annotations

import logging

from fluid_indexer.interfaces.store import EntityStore
from fluid_indexer.models.entities import Program
from fluid_indexer.models.events import (
    ProgramCancelled,
    ProgramCreated,
    ProgramFunded,
    ProgramSignerUpdated,
    ProgramStopped,
)

log = logging.getLogger(__name__)


async def get_or_create_program(store: EntityStore, program_id: str) -> Program:
    """Load the program, or a fresh unsaved one with default fields."""
    program = await store.get_program(program_id)
    if program is None:
        program = Program(id=program_id)
    return program


async def handle_program_created(event: ProgramCreated, store: EntityStore) -> None:
    # Re-creating an existing id resets every amount and date.
    program = await get_or_create_program(store, str(event.program_id))

    program.program_admin = event.program_admin
    program.signer = event.signer
    program.token = event.token
    program.distribution_pool = event.distribution_pool

    program.funding_amount = 0
    program.subsidy_amount = 0
    program.early_end_date = 0
    program.end_date = 0
    program.stopped_date = 0
    program.funding_compensation_amount = 0
    program.subsidy_compensation_amount = 0
    program.cancellation_date = 0
    program.returned_deposit = 0

    program.block_number = event.log.block_number
    program.block_timestamp = event.log.block_timestamp
    program.transaction_hash = event.log.tx_hash

    await store.save_program(program)
    log.info("Program %s created (admin=%s, token=%s)", program.id, program.program_admin, program.token)


async def handle_program_funded(event: ProgramFunded, store: EntityStore) -> None:
    program = await get_or_create_program(store, str(event.program_id))

    program.funding_amount = event.funding_amount
    program.subsidy_amount = event.subsidy_amount
    program.early_end_date = event.early_end_date
    program.end_date = event.end_date

    await store.save_program(program)
    log.info("Program %s funded: %d + %d subsidy", program.id, program.funding_amount, program.subsidy_amount)


async def handle_program_signer_updated(event: ProgramSignerUpdated, store: EntityStore) -> None:
    program = await get_or_create_program(store, str(event.program_id))

    program.signer = event.new_signer

    await store.save_program(program)
    log.info("Program %s signer -> %s", program.id, program.signer)


async def handle_program_stopped(event: ProgramStopped, store: EntityStore) -> None:
    program = await get_or_create_program(store, str(event.program_id))

    program.funding_compensation_amount = event.funding_compensation_amount
    program.subsidy_compensation_amount = event.subsidy_compensation_amount
    program.stopped_date = event.log.block_timestamp

    await store.save_program(program)
    log.info("Program %s stopped at %d", program.id, program.stopped_date)


async def handle_program_cancelled(event: ProgramCancelled, store: EntityStore) -> None:
    program = await get_or_create_program(store, str(event.program_id))

    program.returned_deposit = event.returned_deposit
    program.cancellation_date = event.log.block_timestamp

    await store.save_program(program)
    log.info("Program %s cancelled, returned deposit %d", program.id, program.returned_deposit)
