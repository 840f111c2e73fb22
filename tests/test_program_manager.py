"""Program lifecycle: created → funded → signer-updated → stopped → cancelled."""

from __future__ import annotations

import pytest

from fluid_indexer.mappings.program_manager import (
    get_or_create_program,
    handle_program_cancelled,
    handle_program_created,
    handle_program_funded,
    handle_program_signer_updated,
    handle_program_stopped,
)
from fluid_indexer.models.entities import ZERO_ADDRESS, ZERO_HASH, Program

from tests.conftest import ADMIN, AGENT, POOL, SIGNER, TOKEN
from tests.factories import (
    make_program_cancelled,
    make_program_created,
    make_program_funded,
    make_program_signer_updated,
    make_program_stopped,
    tx_hash,
)


# ── Created ────────────────────────────────────────────────────────


async def test_created_sets_addresses_and_zeroes_amounts(store):
    event = make_program_created(program_id=1, block_number=42, block_timestamp=1234, tx=9)
    await handle_program_created(event, store)

    program = await store.get_program("1")
    assert program is not None
    assert program.program_admin == ADMIN
    assert program.signer == SIGNER
    assert program.token == TOKEN
    assert program.distribution_pool == POOL
    assert program.funding_amount == 0
    assert program.subsidy_amount == 0
    assert program.early_end_date == 0
    assert program.end_date == 0
    assert program.stopped_date == 0
    assert program.funding_compensation_amount == 0
    assert program.subsidy_compensation_amount == 0
    assert program.cancellation_date == 0
    assert program.returned_deposit == 0
    assert program.block_number == 42
    assert program.block_timestamp == 1234
    assert program.transaction_hash == tx_hash(9)


async def test_created_then_funded_example(store):
    """ProgramCreated(1) then ProgramFunded(1, 1000, 200, 100, 200)."""
    await handle_program_created(make_program_created(program_id=1), store)
    await handle_program_funded(
        make_program_funded(
            program_id=1, funding_amount=1000, subsidy_amount=200,
            early_end_date=100, end_date=200, tx=2,
        ),
        store,
    )

    programs = await store.get_all_programs()
    assert len(programs) == 1
    program = programs[0]
    assert program.id == "1"
    assert program.funding_amount == 1000
    assert program.subsidy_amount == 200
    assert program.early_end_date == 100
    assert program.end_date == 200
    # Untouched by funding
    assert program.stopped_date == 0
    assert program.funding_compensation_amount == 0
    assert program.returned_deposit == 0
    assert program.cancellation_date == 0
    assert program.signer == SIGNER


# ── Later lifecycle events ────────────────────────────────────────


async def test_signer_updated_only_touches_signer(store):
    await handle_program_created(make_program_created(program_id=3), store)
    await handle_program_funded(make_program_funded(program_id=3, funding_amount=77), store)

    await handle_program_signer_updated(make_program_signer_updated(program_id=3, new_signer=AGENT), store)

    program = await store.get_program("3")
    assert program.signer == AGENT
    assert program.program_admin == ADMIN
    assert program.funding_amount == 77


async def test_stopped_stamps_block_timestamp(store):
    await handle_program_created(make_program_created(program_id=4), store)
    await handle_program_funded(make_program_funded(program_id=4), store)

    await handle_program_stopped(
        make_program_stopped(
            program_id=4,
            funding_compensation_amount=11,
            subsidy_compensation_amount=3,
            block_timestamp=1_800_000_000,
        ),
        store,
    )

    program = await store.get_program("4")
    assert program.funding_compensation_amount == 11
    assert program.subsidy_compensation_amount == 3
    assert program.stopped_date == 1_800_000_000
    # Funding untouched
    assert program.funding_amount == 1000
    assert program.cancellation_date == 0


async def test_cancelled_stamps_block_timestamp(store):
    await handle_program_created(make_program_created(program_id=5), store)

    await handle_program_cancelled(
        make_program_cancelled(program_id=5, returned_deposit=999, block_timestamp=1_750_000_000),
        store,
    )

    program = await store.get_program("5")
    assert program.returned_deposit == 999
    assert program.cancellation_date == 1_750_000_000
    assert program.stopped_date == 0


# ── Missing create ────────────────────────────────────────────────


@pytest.mark.parametrize(
    "handler, event",
    [
        (handle_program_funded, make_program_funded(program_id=50)),
        (handle_program_signer_updated, make_program_signer_updated(program_id=50)),
        (handle_program_stopped, make_program_stopped(program_id=50)),
        (handle_program_cancelled, make_program_cancelled(program_id=50)),
    ],
)
async def test_event_without_create_materializes_program(store, handler, event):
    await handler(event, store)

    program = await store.get_program("50")
    assert program is not None
    assert program.program_admin == ZERO_ADDRESS
    assert program.token == ZERO_ADDRESS
    assert program.block_number == 0
    assert program.transaction_hash == ZERO_HASH


async def test_funded_without_create_sets_only_funding_fields(store):
    await handle_program_funded(make_program_funded(program_id=51, funding_amount=5), store)

    program = await store.get_program("51")
    assert program == Program(
        id="51",
        funding_amount=5,
        subsidy_amount=200,
        early_end_date=100,
        end_date=200,
    )


async def test_get_or_create_does_not_persist(store):
    program = await get_or_create_program(store, "404")
    assert program.id == "404"
    assert await store.get_program("404") is None


# ── Ordering and replay ───────────────────────────────────────────


async def test_recreation_resets_amounts_and_dates(store):
    """A second ProgramCreated for the same id wipes earlier lifecycle state."""
    await handle_program_created(make_program_created(program_id=6), store)
    await handle_program_funded(make_program_funded(program_id=6), store)
    await handle_program_stopped(make_program_stopped(program_id=6), store)

    new_admin = "0x" + "0a" * 20
    await handle_program_created(
        make_program_created(program_id=6, program_admin=new_admin, block_number=2000, tx=7),
        store,
    )

    program = await store.get_program("6")
    assert program.program_admin == new_admin
    assert program.funding_amount == 0
    assert program.subsidy_amount == 0
    assert program.stopped_date == 0
    assert program.funding_compensation_amount == 0
    assert program.block_number == 2000
    assert program.transaction_hash == tx_hash(7)


async def test_last_write_wins_per_field_group_across_ids(store):
    """Interleaved events for two programs converge independently."""
    await handle_program_created(make_program_created(program_id=10), store)
    await handle_program_created(make_program_created(program_id=11), store)
    await handle_program_funded(make_program_funded(program_id=10, funding_amount=1), store)
    await handle_program_funded(make_program_funded(program_id=11, funding_amount=100), store)
    await handle_program_funded(make_program_funded(program_id=10, funding_amount=2), store)
    await handle_program_signer_updated(make_program_signer_updated(program_id=11, new_signer=AGENT), store)

    p10 = await store.get_program("10")
    p11 = await store.get_program("11")
    assert p10.funding_amount == 2
    assert p10.signer == SIGNER
    assert p11.funding_amount == 100
    assert p11.signer == AGENT


async def test_replay_is_idempotent(store):
    events = [
        (handle_program_created, make_program_created(program_id=20)),
        (handle_program_funded, make_program_funded(program_id=20)),
        (handle_program_stopped, make_program_stopped(program_id=20)),
    ]
    for handler, event in events:
        await handler(event, store)
    first = await store.get_program("20")

    for handler, event in events:
        await handler(event, store)

    assert await store.get_program("20") == first
    assert len(await store.get_all_programs()) == 1


async def test_uint256_amounts_survive(store):
    big = 2**256 - 1
    await handle_program_funded(make_program_funded(program_id=30, funding_amount=big), store)

    program = await store.get_program("30")
    assert program.funding_amount == big
