"""ABI decoding of raw logs into typed events."""

from __future__ import annotations

import dataclasses

import pytest
from eth_utils import keccak

from fluid_indexer.abi import (
    LOCKER,
    LOCKER_FACTORY,
    PROGRAM_MANAGER,
    get_event_signature,
    get_event_topic0,
    get_events_from_abi,
    load_contract_events,
)
from fluid_indexer.evm.decoder import BINDINGS, EventDecoder
from fluid_indexer.models.events import (
    FluidStreamClaimed,
    FluidStreamsClaimed,
    LockerCreatedEvent,
    ProgramCreated,
    ProgramFunded,
)

from tests.conftest import (
    ADMIN,
    LOCKER_ADDRESS,
    LOCKER_FACTORY_ADDRESS,
    OWNER,
    POOL,
    PROGRAM_MANAGER_ADDRESS,
    SIGNER,
    TOKEN,
)
from tests.factories import make_raw_log, tx_hash


def test_topic0_is_keccak_of_signature():
    event = load_contract_events(LOCKER)["FluidStreamsClaimed"]
    assert get_event_signature(event) == "FluidStreamsClaimed(uint256[],uint128[])"
    assert get_event_topic0(event) == "0x" + keccak(text="FluidStreamsClaimed(uint256[],uint128[])").hex()


def test_events_from_parsed_abi_ignore_other_entries():
    abi = [
        {"type": "function", "name": "claim", "inputs": [], "outputs": []},
        {
            "type": "event",
            "name": "FluidStreamClaimed",
            "anonymous": False,
            "inputs": [
                {"indexed": True, "internalType": "uint256", "name": "programId", "type": "uint256"},
                {"indexed": False, "internalType": "uint256", "name": "totalProgramUnits", "type": "uint256"},
            ],
        },
    ]
    events = get_events_from_abi(abi)

    assert list(events) == ["FluidStreamClaimed"]
    assert [i.name for i in events["FluidStreamClaimed"].indexed_inputs] == ["programId"]
    assert [i.name for i in events["FluidStreamClaimed"].data_inputs] == ["totalProgramUnits"]


def test_every_binding_matches_a_bundled_event():
    names = set()
    for contract in (PROGRAM_MANAGER, LOCKER_FACTORY, LOCKER):
        names |= set(load_contract_events(contract))
    assert set(BINDINGS) <= names
    for binding in BINDINGS.values():
        fields = {f.name for f in dataclasses.fields(binding.cls)}
        assert set(binding.fields.values()) | {"log"} == fields


def test_decode_program_created():
    raw = make_raw_log(
        PROGRAM_MANAGER, "ProgramCreated",
        dict(programId=12, programAdmin=ADMIN, signer=SIGNER, token=TOKEN, distributionPool=POOL),
        address=PROGRAM_MANAGER_ADDRESS, block_number=77, tx=3, log_index=4,
    )
    event = EventDecoder.for_contract(PROGRAM_MANAGER).decode(raw)

    assert isinstance(event, ProgramCreated)
    assert event.program_id == 12
    assert event.program_admin == ADMIN
    assert event.signer == SIGNER
    assert event.token == TOKEN
    assert event.distribution_pool == POOL
    assert event.log.block_number == 77
    assert event.log.tx_hash == tx_hash(3)
    assert event.log.log_index == 4
    assert event.log.address == PROGRAM_MANAGER_ADDRESS


def test_decode_program_funded_big_values():
    big = 2**200 + 1
    raw = make_raw_log(
        PROGRAM_MANAGER, "ProgramFunded",
        dict(programId=1, fundingAmount=big, subsidyAmount=2, earlyEndDate=3, endDate=4),
        address=PROGRAM_MANAGER_ADDRESS,
    )
    event = EventDecoder.for_contract(PROGRAM_MANAGER).decode(raw)

    assert isinstance(event, ProgramFunded)
    assert event.funding_amount == big
    assert (event.subsidy_amount, event.early_end_date, event.end_date) == (2, 3, 4)


def test_decode_locker_created():
    raw = make_raw_log(
        LOCKER_FACTORY, "LockerCreated",
        dict(lockerOwner=OWNER, lockerAddress=LOCKER_ADDRESS),
        address=LOCKER_FACTORY_ADDRESS,
    )
    event = EventDecoder.for_contract(LOCKER_FACTORY).decode(raw)

    assert isinstance(event, LockerCreatedEvent)
    assert event.locker_owner == OWNER
    assert event.locker_address == LOCKER_ADDRESS


def test_decode_single_claim():
    raw = make_raw_log(
        LOCKER, "FluidStreamClaimed",
        dict(programId=9, totalProgramUnits=500),
        address=LOCKER_ADDRESS,
    )
    event = EventDecoder.for_contract(LOCKER).decode(raw)

    assert isinstance(event, FluidStreamClaimed)
    assert event.program_id == 9
    assert event.total_program_units == 500


def test_decode_bulk_claim_arrays():
    raw = make_raw_log(
        LOCKER, "FluidStreamsClaimed",
        dict(programIds=[5, 7], totalProgramUnits=[10, 2**128 - 1]),
        address=LOCKER_ADDRESS,
    )
    event = EventDecoder.for_contract(LOCKER).decode(raw)

    assert isinstance(event, FluidStreamsClaimed)
    assert event.program_ids == (5, 7)
    assert event.total_program_units == (10, 2**128 - 1)


def test_unbound_event_is_skipped():
    raw = make_raw_log(
        PROGRAM_MANAGER, "UserUnitsUpdated",
        dict(user=OWNER, programId=1, newUnits=3),
        address=PROGRAM_MANAGER_ADDRESS,
    )
    assert EventDecoder.for_contract(PROGRAM_MANAGER).decode(raw) is None


def test_other_contracts_event_is_unknown():
    """Locker ABI does not know factory events."""
    raw = make_raw_log(
        LOCKER_FACTORY, "LockerCreated",
        dict(lockerOwner=OWNER, lockerAddress=LOCKER_ADDRESS),
        address=LOCKER_ADDRESS,
    )
    assert EventDecoder.for_contract(LOCKER).decode(raw) is None


def test_wrong_topic_count_raises():
    raw = make_raw_log(
        LOCKER, "FluidStreamClaimed",
        dict(programId=9, totalProgramUnits=500),
        address=LOCKER_ADDRESS,
    )
    truncated = dataclasses.replace(raw, topics=raw.topics[:1])

    with pytest.raises(ValueError, match="expected 2 topics"):
        EventDecoder.for_contract(LOCKER).decode(truncated)


def test_log_without_topics_is_skipped():
    raw = make_raw_log(
        LOCKER, "FluidStreamClaimed",
        dict(programId=9, totalProgramUnits=500),
        address=LOCKER_ADDRESS,
    )
    assert EventDecoder.for_contract(LOCKER).decode(dataclasses.replace(raw, topics=())) is None
