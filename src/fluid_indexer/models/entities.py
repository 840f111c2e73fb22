"""Indexed entity records as persisted in the entity store."""

from __future__ import annotations

from dataclasses import dataclass

ZERO_ADDRESS = "0x" + "00" * 20
ZERO_HASH = "0x" + "00" * 32


@dataclass
class Program:
    """One FLUID distribution program, mutated across its lifecycle."""

    id: str  # decimal programId
    program_admin: str = ZERO_ADDRESS
    signer: str = ZERO_ADDRESS
    token: str = ZERO_ADDRESS
    distribution_pool: str = ZERO_ADDRESS
    funding_amount: int = 0
    subsidy_amount: int = 0
    early_end_date: int = 0
    end_date: int = 0
    stopped_date: int = 0
    funding_compensation_amount: int = 0
    subsidy_compensation_amount: int = 0
    cancellation_date: int = 0
    returned_deposit: int = 0
    block_number: int = 0
    block_timestamp: int = 0
    transaction_hash: str = ZERO_HASH


@dataclass
class Locker:
    """A deployed locker contract; written once."""

    id: str  # locker address
    locker_owner: str
    block_number: int
    block_timestamp: int
    transaction_hash: str


@dataclass
class LockerCreated:
    """Append-only audit entry for a LockerCreated log."""

    id: str  # LogKey hex
    locker_owner: str
    locker_address: str
    block_number: int
    block_timestamp: int
    transaction_hash: str


@dataclass
class FluidStreamClaimEvent:
    id: str  # LogKey hex
    locker: str
    claimer: str  # transaction sender, not necessarily the locker owner
    block_number: int
    block_timestamp: int
    transaction_hash: str


@dataclass
class ClaimEventUnit:
    id: str  # LogKey hex, with array position for bulk claims
    event: str  # parent FluidStreamClaimEvent id
    program_id: str
    amount: int


@dataclass
class StoreCounts:
    """Row counts per entity, for status output."""

    programs: int = 0
    lockers: int = 0
    locker_created: int = 0
    claim_events: int = 0
    claim_units: int = 0
    data_sources: int = 0
