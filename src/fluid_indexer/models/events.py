"""Decoded contract events handed to the mappers."""

from __future__ import annotations

from dataclasses import dataclass

from fluid_indexer.models.keys import LogKey


@dataclass(frozen=True)
class EventLog:
    """Raw log as delivered by a log source, minimally normalized."""

    address: str  # lowercased 0x...
    topics: tuple[str, ...]  # lowercased 0x...
    data: bytes
    block_number: int
    block_timestamp: int
    tx_hash: str  # lowercased 0x...
    tx_from: str
    log_index: int

    def meta(self) -> LogMeta:
        return LogMeta(
            address=self.address,
            block_number=self.block_number,
            block_timestamp=self.block_timestamp,
            tx_hash=self.tx_hash,
            tx_from=self.tx_from,
            log_index=self.log_index,
        )


@dataclass(frozen=True)
class LogMeta:
    """Block and transaction context of the log an event came from."""

    address: str  # emitting contract, lowercased 0x...
    block_number: int
    block_timestamp: int  # unix seconds
    tx_hash: str  # lowercased 0x...
    tx_from: str  # transaction sender
    log_index: int

    @property
    def key(self) -> LogKey:
        return LogKey.from_hex(self.tx_hash, self.log_index)


# ── FluidEPProgramManager ──────────────────────────────


@dataclass(frozen=True)
class ProgramCreated:
    log: LogMeta
    program_id: int
    program_admin: str
    signer: str
    token: str
    distribution_pool: str


@dataclass(frozen=True)
class ProgramFunded:
    log: LogMeta
    program_id: int
    funding_amount: int
    subsidy_amount: int
    early_end_date: int
    end_date: int


@dataclass(frozen=True)
class ProgramSignerUpdated:
    log: LogMeta
    program_id: int
    new_signer: str


@dataclass(frozen=True)
class ProgramStopped:
    log: LogMeta
    program_id: int
    funding_compensation_amount: int
    subsidy_compensation_amount: int


@dataclass(frozen=True)
class ProgramCancelled:
    log: LogMeta
    program_id: int
    returned_deposit: int


# ── FluidLockerFactory ─────────────────────────────────


@dataclass(frozen=True)
class LockerCreatedEvent:
    """Factory deployed a new locker for ``locker_owner``."""

    log: LogMeta
    locker_owner: str
    locker_address: str


# ── FluidLocker (one per deployed locker) ──────────────


@dataclass(frozen=True)
class FluidStreamClaimed:
    """Claim against a single program."""

    log: LogMeta
    program_id: int
    total_program_units: int


@dataclass(frozen=True)
class FluidStreamsClaimed:
    """Bulk claim; ``program_ids`` and ``total_program_units`` are parallel."""

    log: LogMeta
    program_ids: tuple[int, ...]
    total_program_units: tuple[int, ...]
