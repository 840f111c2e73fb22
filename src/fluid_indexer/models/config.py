"""Configuration models for the indexer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class IndexerConfig:
    """Complete indexer configuration."""

    # Indexer
    log_level: str = "info"

    # Contracts
    network: str = "base-mainnet"
    program_manager_address: str = ""  # FluidEPProgramManager
    locker_factory_address: str = ""  # FluidLockerFactory

    # Storage
    db_path: str = "~/.fluid_indexer/state.db"
