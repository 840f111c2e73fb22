"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from eth_utils import is_address

from fluid_indexer.models.config import IndexerConfig


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "FLUID_INDEXER_",
) -> IndexerConfig:
    """Load indexer configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (FLUID_INDEXER_PROGRAM_MANAGER, etc.)
        2. TOML config file
        3. Defaults from IndexerConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = IndexerConfig()

    # ── Indexer section ────────────────────────────────────
    indexer = raw.get("indexer", {})
    if v := indexer.get("log_level"):
        cfg.log_level = str(v)

    # ── Contracts section ──────────────────────────────────
    contracts = raw.get("contracts", {})
    if v := contracts.get("network"):
        cfg.network = str(v)
    if v := contracts.get("program_manager"):
        cfg.program_manager_address = str(v)
    if v := contracts.get("locker_factory"):
        cfg.locker_factory_address = str(v)

    # ── Storage section ────────────────────────────────────
    storage = raw.get("storage", {})
    if v := storage.get("db_path"):
        cfg.db_path = str(v)

    # ── Environment variable overrides (highest priority) ──
    if v := os.environ.get(f"{env_prefix}PROGRAM_MANAGER"):
        cfg.program_manager_address = v
    if v := os.environ.get(f"{env_prefix}LOCKER_FACTORY"):
        cfg.locker_factory_address = v
    if v := os.environ.get(f"{env_prefix}NETWORK"):
        cfg.network = v
    if v := os.environ.get(f"{env_prefix}DB_PATH"):
        cfg.db_path = v
    if v := os.environ.get(f"{env_prefix}LOG_LEVEL"):
        cfg.log_level = v

    cfg.program_manager_address = _normalize_address("program_manager", cfg.program_manager_address)
    cfg.locker_factory_address = _normalize_address("locker_factory", cfg.locker_factory_address)

    # Expand ~ in paths
    if cfg.db_path != ":memory:":
        cfg.db_path = str(Path(cfg.db_path).expanduser())

    return cfg


def _normalize_address(name: str, value: str) -> str:
    if not value:
        return ""
    if not is_address(value):
        raise ValueError(f"{name}: not an address: {value!r}")
    return value.lower()
