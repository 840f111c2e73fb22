"""SQLite implementation of the EntityStore and DataSourceRegistry protocols."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from fluid_indexer.models.entities import (
    ClaimEventUnit,
    FluidStreamClaimEvent,
    Locker,
    LockerCreated,
    Program,
    StoreCounts,
)

log = logging.getLogger(__name__)

# uint256 values do not fit SQLite INTEGER; they are stored as decimal TEXT.
SCHEMA = """
-- Programs, one row per programId
CREATE TABLE IF NOT EXISTS programs (
    id TEXT PRIMARY KEY,
    program_admin TEXT NOT NULL,
    signer TEXT NOT NULL,
    token TEXT NOT NULL,
    distribution_pool TEXT NOT NULL,
    funding_amount TEXT NOT NULL,
    subsidy_amount TEXT NOT NULL,
    early_end_date TEXT NOT NULL,
    end_date TEXT NOT NULL,
    stopped_date TEXT NOT NULL,
    funding_compensation_amount TEXT NOT NULL,
    subsidy_compensation_amount TEXT NOT NULL,
    cancellation_date TEXT NOT NULL,
    returned_deposit TEXT NOT NULL,
    block_number INTEGER NOT NULL,
    block_timestamp INTEGER NOT NULL,
    transaction_hash TEXT NOT NULL
);

-- Lockers, keyed by locker address
CREATE TABLE IF NOT EXISTS lockers (
    id TEXT PRIMARY KEY,
    locker_owner TEXT NOT NULL,
    block_number INTEGER NOT NULL,
    block_timestamp INTEGER NOT NULL,
    transaction_hash TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_lockers_owner ON lockers(locker_owner);

-- LockerCreated audit log
CREATE TABLE IF NOT EXISTS locker_created (
    id TEXT PRIMARY KEY,
    locker_owner TEXT NOT NULL,
    locker_address TEXT NOT NULL,
    block_number INTEGER NOT NULL,
    block_timestamp INTEGER NOT NULL,
    transaction_hash TEXT NOT NULL
);

-- Claim events
CREATE TABLE IF NOT EXISTS claim_events (
    id TEXT PRIMARY KEY,
    locker TEXT NOT NULL,
    claimer TEXT NOT NULL,
    block_number INTEGER NOT NULL,
    block_timestamp INTEGER NOT NULL,
    transaction_hash TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_claim_events_locker ON claim_events(locker);

-- Per-program claim units
CREATE TABLE IF NOT EXISTS claim_units (
    id TEXT PRIMARY KEY,
    event TEXT NOT NULL,
    program_id TEXT NOT NULL,
    amount TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_claim_units_event ON claim_units(event);

-- Dynamic data sources created from templates
CREATE TABLE IF NOT EXISTS data_sources (
    address TEXT PRIMARY KEY,
    template TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_data_sources_template ON data_sources(template);
"""

_PROGRAM_BIG_FIELDS = (
    "funding_amount",
    "subsidy_amount",
    "early_end_date",
    "end_date",
    "stopped_date",
    "funding_compensation_amount",
    "subsidy_compensation_amount",
    "cancellation_date",
    "returned_deposit",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SQLiteEntityStore:
    """SQLite-backed implementation of EntityStore and DataSourceRegistry."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self._db_path)
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(SCHEMA)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        assert self._db is not None, "Store not initialized. Call initialize() first."
        return self._db

    # ── Programs ───────────────────────────────────────────

    async def get_program(self, program_id: str) -> Program | None:
        async with self.db.execute("SELECT * FROM programs WHERE id=?", (program_id,)) as cur:
            row = await cur.fetchone()
            return _row_to_program(row) if row else None

    async def save_program(self, program: Program) -> None:
        await self.db.execute(
            "INSERT OR REPLACE INTO programs"
            " (id, program_admin, signer, token, distribution_pool,"
            "  funding_amount, subsidy_amount, early_end_date, end_date, stopped_date,"
            "  funding_compensation_amount, subsidy_compensation_amount,"
            "  cancellation_date, returned_deposit,"
            "  block_number, block_timestamp, transaction_hash)"
            " VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                program.id, program.program_admin, program.signer, program.token,
                program.distribution_pool,
                *(str(getattr(program, name)) for name in _PROGRAM_BIG_FIELDS),
                program.block_number, program.block_timestamp, program.transaction_hash,
            ),
        )
        await self.db.commit()

    async def get_all_programs(self) -> list[Program]:
        # Numeric order for decimal ids
        async with self.db.execute(
            "SELECT * FROM programs ORDER BY length(id), id"
        ) as cur:
            return [_row_to_program(row) async for row in cur]

    # ── Lockers ────────────────────────────────────────────

    async def get_locker(self, address: str) -> Locker | None:
        async with self.db.execute("SELECT * FROM lockers WHERE id=?", (address,)) as cur:
            row = await cur.fetchone()
            return Locker(**dict(row)) if row else None

    async def save_locker(self, locker: Locker) -> None:
        await self.db.execute(
            "INSERT OR REPLACE INTO lockers"
            " (id, locker_owner, block_number, block_timestamp, transaction_hash)"
            " VALUES (?, ?, ?, ?, ?)",
            (
                locker.id, locker.locker_owner, locker.block_number,
                locker.block_timestamp, locker.transaction_hash,
            ),
        )
        await self.db.commit()

    async def get_all_lockers(self) -> list[Locker]:
        async with self.db.execute("SELECT * FROM lockers ORDER BY block_number, id") as cur:
            return [Locker(**dict(row)) async for row in cur]

    async def get_locker_created(self, key: str) -> LockerCreated | None:
        async with self.db.execute("SELECT * FROM locker_created WHERE id=?", (key,)) as cur:
            row = await cur.fetchone()
            return LockerCreated(**dict(row)) if row else None

    async def save_locker_created(self, record: LockerCreated) -> None:
        await self.db.execute(
            "INSERT OR REPLACE INTO locker_created"
            " (id, locker_owner, locker_address, block_number, block_timestamp,"
            "  transaction_hash)"
            " VALUES (?, ?, ?, ?, ?, ?)",
            (
                record.id, record.locker_owner, record.locker_address,
                record.block_number, record.block_timestamp, record.transaction_hash,
            ),
        )
        await self.db.commit()

    async def get_locker_created_log(self) -> list[LockerCreated]:
        # Log keys sort in (tx, log index) order, not chain order
        async with self.db.execute(
            "SELECT * FROM locker_created ORDER BY block_number, id"
        ) as cur:
            return [LockerCreated(**dict(row)) async for row in cur]

    # ── Claims ─────────────────────────────────────────────

    async def get_claim_event(self, key: str) -> FluidStreamClaimEvent | None:
        async with self.db.execute("SELECT * FROM claim_events WHERE id=?", (key,)) as cur:
            row = await cur.fetchone()
            return FluidStreamClaimEvent(**dict(row)) if row else None

    async def save_claim_event(self, record: FluidStreamClaimEvent) -> None:
        await self.db.execute(
            "INSERT OR REPLACE INTO claim_events"
            " (id, locker, claimer, block_number, block_timestamp, transaction_hash)"
            " VALUES (?, ?, ?, ?, ?, ?)",
            (
                record.id, record.locker, record.claimer, record.block_number,
                record.block_timestamp, record.transaction_hash,
            ),
        )
        await self.db.commit()

    async def get_claim_events(self, locker: str | None = None) -> list[FluidStreamClaimEvent]:
        if locker:
            query = "SELECT * FROM claim_events WHERE locker=? ORDER BY block_number, id"
            params: tuple = (locker.lower(),)
        else:
            query = "SELECT * FROM claim_events ORDER BY block_number, id"
            params = ()
        async with self.db.execute(query, params) as cur:
            return [FluidStreamClaimEvent(**dict(row)) async for row in cur]

    async def get_claim_unit(self, key: str) -> ClaimEventUnit | None:
        async with self.db.execute("SELECT * FROM claim_units WHERE id=?", (key,)) as cur:
            row = await cur.fetchone()
            return _row_to_unit(row) if row else None

    async def save_claim_unit(self, unit: ClaimEventUnit) -> None:
        await self.db.execute(
            "INSERT OR REPLACE INTO claim_units (id, event, program_id, amount)"
            " VALUES (?, ?, ?, ?)",
            (unit.id, unit.event, unit.program_id, str(unit.amount)),
        )
        await self.db.commit()

    async def get_claim_units(self, event_id: str) -> list[ClaimEventUnit]:
        # Fixed-width keys: hex order is position order
        async with self.db.execute(
            "SELECT * FROM claim_units WHERE event=? ORDER BY id", (event_id,)
        ) as cur:
            return [_row_to_unit(row) async for row in cur]

    # ── Data sources ───────────────────────────────────────

    async def create(self, template: str, address: str) -> bool:
        cur = await self.db.execute(
            "INSERT OR IGNORE INTO data_sources (address, template, created_at)"
            " VALUES (?, ?, ?)",
            (address.lower(), template, _now()),
        )
        created = cur.rowcount > 0
        await cur.close()
        await self.db.commit()
        if created:
            log.debug("Data source %s registered for %s", template, address)
        return created

    async def get_template(self, address: str) -> str | None:
        async with self.db.execute(
            "SELECT template FROM data_sources WHERE address=?", (address.lower(),)
        ) as cur:
            row = await cur.fetchone()
            return row["template"] if row else None

    async def get_addresses(self, template: str) -> list[str]:
        async with self.db.execute(
            "SELECT address FROM data_sources WHERE template=? ORDER BY created_at, address",
            (template,),
        ) as cur:
            return [row["address"] async for row in cur]

    # ── Stats ──────────────────────────────────────────────

    async def counts(self) -> StoreCounts:
        counts = StoreCounts()
        for attr, table in (
            ("programs", "programs"),
            ("lockers", "lockers"),
            ("locker_created", "locker_created"),
            ("claim_events", "claim_events"),
            ("claim_units", "claim_units"),
            ("data_sources", "data_sources"),
        ):
            async with self.db.execute(f"SELECT COUNT(*) as c FROM {table}") as cur:
                row = await cur.fetchone()
                setattr(counts, attr, row["c"] if row else 0)
        return counts


# ── Row helpers ────────────────────────────────────────────


def _row_to_program(row: aiosqlite.Row) -> Program:
    data = dict(row)
    for name in _PROGRAM_BIG_FIELDS:
        data[name] = int(data[name])
    return Program(**data)


def _row_to_unit(row: aiosqlite.Row) -> ClaimEventUnit:
    return ClaimEventUnit(
        id=row["id"],
        event=row["event"],
        program_id=row["program_id"],
        amount=int(row["amount"]),
    )
