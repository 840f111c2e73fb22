"""Indexer - routes raw logs to the contract handlers."""

from __future__ import annotations

import logging
from contextlib import aclosing

from fluid_indexer.abi import LOCKER, LOCKER_FACTORY, PROGRAM_MANAGER
from fluid_indexer.evm.decoder import EventDecoder
from fluid_indexer.interfaces.source import ContractEvent, LogSource
from fluid_indexer.interfaces.templates import DataSourceRegistry
from fluid_indexer.mappings.locker import (
    handle_fluid_stream_claimed,
    handle_fluid_streams_claimed,
)
from fluid_indexer.mappings.locker_factory import handle_locker_created
from fluid_indexer.mappings.program_manager import (
    handle_program_cancelled,
    handle_program_created,
    handle_program_funded,
    handle_program_signer_updated,
    handle_program_stopped,
)
from fluid_indexer.models.config import IndexerConfig
from fluid_indexer.models.events import (
    EventLog,
    FluidStreamClaimed,
    FluidStreamsClaimed,
    LockerCreatedEvent,
    ProgramCancelled,
    ProgramCreated,
    ProgramFunded,
    ProgramSignerUpdated,
    ProgramStopped,
)
from fluid_indexer.models.records import IndexRunSummary
from fluid_indexer.storage.sqlite import SQLiteEntityStore

log = logging.getLogger(__name__)


class Indexer:
    """Processes logs one at a time, in the order they are delivered.

    Logs from the configured program manager and locker factory addresses
    are decoded with those contracts' ABIs; logs from any address
    registered through the FluidLocker template use the locker ABI.
    Each handler finishes, including its store commits, before the next
    log is taken.
    """

    def __init__(
        self,
        cfg: IndexerConfig,
        store: SQLiteEntityStore | None = None,
        templates: DataSourceRegistry | None = None,
    ) -> None:
        self._cfg = cfg
        self.store = store or SQLiteEntityStore(cfg.db_path)
        self.templates: DataSourceRegistry = templates or self.store
        self.decoders = {
            PROGRAM_MANAGER: EventDecoder.for_contract(PROGRAM_MANAGER),
            LOCKER_FACTORY: EventDecoder.for_contract(LOCKER_FACTORY),
            LOCKER: EventDecoder.for_contract(LOCKER),
        }
        self._static_sources = {
            addr.lower(): name
            for addr, name in (
                (cfg.program_manager_address, PROGRAM_MANAGER),
                (cfg.locker_factory_address, LOCKER_FACTORY),
            )
            if addr
        }

    async def initialize(self) -> None:
        await self.store.initialize()
        lockers = await self.templates.get_addresses(LOCKER)
        log.info(
            "Indexer ready on %s (%d static sources, %d watched lockers)",
            self._cfg.network, len(self._static_sources), len(lockers),
        )

    async def close(self) -> None:
        await self.store.close()

    async def data_source_for(self, address: str) -> str | None:
        """Name of the contract whose ABI and handlers apply to ``address``."""
        address = address.lower()
        if address in self._static_sources:
            return self._static_sources[address]
        return await self.templates.get_template(address)

    async def process_log(self, raw: EventLog) -> ContractEvent | None:
        """Decode and handle one log. Returns the handled event, if any."""
        source = await self.data_source_for(raw.address)
        if source is None:
            log.debug("No data source for %s, skipping log %s", raw.address, raw.tx_hash)
            return None

        event = self.decoders[source].decode(raw)
        if event is None:
            return None

        log.debug(
            "%s at block %d (tx %s, log %d)",
            type(event).__name__, raw.block_number, raw.tx_hash, raw.log_index,
        )
        await self.handle_event(event)
        return event

    async def handle_event(self, event: ContractEvent) -> None:
        if isinstance(event, ProgramCreated):
            await handle_program_created(event, self.store)
        elif isinstance(event, ProgramFunded):
            await handle_program_funded(event, self.store)
        elif isinstance(event, ProgramSignerUpdated):
            await handle_program_signer_updated(event, self.store)
        elif isinstance(event, ProgramStopped):
            await handle_program_stopped(event, self.store)
        elif isinstance(event, ProgramCancelled):
            await handle_program_cancelled(event, self.store)
        elif isinstance(event, LockerCreatedEvent):
            await handle_locker_created(event, self.store, self.templates)
        elif isinstance(event, FluidStreamClaimed):
            await handle_fluid_stream_claimed(event, self.store)
        elif isinstance(event, FluidStreamsClaimed):
            await handle_fluid_streams_claimed(event, self.store)
        else:
            raise TypeError(f"No handler for {type(event).__name__}")

    async def run(self, source: LogSource) -> IndexRunSummary:
        """Index every log from ``source``; the first failure aborts the run."""
        summary = IndexRunSummary()
        async with aclosing(source.logs()) as logs:
            async for raw in logs:
                summary.logs_seen += 1
                try:
                    event = await self.process_log(raw)
                except Exception:
                    log.error(
                        "Indexing aborted at block %d (tx %s, log %d)",
                        raw.block_number, raw.tx_hash, raw.log_index,
                        exc_info=True,
                    )
                    raise
                summary.last_block = raw.block_number
                if event is None:
                    summary.logs_skipped += 1
                    continue
                kind = type(event).__name__
                summary.events_handled += 1
                summary.handled_by_kind[kind] = summary.handled_by_kind.get(kind, 0) + 1

        log.info(
            "Indexed %d logs: %d events handled, %d skipped",
            summary.logs_seen, summary.events_handled, summary.logs_skipped,
        )
        return summary
