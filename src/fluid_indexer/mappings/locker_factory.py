"""FluidLockerFactory handlers - lockers and their dynamic data sources."""

from __future__ import annotations

import logging

from fluid_indexer.abi import LOCKER
from fluid_indexer.interfaces.store import EntityStore
from fluid_indexer.interfaces.templates import DataSourceRegistry
from fluid_indexer.models.entities import Locker, LockerCreated
from fluid_indexer.models.events import LockerCreatedEvent

log = logging.getLogger(__name__)


async def handle_locker_created(
    event: LockerCreatedEvent,
    store: EntityStore,
    templates: DataSourceRegistry,
) -> None:
    """Record the new locker, its audit entry, and start watching its logs."""
    meta = event.log

    if await store.get_locker(event.locker_address) is not None:
        log.warning(
            "Locker %s already exists, not overwriting (tx %s)",
            event.locker_address, meta.tx_hash,
        )
    else:
        await store.save_locker(Locker(
            id=event.locker_address,
            locker_owner=event.locker_owner,
            block_number=meta.block_number,
            block_timestamp=meta.block_timestamp,
            transaction_hash=meta.tx_hash,
        ))
        log.info("Locker %s created for %s", event.locker_address, event.locker_owner)

    await store.save_locker_created(LockerCreated(
        id=meta.key.hex,
        locker_owner=event.locker_owner,
        locker_address=event.locker_address,
        block_number=meta.block_number,
        block_timestamp=meta.block_timestamp,
        transaction_hash=meta.tx_hash,
    ))

    # Only after the locker is persisted; nothing replays a lost registration.
    await templates.create(LOCKER, event.locker_address)
