"""Protocol interfaces for the fluid_indexer components."""

from fluid_indexer.interfaces.source import LogSource, ContractEvent
from fluid_indexer.interfaces.store import EntityStore
from fluid_indexer.interfaces.templates import DataSourceRegistry

__all__ = [
    "LogSource", "ContractEvent",
    "EntityStore",
    "DataSourceRegistry",
]
