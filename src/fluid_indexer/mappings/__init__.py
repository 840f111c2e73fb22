"""Event handlers, one module per contract."""

from fluid_indexer.mappings.program_manager import (
    get_or_create_program,
    handle_program_created,
    handle_program_funded,
    handle_program_signer_updated,
    handle_program_stopped,
    handle_program_cancelled,
)
from fluid_indexer.mappings.locker_factory import handle_locker_created
from fluid_indexer.mappings.locker import (
    handle_fluid_stream_claimed,
    handle_fluid_streams_claimed,
)

__all__ = [
    "get_or_create_program",
    "handle_program_created", "handle_program_funded",
    "handle_program_signer_updated", "handle_program_stopped",
    "handle_program_cancelled",
    "handle_locker_created",
    "handle_fluid_stream_claimed", "handle_fluid_streams_claimed",
]
