"""LogSource protocol - supplies raw logs in chain order."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Protocol, Union

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

ContractEvent = Union[
    ProgramCreated,
    ProgramFunded,
    ProgramSignerUpdated,
    ProgramStopped,
    ProgramCancelled,
    LockerCreatedEvent,
    FluidStreamClaimed,
    FluidStreamsClaimed,
]


class LogSource(Protocol):
    """Yields raw logs for every watched address, in canonical order."""

    def logs(self) -> AsyncGenerator[EventLog, None]:
        ...
