"""ABI-driven decoding of raw logs into typed contract events.

One `EventDecoder` serves one contract ABI. Logs are matched on topic0
(keccak of the canonical event signature); indexed parameters are read
from the remaining topics and the rest are ABI-decoded from ``data``.
Only events with a binding below become typed events; other known events
are skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from eth_abi import decode as abi_decode

from fluid_indexer.abi import AbiEvent, get_event_topic0, load_contract_events
from fluid_indexer.interfaces.source import ContractEvent
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

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventBinding:
    """Maps ABI parameter names onto the fields of a typed event."""

    cls: type
    fields: Mapping[str, str]  # ABI param name -> dataclass field


BINDINGS: dict[str, EventBinding] = {
    "ProgramCreated": EventBinding(ProgramCreated, {
        "programId": "program_id",
        "programAdmin": "program_admin",
        "signer": "signer",
        "token": "token",
        "distributionPool": "distribution_pool",
    }),
    "ProgramFunded": EventBinding(ProgramFunded, {
        "programId": "program_id",
        "fundingAmount": "funding_amount",
        "subsidyAmount": "subsidy_amount",
        "earlyEndDate": "early_end_date",
        "endDate": "end_date",
    }),
    "ProgramSignerUpdated": EventBinding(ProgramSignerUpdated, {
        "programId": "program_id",
        "newSigner": "new_signer",
    }),
    "ProgramStopped": EventBinding(ProgramStopped, {
        "programId": "program_id",
        "fundingCompensationAmount": "funding_compensation_amount",
        "subsidyCompensationAmount": "subsidy_compensation_amount",
    }),
    "ProgramCancelled": EventBinding(ProgramCancelled, {
        "programId": "program_id",
        "returnedDeposit": "returned_deposit",
    }),
    "LockerCreated": EventBinding(LockerCreatedEvent, {
        "lockerOwner": "locker_owner",
        "lockerAddress": "locker_address",
    }),
    "FluidStreamClaimed": EventBinding(FluidStreamClaimed, {
        "programId": "program_id",
        "totalProgramUnits": "total_program_units",
    }),
    "FluidStreamsClaimed": EventBinding(FluidStreamsClaimed, {
        "programIds": "program_ids",
        "totalProgramUnits": "total_program_units",
    }),
}


def _normalize(value: Any, typ: str) -> Any:
    """Lowercase addresses, turn arrays into tuples."""
    if typ.endswith("[]"):
        return tuple(_normalize(v, typ[:-2]) for v in value)
    if typ == "address":
        return value.lower()
    if isinstance(value, bytes):
        return "0x" + value.hex()
    return value


class EventDecoder:
    """Decodes logs emitted by one contract type."""

    def __init__(self, events: Iterable[AbiEvent]) -> None:
        self._events: dict[str, AbiEvent] = {get_event_topic0(e): e for e in events}

    @classmethod
    def for_contract(cls, contract: str) -> EventDecoder:
        return cls(load_contract_events(contract).values())

    def event_for(self, topic0: str) -> AbiEvent | None:
        return self._events.get(topic0.lower())

    def decode_values(self, event: AbiEvent, raw: EventLog) -> dict[str, Any]:
        """Decode every parameter of ``event`` from ``raw``.

        Raises ValueError when the log does not match the ABI.
        """
        indexed = event.indexed_inputs
        if len(raw.topics) != len(indexed) + 1:
            raise ValueError(
                f"{event.name}: expected {len(indexed) + 1} topics, got {len(raw.topics)}"
            )

        values: dict[str, Any] = {}
        for inp, topic in zip(indexed, raw.topics[1:]):
            (value,) = abi_decode([inp.type], bytes.fromhex(topic[2:]))
            values[inp.name] = _normalize(value, inp.type)

        data_inputs = event.data_inputs
        if data_inputs:
            decoded = abi_decode([i.type for i in data_inputs], raw.data)
            for inp, value in zip(data_inputs, decoded):
                values[inp.name] = _normalize(value, inp.type)
        return values

    def decode(self, raw: EventLog) -> ContractEvent | None:
        """Decode ``raw`` into a typed event, or None if it is not one we handle."""
        if not raw.topics:
            return None

        event = self.event_for(raw.topics[0])
        if event is None:
            log.debug("Unknown topic0 %s from %s", raw.topics[0], raw.address)
            return None

        binding = BINDINGS.get(event.name)
        if binding is None:
            log.debug("Ignoring event kind: %s", event.name)
            return None

        values = self.decode_values(event, raw)
        kwargs = {field: values[param] for param, field in binding.fields.items()}
        return binding.cls(log=raw.meta(), **kwargs)
