"""Contract event ABIs shipped with the package."""

import json
from collections.abc import Iterable, Sequence
from importlib import resources
from typing import Any, Literal

from eth_utils.abi import event_signature_to_log_topic
from pydantic import BaseModel

PROGRAM_MANAGER = "FluidEPProgramManager"
LOCKER_FACTORY = "FluidLockerFactory"
LOCKER = "FluidLocker"


class AbiInput(BaseModel):
    indexed: bool
    internalType: str
    name: str
    type: str


class AbiEvent(BaseModel):
    anonymous: bool
    inputs: Sequence[AbiInput]
    name: str
    type: Literal["event"]

    @property
    def indexed_inputs(self) -> list[AbiInput]:
        return [i for i in self.inputs if i.indexed]

    @property
    def data_inputs(self) -> list[AbiInput]:
        return [i for i in self.inputs if not i.indexed]


def get_event_signature(event: AbiEvent) -> str:
    return f"{event.name}({','.join(event_input.type for event_input in event.inputs)})"


def get_event_topic0(event: AbiEvent) -> str:
    return "0x" + event_signature_to_log_topic(get_event_signature(event)).hex()


def get_events_from_abi(abi: Iterable[dict[str, Any]]) -> dict[str, AbiEvent]:
    return {entry["name"]: AbiEvent.model_validate(entry) for entry in abi if entry["type"] == "event"}


def load_contract_events(contract: str) -> dict[str, AbiEvent]:
    """Events of one of the bundled contract ABIs, by event name."""
    text = resources.files(__name__).joinpath(f"{contract}.json").read_text()
    return get_events_from_abi(json.loads(text))
