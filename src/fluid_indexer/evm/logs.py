"""Raw log normalization and the JSON-lines log source."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncGenerator, Mapping
from pathlib import Path
from typing import Any

from eth_utils import is_address, to_bytes

from fluid_indexer.models.events import EventLog

log = logging.getLogger(__name__)


def _quantity(value: Any) -> int:
    """Parse a JSON-RPC quantity: hex string or plain int."""
    if isinstance(value, int):
        return value
    text = str(value)
    if text.lower().startswith("0x"):
        return int(text, 16)
    return int(text)


def _hex(value: str) -> str:
    text = value.lower()
    return text if text.startswith("0x") else "0x" + text


def event_log_from_rpc(item: Mapping[str, Any]) -> EventLog:
    """Build an EventLog from an ``eth_getLogs`` result object.

    Besides the standard fields the object must carry ``blockTimestamp``
    and the transaction sender as ``transactionFrom`` (or ``from``).
    Raises KeyError/ValueError on malformed input.
    """
    address = item["address"]
    if not is_address(address):
        raise ValueError(f"invalid log address: {address!r}")
    sender = item.get("transactionFrom", item.get("from"))
    if sender is None:
        raise KeyError("transactionFrom")

    return EventLog(
        address=_hex(address),
        topics=tuple(_hex(t) for t in item["topics"]),
        data=to_bytes(hexstr=item.get("data") or "0x"),
        block_number=_quantity(item["blockNumber"]),
        block_timestamp=_quantity(item["blockTimestamp"]),
        tx_hash=_hex(item["transactionHash"]),
        tx_from=_hex(sender),
        log_index=_quantity(item["logIndex"]),
    )


class JsonlLogSource:
    """Reads logs from a JSON-lines file, one ``eth_getLogs`` object per line.

    Logs are yielded in file order, which must be chain order.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    async def logs(self) -> AsyncGenerator[EventLog, None]:
        with open(self._path) as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                item = json.loads(line)
                if item.get("removed"):
                    log.debug("Skipping removed log at %s:%d", self._path, lineno)
                    continue
                yield event_log_from_rpc(item)
