"""Composite record keys derived from a log's position on chain."""

from __future__ import annotations

from dataclasses import dataclass

TX_HASH_SIZE = 32
INDEX_SIZE = 4  # log index and array position, big-endian uint32

_MAX_INDEX = 2 ** (8 * INDEX_SIZE) - 1


@dataclass(frozen=True)
class LogKey:
    """Identifies one emitted log, optionally one element inside it.

    Serialized as ``tx_hash || log_index || [position]`` with fixed widths,
    so keys with and without a position can never collide.
    """

    tx_hash: bytes
    log_index: int
    position: int | None = None

    def __post_init__(self) -> None:
        if len(self.tx_hash) != TX_HASH_SIZE:
            raise ValueError(f"tx_hash must be {TX_HASH_SIZE} bytes, got {len(self.tx_hash)}")
        if not 0 <= self.log_index <= _MAX_INDEX:
            raise ValueError(f"log_index out of range: {self.log_index}")
        if self.position is not None and not 0 <= self.position <= _MAX_INDEX:
            raise ValueError(f"position out of range: {self.position}")

    @classmethod
    def from_hex(cls, tx_hash: str, log_index: int, position: int | None = None) -> LogKey:
        return cls(bytes.fromhex(_strip_0x(tx_hash)), log_index, position)

    @classmethod
    def parse(cls, key: str) -> LogKey:
        """Inverse of `hex`."""
        raw = bytes.fromhex(_strip_0x(key))
        if len(raw) not in (TX_HASH_SIZE + INDEX_SIZE, TX_HASH_SIZE + 2 * INDEX_SIZE):
            raise ValueError(f"not a log key: {key}")
        log_end = TX_HASH_SIZE + INDEX_SIZE
        position = None
        if len(raw) > log_end:
            position = int.from_bytes(raw[log_end:], "big")
        return cls(raw[:TX_HASH_SIZE], int.from_bytes(raw[TX_HASH_SIZE:log_end], "big"), position)

    def child(self, position: int) -> LogKey:
        """Key for the element at ``position`` within this log."""
        return LogKey(self.tx_hash, self.log_index, position)

    def to_bytes(self) -> bytes:
        out = self.tx_hash + self.log_index.to_bytes(INDEX_SIZE, "big")
        if self.position is not None:
            out += self.position.to_bytes(INDEX_SIZE, "big")
        return out

    @property
    def hex(self) -> str:
        return "0x" + self.to_bytes().hex()

    def __str__(self) -> str:
        return self.hex


def _strip_0x(value: str) -> str:
    return value[2:] if value[:2].lower() == "0x" else value
