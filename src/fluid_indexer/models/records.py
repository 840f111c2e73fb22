"""Operation result records."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class IndexRunSummary:
    """Result of indexing one log source."""

    logs_seen: int = 0
    events_handled: int = 0
    logs_skipped: int = 0  # unwatched address, unknown or unbound event
    handled_by_kind: dict[str, int] = field(default_factory=dict)
    last_block: int | None = None
