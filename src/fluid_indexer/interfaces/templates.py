"""DataSourceRegistry protocol - dynamic watches on newly created contracts."""

from __future__ import annotations

from typing import Protocol


class DataSourceRegistry(Protocol):
    """Maps contract addresses to the template whose handlers receive their logs."""

    async def create(self, template: str, address: str) -> bool:
        """Start routing logs from ``address`` to ``template``.

        Returns False if the address was already registered.
        """
        ...

    async def get_template(self, address: str) -> str | None:
        ...

    async def get_addresses(self, template: str) -> list[str]:
        ...
