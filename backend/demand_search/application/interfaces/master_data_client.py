"""Abstract master data interface (port)."""

from abc import ABC, abstractmethod
from typing import Any


class MasterDataClient(ABC):
    """Port for full snapshots of the product, channel and location tables.

    Rows are returned raw; screens coerce them once when loading.
    """

    @abstractmethod
    async def list_products(self) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    async def list_channels(self) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    async def list_locations(self) -> list[dict[str, Any]]:
        ...
