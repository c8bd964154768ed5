"""Abstract bulk detail interface (port) — history and forecast by keys."""

from abc import ABC, abstractmethod
from typing import Any

from demand_search.domain.entities import Bucket, DetailDataset, EntityKey


class DetailClient(ABC):
    """Port for bulk history/forecast retrieval keyed by demand-unit triples."""

    @abstractmethod
    async def fetch_by_keys(
        self,
        dataset: DetailDataset,
        bucket: Bucket,
        keys: list[EntityKey],
    ) -> list[dict[str, Any]]:
        """Fetch raw detail rows for all given keys in one batch request."""
        ...
