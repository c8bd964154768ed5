"""Abstract search backend interface (port)."""

from abc import ABC, abstractmethod

from demand_search.domain.entities import SearchResult


class SearchClient(ABC):
    """Port for the key search service — resolves a compiled query to key triples."""

    @abstractmethod
    async def search(self, query: str, limit: int = 5000, offset: int = 0) -> SearchResult:
        """Run a compiled query and return the matching demand-unit keys."""
        ...
