"""Abstract saved-search store interface (port)."""

from abc import ABC, abstractmethod

from demand_search.domain.entities import SavedSearch


class SavedSearchStore(ABC):
    """Port for saved searches — list and create only."""

    @abstractmethod
    async def list_all(self) -> list[SavedSearch]:
        """Return every saved search."""
        ...

    @abstractmethod
    async def create(self, name: str, query: str) -> SavedSearch:
        """Persist a new saved search and return it with its assigned id."""
        ...
