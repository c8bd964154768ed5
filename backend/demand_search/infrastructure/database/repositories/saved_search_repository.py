"""Concrete SavedSearchStore backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from demand_search.application.interfaces import SavedSearchStore
from demand_search.domain.entities import SavedSearch
from demand_search.infrastructure.database.models import SavedSearchModel


class SQLAlchemySavedSearchRepository(SavedSearchStore):
    """Implements the SavedSearchStore port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: SavedSearchModel) -> SavedSearch:
        """Map ORM model → domain entity."""
        return SavedSearch(
            id=model.id,
            name=model.name,
            query=model.query,
            created_at=model.created_at,
        )

    async def list_all(self) -> list[SavedSearch]:
        stmt = select(SavedSearchModel).order_by(SavedSearchModel.id)
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, name: str, query: str) -> SavedSearch:
        model = SavedSearchModel(name=name, query=query)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)
