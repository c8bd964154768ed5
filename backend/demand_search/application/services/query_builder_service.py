"""Query builder — assemble cross-domain criteria and save them as a named search."""

import logging
from typing import Any

from demand_search.application.interfaces import MasterDataClient, SavedSearchStore
from demand_search.domain.entities import (
    BoolOperator,
    ChannelRow,
    Criterion,
    Domain,
    LocationRow,
    ProductRow,
    SavedSearch,
    WireRow,
)
from demand_search.domain.exceptions import QueryValidationError, UnknownFieldError

from .field_registry import FieldSpec, field_for_token, fields_for
from .query_compiler import compile_query, parse_operator

logger = logging.getLogger(__name__)

_ROW_TYPES: dict[Domain, type[WireRow]] = {
    Domain.PRODUCT: ProductRow,
    Domain.CHANNEL: ChannelRow,
    Domain.LOCATION: LocationRow,
}


class QueryBuilderService:
    """Editable, ordered list of criteria over any of the three master domains.

    Value suggestions come from the master tables, loaded on demand through
    the master data collaborator.
    """

    def __init__(self, master_data: MasterDataClient, store: SavedSearchStore):
        self._master_data = master_data
        self._store = store
        self._master_rows: dict[Domain, list[WireRow]] = {}
        self.criteria: list[Criterion] = []

    # ── Field and value options ──────────────────────────────────────

    @staticmethod
    def field_options(domain: Domain | str) -> list[FieldSpec]:
        return fields_for(domain)

    async def load_master_data(self) -> None:
        """Fetch the three master tables used for value suggestions."""
        loaders = {
            Domain.PRODUCT: self._master_data.list_products,
            Domain.CHANNEL: self._master_data.list_channels,
            Domain.LOCATION: self._master_data.list_locations,
        }
        for domain, loader in loaders.items():
            raw_rows: list[dict[str, Any]] = await loader()
            self._master_rows[domain] = [_ROW_TYPES[domain].from_wire(r) for r in raw_rows or []]
            logger.debug("Query builder loaded %d %s rows", len(self._master_rows[domain]), domain.value)

    def value_options(self, token: str) -> list[str]:
        """Distinct, non-blank values of the field behind a token, sorted."""
        spec = self._require(token)
        values = {
            str(getattr(row, spec.attribute))
            for row in self._master_rows.get(spec.domain, [])
        }
        return sorted(v for v in values if v.strip())

    # ── Criteria editing ─────────────────────────────────────────────

    def add_criterion(
        self,
        token: str,
        value: str,
        operator: BoolOperator | str = BoolOperator.AND,
    ) -> bool:
        """Append a criterion; blank values and exact duplicates are ignored.

        ``operator`` is the one placed before the new criterion.
        """
        spec = self._require(token)
        value = (value or "").strip()
        if not value:
            return False
        if any(c.field == spec.token and c.value == value for c in self.criteria):
            return False
        self.criteria.append(
            Criterion(field=spec.token, value=value, operator=parse_operator(operator))
        )
        return True

    def remove_criterion(self, index: int) -> None:
        del self.criteria[index]

    def set_operator(self, index: int, operator: BoolOperator | str) -> None:
        current = self.criteria[index]
        self.criteria[index] = Criterion(
            field=current.field,
            value=current.value,
            operator=parse_operator(operator),
        )

    def clear(self) -> None:
        self.criteria = []

    @property
    def query(self) -> str:
        return compile_query(self.criteria) or ""

    async def save(self, name: str) -> SavedSearch:
        """Persist the compiled query under a name."""
        return await self.save_query(name, self.query)

    async def save_query(self, name: str, query: str) -> SavedSearch:
        """Persist an already compiled query string under a name."""
        name = (name or "").strip()
        query = (query or "").strip()
        if not name:
            raise QueryValidationError("Please enter a name.")
        if not query:
            raise QueryValidationError("Please add at least one criterion.")
        saved = await self._store.create(name, query)
        logger.info("Saved search %r: %s", saved.name, saved.query)
        return saved

    @staticmethod
    def _require(token: str) -> FieldSpec:
        spec = field_for_token(token)
        if spec is None:
            raise UnknownFieldError(token)
        return spec
