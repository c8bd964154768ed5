"""Result reconciler — turns backend key sets into local row sets.

Two modes:

* filter mode: keep the locally loaded master rows whose identifier occurs
  in the returned keys (row order preserved);
* projection mode: the keys themselves become the rows.

An empty key set always reconciles to an empty result.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from demand_search.domain.entities import Domain, EntityKey, ForecastElementRow

RowT = TypeVar("RowT")

# Key fragment relevant to each master domain.
KEY_FRAGMENT: dict[Domain, Callable[[EntityKey], str]] = {
    Domain.PRODUCT: lambda key: key.product_id,
    Domain.CHANNEL: lambda key: key.channel_id,
    Domain.LOCATION: lambda key: key.location_id,
}


def filter_rows(
    keys: Iterable[EntityKey],
    rows: Sequence[RowT],
    key_of: Callable[[EntityKey], str],
    match_key_of: Callable[[RowT], str],
) -> list[RowT]:
    """Filter mode: rows whose identifier is in the projection of ``keys``."""
    allowed = {key_of(key) for key in keys}
    if not allowed:
        return []
    return [row for row in rows if match_key_of(row) in allowed]


def filter_master_rows(
    domain: Domain,
    keys: Iterable[EntityKey],
    rows: Sequence[RowT],
) -> list[RowT]:
    """Filter mode keyed on the domain identifier (ProductID, ChannelID or LocationID)."""
    attribute = f"{Domain(domain).value}_id"
    return filter_rows(
        keys,
        rows,
        KEY_FRAGMENT[Domain(domain)],
        lambda row: getattr(row, attribute),
    )


def project_keys(keys: Iterable[EntityKey]) -> list[ForecastElementRow]:
    """Projection mode: one row per distinct key triple, in arrival order."""
    unique = dict.fromkeys(keys)
    return [ForecastElementRow.from_key(key) for key in unique]
