"""Domain entities for search results — the demand-unit key triple."""

from dataclasses import dataclass, field
from typing import Any

from .wire_row import coerce_text


@dataclass(frozen=True)
class EntityKey:
    """(ProductID, ChannelID, LocationID) identifier of a demand unit.

    Channel-only and location-only searches still return full triples;
    consumers simply ignore the fields they do not need.
    """

    product_id: str = ""
    channel_id: str = ""
    location_id: str = ""

    @classmethod
    def from_wire(cls, raw: dict[str, Any]) -> "EntityKey":
        return cls(
            product_id=coerce_text(raw.get("ProductID")),
            channel_id=coerce_text(raw.get("ChannelID")),
            location_id=coerce_text(raw.get("LocationID")),
        )

    def to_wire(self) -> dict[str, str]:
        return {
            "ProductID": self.product_id,
            "ChannelID": self.channel_id,
            "LocationID": self.location_id,
        }


@dataclass
class SearchResult:
    """Snapshot returned by the search backend for one compiled query."""

    query: str
    count: int = 0
    keys: list[EntityKey] = field(default_factory=list)

    @classmethod
    def from_wire(cls, raw: dict[str, Any]) -> "SearchResult":
        raw_keys = raw.get("keys") or []
        if not isinstance(raw_keys, list) or not all(isinstance(k, dict) for k in raw_keys):
            raise ValueError("search keys must be a list of objects")
        keys = [EntityKey.from_wire(k) for k in raw_keys]
        return cls(
            query=str(raw.get("query") or ""),
            count=int(raw.get("count") or len(keys)),
            keys=keys,
        )
