"""Detail rows keyed by the demand-unit triple — history, forecast, forecast elements."""

from dataclasses import dataclass
from enum import Enum

from .entity_key import EntityKey
from .wire_row import WireRow, wire


class Bucket(str, Enum):
    """Time granularity of history/forecast retrieval."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def label(self) -> str:
        """Display name, e.g. ``Weekly`` (used in export filenames)."""
        return self.value.capitalize()


class DetailDataset(str, Enum):
    """Bulk detail endpoint family."""

    HISTORY = "history"
    FORECAST = "forecast"


@dataclass
class ForecastElementRow(WireRow):
    """A demand unit as shown on the forecast-element screen."""

    product_id: str = wire("ProductID")
    channel_id: str = wire("ChannelID")
    location_id: str = wire("LocationID")

    @classmethod
    def from_key(cls, key: EntityKey) -> "ForecastElementRow":
        return cls(
            product_id=key.product_id,
            channel_id=key.channel_id,
            location_id=key.location_id,
        )


@dataclass
class HistoryRow(WireRow):
    product_id: str = wire("ProductID")
    location_id: str = wire("LocationID")
    channel_id: str = wire("ChannelID")
    period: str = wire("Period")
    start_date: str = wire("StartDate")
    end_date: str = wire("EndDate")
    qty: str = wire("Qty")
    type: str = wire("Type")
    level: str = wire("Level")


@dataclass
class ForecastRow(WireRow):
    product_id: str = wire("ProductID")
    channel_id: str = wire("ChannelID")
    location_id: str = wire("LocationID")
    method: str = wire("Method")
    period: str = wire("Period")
    start_date: str = wire("StartDate")
    end_date: str = wire("EndDate")
    type: str = wire("Type")
    qty: str = wire("Qty")
    level: str = wire("Level")
