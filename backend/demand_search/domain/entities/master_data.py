"""Master data rows — product, channel and location tables."""

from dataclasses import dataclass

from .wire_row import WireRow, wire


@dataclass
class ProductRow(WireRow):
    product_id: str = wire("ProductID")
    product_descr: str = wire("ProductDescr")
    level: str = wire("Level")
    business_unit: str = wire("BusinessUnit")
    is_daily_forecast_required: str = wire("IsDailyForecastRequired")
    is_new: str = wire("IsNew")
    product_family: str = wire("ProductFamily")


@dataclass
class ChannelRow(WireRow):
    channel_id: str = wire("ChannelID")
    channel_descr: str = wire("ChannelDescr")
    level: str = wire("Level")


@dataclass
class LocationRow(WireRow):
    location_id: str = wire("LocationID")
    location_descr: str = wire("LocationDescr")
    level: str = wire("Level")
    geography: str = wire("Geography")
