from .criterion import BoolOperator, Criterion, Domain
from .entity_key import EntityKey, SearchResult
from .master_data import ChannelRow, LocationRow, ProductRow
from .detail_data import Bucket, DetailDataset, ForecastElementRow, ForecastRow, HistoryRow
from .saved_search import SavedSearch
from .wire_row import WireRow

__all__ = [
    "BoolOperator",
    "Criterion",
    "Domain",
    "EntityKey",
    "SearchResult",
    "ChannelRow",
    "LocationRow",
    "ProductRow",
    "Bucket",
    "DetailDataset",
    "ForecastElementRow",
    "ForecastRow",
    "HistoryRow",
    "SavedSearch",
    "WireRow",
]
