from .search_client import SearchClient
from .detail_client import DetailClient
from .master_data_client import MasterDataClient
from .saved_search_store import SavedSearchStore

__all__ = [
    "SearchClient",
    "DetailClient",
    "MasterDataClient",
    "SavedSearchStore",
]
