from .base import Base
from .session import get_db_session, get_engine, get_session_factory
from .models import SavedSearchModel

__all__ = [
    "Base",
    "get_db_session",
    "get_engine",
    "get_session_factory",
    "SavedSearchModel",
]
