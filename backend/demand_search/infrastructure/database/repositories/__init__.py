from .saved_search_repository import SQLAlchemySavedSearchRepository

__all__ = ["SQLAlchemySavedSearchRepository"]
