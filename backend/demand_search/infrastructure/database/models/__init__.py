from .saved_search import SavedSearchModel

__all__ = ["SavedSearchModel"]
