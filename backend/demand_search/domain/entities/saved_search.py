"""Domain entity — a named, previously saved query string."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SavedSearch:
    """A saved query as held by the saved-search store.

    ``id`` and ``created_at`` are assigned by the store. Views only read the
    query to decide applicability and to re-issue it.
    """

    name: str
    query: str
    id: int | None = None
    created_at: datetime | None = None
