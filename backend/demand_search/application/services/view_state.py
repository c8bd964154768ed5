"""Generic table state shared by every screen: local filters, sort, pages, CSV.

``ViewState`` is parameterised by the row type; rows are addressed by
attribute name or by backend column name (``product_id`` or ``ProductID``).
"""

import locale
import logging
import math
import unicodedata
from collections.abc import Mapping
from typing import Generic, TypeVar

from demand_search.domain.entities import WireRow

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound=WireRow)


def configure_collation(name: str = "") -> bool:
    """Use the given (default: environment) locale for string collation.

    Returns False when the locale is not available; sorting then still
    folds accents but breaks ties by code point.
    """
    try:
        locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error as exc:
        logger.warning("Collation locale %r unavailable: %s", name, exc)
        return False
    return True


def collation_key(value: object) -> tuple[str, str]:
    """Case-insensitive, accent-folded sort key (``eclair`` < ``éclair`` < ``zeta``).

    Accents only decide between otherwise equal strings, ordered by the
    active ``LC_COLLATE``.
    """
    text = str(value).lower()
    folded = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return folded.casefold(), locale.strxfrm(text)


def _csv_cell(value: object) -> str:
    return '"' + str(value).replace('"', '""') + '"'


class ViewState(Generic[RowT]):
    """Rows of one screen plus their filter, sort and pagination state.

    ``all_rows`` is the latest loaded result; ``filtered_rows`` is the
    subset left after local filters, kept in the active sort order.
    """

    def __init__(self, row_type: type[RowT], *, items_per_page: int = 20):
        if items_per_page < 1:
            raise ValueError("items_per_page must be at least 1")
        self.row_type = row_type
        self.items_per_page = items_per_page
        self.all_rows: list[RowT] = []
        self.filtered_rows: list[RowT] = []
        self.current_page = 1
        self.sort_column: str | None = None
        self.sort_ascending = True
        self._text_filters: dict[str, str] = {}
        self._exact_filters: dict[str, str] = {}

    # ── Loading ──────────────────────────────────────────────────────

    def replace_rows(self, rows: list[RowT]) -> None:
        """Swap in a freshly loaded result and re-apply the active local filters."""
        self.all_rows = list(rows)
        self._refilter()

    def clear(self) -> None:
        self.replace_rows([])

    # ── Local filters ────────────────────────────────────────────────

    def apply_local_filters(
        self,
        filters: Mapping[str, str | None],
        *,
        exact: bool = False,
    ) -> None:
        """Narrow ``all_rows`` by per-column filters, AND-combined.

        Substring filters match case-insensitively; ``exact`` filters compare
        trimmed values for equality. Blank values disable their filter.
        Always returns to page 1.
        """
        active = {
            self._column(name): value.strip()
            for name, value in filters.items()
            if value and value.strip()
        }
        if exact:
            self._exact_filters = active
        else:
            self._text_filters = {col: value.lower() for col, value in active.items()}
        self._refilter()

    def clear_filters(self) -> None:
        self._text_filters = {}
        self._exact_filters = {}
        self._refilter()

    def _matches(self, row: RowT) -> bool:
        for column, needle in self._text_filters.items():
            if needle not in str(getattr(row, column)).lower():
                return False
        for column, expected in self._exact_filters.items():
            if getattr(row, column) != expected:
                return False
        return True

    def _refilter(self) -> None:
        self.filtered_rows = [row for row in self.all_rows if self._matches(row)]
        if self.sort_column is not None:
            self._apply_sort()
        self.current_page = 1
        self._clamp_page()

    # ── Sorting ──────────────────────────────────────────────────────

    def sort_by(self, column: str) -> None:
        """Sort by a column; a second click on the same column flips the direction."""
        column = self._column(column)
        if self.sort_column == column:
            self.sort_ascending = not self.sort_ascending
        else:
            self.sort_column = column
            self.sort_ascending = True
        self._apply_sort()

    def _apply_sort(self) -> None:
        column = self.sort_column
        self.filtered_rows.sort(
            key=lambda row: collation_key(getattr(row, column)),
            reverse=not self.sort_ascending,
        )

    # ── Pagination ───────────────────────────────────────────────────

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(len(self.filtered_rows) / self.items_per_page))

    def set_page(self, page: int) -> None:
        self.current_page = min(max(1, page), self.total_pages)

    def _clamp_page(self) -> None:
        self.set_page(self.current_page)

    @property
    def page_rows(self) -> list[RowT]:
        start = (self.current_page - 1) * self.items_per_page
        return self.filtered_rows[start : start + self.items_per_page]

    def page_range(self) -> list[int]:
        return list(range(1, self.total_pages + 1))

    def visible_pages(self, window: int = 5) -> list[int]:
        """Sliding window of page numbers centred on the current page."""
        total = self.total_pages
        if total <= window:
            return self.page_range()
        start = self.current_page - window // 2
        end = self.current_page + window // 2
        if start < 1:
            start, end = 1, window
        if end > total:
            start, end = total - window + 1, total
        return list(range(start, end + 1))

    # ── Helpers ──────────────────────────────────────────────────────

    def distinct_values(self, column: str) -> list[str]:
        """Sorted, non-blank distinct values of a column across ``all_rows``."""
        column = self._column(column)
        return sorted({getattr(row, column) for row in self.all_rows if getattr(row, column)})

    def export_csv(self) -> str | None:
        """Serialize ``filtered_rows`` as CSV; None when there is nothing to export.

        Header is the backend column names of the first row; every cell is
        double-quoted with inner quotes doubled; lines end with CRLF.
        """
        if not self.filtered_rows:
            return None
        header = list(self.filtered_rows[0].to_wire())
        lines = [",".join(header)]
        for row in self.filtered_rows:
            record = row.to_wire()
            lines.append(",".join(_csv_cell(record.get(name, "")) for name in header))
        logger.debug("Exporting %d rows as CSV", len(self.filtered_rows))
        return "\r\n".join(lines)

    def _column(self, name: str) -> str:
        column = self.row_type.column_for(name)
        if column is None:
            raise ValueError(f"Unknown column '{name}' for {self.row_type.__name__}")
        return column
