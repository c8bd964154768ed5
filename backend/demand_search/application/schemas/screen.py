"""Pydantic DTOs for the per-screen search, table and export endpoints."""

from pydantic import BaseModel, Field

from demand_search.domain.entities import Bucket


class ScreenSearchRequest(BaseModel):
    """Typed search input.

    Master screens use ``field`` + ``term``; the forecast-element screen
    uses the three identifier inputs.
    """

    field: str | None = Field(None, examples=["Business Unit"])
    term: str | None = None
    product: str | None = None
    channel: str | None = None
    location: str | None = None


class FilterRequest(BaseModel):
    """Column → filter value; blank values switch a column's filter off.

    ``exact`` selects the product screen's dropdown filters.
    """

    filters: dict[str, str | None] = Field(default_factory=dict)
    exact: bool = False


class SortRequest(BaseModel):
    column: str = Field(..., min_length=1, examples=["ProductID"])


class PageRequest(BaseModel):
    page: int


class BucketRequest(BaseModel):
    bucket: Bucket


class ScreenStateResponse(BaseModel):
    """Current page of a screen plus everything needed to draw its controls."""

    name: str
    title: str
    status: str
    error_message: str | None = None
    last_query: str | None = None
    bucket: Bucket | None = None
    export_filename: str
    total_rows: int
    filtered_count: int
    current_page: int
    total_pages: int
    items_per_page: int
    visible_pages: list[int]
    sort_column: str | None = None
    sort_ascending: bool = True
    columns: list[str]
    rows: list[dict[str, str]]
    dropdown_options: dict[str, list[str]] = Field(default_factory=dict)
