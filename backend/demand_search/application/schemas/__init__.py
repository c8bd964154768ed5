from .query import (
    ApplicabilityRequest,
    ApplicabilityResponse,
    CompileRequest,
    CompileResponse,
    CriterionSchema,
    FieldSchema,
    FieldValuesResponse,
)
from .saved_search import SavedSearchCreate, SavedSearchResponse
from .screen import (
    BucketRequest,
    FilterRequest,
    PageRequest,
    ScreenSearchRequest,
    ScreenStateResponse,
    SortRequest,
)

__all__ = [
    "ApplicabilityRequest",
    "ApplicabilityResponse",
    "CompileRequest",
    "CompileResponse",
    "CriterionSchema",
    "FieldSchema",
    "FieldValuesResponse",
    "SavedSearchCreate",
    "SavedSearchResponse",
    "BucketRequest",
    "FilterRequest",
    "PageRequest",
    "ScreenSearchRequest",
    "ScreenStateResponse",
    "SortRequest",
]
