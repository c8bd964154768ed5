from .field_registry import FIELD_REGISTRY, FieldSpec, field_for_token, fields_for, resolve, tokens_for
from .query_compiler import combine_fields, compile_query, format_value
from .saved_query_validator import is_applicable
from .result_reconciler import filter_master_rows, filter_rows, project_keys
from .view_state import ViewState, collation_key, configure_collation
from .screen_controllers import (
    SCREEN_CONFIGS,
    DetailScreen,
    ForecastElementScreen,
    MasterDataScreen,
    ScreenConfig,
    ScreenController,
    ScreenStatus,
    build_screens,
)
from .query_builder_service import QueryBuilderService

__all__ = [
    "FIELD_REGISTRY",
    "FieldSpec",
    "field_for_token",
    "fields_for",
    "resolve",
    "tokens_for",
    "combine_fields",
    "compile_query",
    "format_value",
    "is_applicable",
    "filter_master_rows",
    "filter_rows",
    "project_keys",
    "ViewState",
    "collation_key",
    "configure_collation",
    "SCREEN_CONFIGS",
    "DetailScreen",
    "ForecastElementScreen",
    "MasterDataScreen",
    "ScreenConfig",
    "ScreenController",
    "ScreenStatus",
    "build_screens",
    "QueryBuilderService",
]
