"""Saved-search endpoints — list and create only."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from demand_search.application.interfaces import SavedSearchStore
from demand_search.application.schemas import SavedSearchCreate, SavedSearchResponse
from demand_search.application.services import QueryBuilderService
from demand_search.domain.exceptions import PlanningServiceError, QueryValidationError
from demand_search.infrastructure.dependencies import (
    get_query_builder_service,
    get_saved_search_store,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/saved-searches", tags=["Saved searches"])


@router.get("", response_model=list[SavedSearchResponse])
async def list_saved_searches(
    store: SavedSearchStore = Depends(get_saved_search_store),
) -> list[SavedSearchResponse]:
    """All saved searches, in store order."""
    try:
        saved = await store.list_all()
    except PlanningServiceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return [SavedSearchResponse.model_validate(s, from_attributes=True) for s in saved]


@router.post("", response_model=SavedSearchResponse, status_code=status.HTTP_201_CREATED)
async def create_saved_search(
    data: SavedSearchCreate,
    builder: QueryBuilderService = Depends(get_query_builder_service),
) -> SavedSearchResponse:
    """Save a named query, given either as criteria or as a compiled string."""
    try:
        if data.criteria:
            for c in data.criteria:
                builder.add_criterion(c.field, c.value, c.operator)
            saved = await builder.save(data.name)
        else:
            saved = await builder.save_query(data.name, data.query or "")
    except QueryValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    except PlanningServiceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return SavedSearchResponse.model_validate(saved, from_attributes=True)
