"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from demand_search.presentation.api.v1.endpoints.health import router as health_router
from demand_search.presentation.api.v1.query_controller import router as query_router
from demand_search.presentation.api.v1.saved_searches_controller import router as saved_searches_router
from demand_search.presentation.api.v1.screens_controller import router as screens_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(query_router)
router.include_router(saved_searches_router)
router.include_router(screens_router)
