"""Screens API controller — search, table operations and CSV export per screen.

Search failures are part of the screen state (``status`` / ``error_message``)
and come back with HTTP 200; only malformed requests are HTTP errors.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from demand_search.application.interfaces import SavedSearchStore
from demand_search.application.schemas import (
    BucketRequest,
    FilterRequest,
    PageRequest,
    ScreenSearchRequest,
    ScreenStateResponse,
    SortRequest,
)
from demand_search.application.services import (
    DetailScreen,
    ForecastElementScreen,
    MasterDataScreen,
    ScreenController,
)
from demand_search.domain.entities import SavedSearch
from demand_search.domain.exceptions import EntityNotFoundError, PlanningServiceError
from demand_search.infrastructure.dependencies import (
    get_saved_search_store,
    get_screen_registry,
)

router = APIRouter(prefix="/screens", tags=["screens"])


# ── Helpers ──────────────────────────────────────────────────────────


def _get_screen(
    screen: str,
    screens: dict[str, ScreenController] = Depends(get_screen_registry),
) -> ScreenController:
    controller = screens.get(screen)
    if controller is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(EntityNotFoundError("Screen", screen)),
        )
    return controller


def _unprocessable(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


def _to_state(controller: ScreenController) -> ScreenStateResponse:
    """Map a screen controller to its response schema (current page only)."""
    state = controller.state
    return ScreenStateResponse(
        name=controller.name,
        title=controller.config.title,
        status=controller.status.value,
        error_message=controller.error_message,
        last_query=controller.last_query,
        bucket=controller.bucket if isinstance(controller, DetailScreen) else None,
        export_filename=controller.export_filename,
        total_rows=len(state.all_rows),
        filtered_count=len(state.filtered_rows),
        current_page=state.current_page,
        total_pages=state.total_pages,
        items_per_page=state.items_per_page,
        visible_pages=state.visible_pages(),
        sort_column=state.sort_column,
        sort_ascending=state.sort_ascending,
        columns=list(state.row_type.wire_names().values()),
        rows=[row.to_wire() for row in state.page_rows],
        dropdown_options=(
            controller.dropdown_options() if isinstance(controller, MasterDataScreen) else {}
        ),
    )


async def _find_saved(store: SavedSearchStore, saved_id: int) -> SavedSearch:
    try:
        saved_searches = await store.list_all()
    except PlanningServiceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    for saved in saved_searches:
        if saved.id == saved_id:
            return saved
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=str(EntityNotFoundError("SavedSearch", saved_id)),
    )


# ── Endpoints ────────────────────────────────────────────────────────


@router.get("/{screen}", response_model=ScreenStateResponse)
async def get_screen_state(
    controller: ScreenController = Depends(_get_screen),
) -> ScreenStateResponse:
    """Current page, sort, filters and status of a screen."""
    return _to_state(controller)


@router.post("/{screen}/load", response_model=ScreenStateResponse)
async def load_master_data(
    controller: ScreenController = Depends(_get_screen),
) -> ScreenStateResponse:
    """(Re)load the master table behind a product, channel or location screen."""
    if not isinstance(controller, MasterDataScreen):
        raise _unprocessable(f"Screen '{controller.name}' has no master table to load.")
    await controller.load()
    return _to_state(controller)


@router.post("/{screen}/search", response_model=ScreenStateResponse)
async def search_screen(
    body: ScreenSearchRequest,
    controller: ScreenController = Depends(_get_screen),
) -> ScreenStateResponse:
    """Typed search: one attribute on master screens, three inputs on forecast elements."""
    if isinstance(controller, MasterDataScreen):
        await controller.search(body.field or "", body.term)
    elif isinstance(controller, ForecastElementScreen):
        await controller.search_fields(body.product, body.channel, body.location)
    else:
        raise _unprocessable(f"Screen '{controller.name}' only runs saved searches.")
    return _to_state(controller)


@router.post("/{screen}/saved/{saved_id}", response_model=ScreenStateResponse)
async def replay_saved_search(
    saved_id: int,
    controller: ScreenController = Depends(_get_screen),
    store: SavedSearchStore = Depends(get_saved_search_store),
) -> ScreenStateResponse:
    """Run a saved search on a screen."""
    saved = await _find_saved(store, saved_id)
    await controller.replay_saved(saved)
    return _to_state(controller)


@router.post("/{screen}/filters", response_model=ScreenStateResponse)
async def apply_filters(
    body: FilterRequest,
    controller: ScreenController = Depends(_get_screen),
) -> ScreenStateResponse:
    """Narrow the loaded rows locally; blank values clear a column's filter."""
    try:
        if body.exact:
            if not isinstance(controller, MasterDataScreen):
                raise ValueError(f"Screen '{controller.name}' has no dropdown filters.")
            controller.apply_dropdown_filters(body.filters)
        else:
            controller.apply_local_filters(body.filters)
    except ValueError as e:
        raise _unprocessable(str(e))
    return _to_state(controller)


@router.post("/{screen}/sort", response_model=ScreenStateResponse)
async def sort_screen(
    body: SortRequest,
    controller: ScreenController = Depends(_get_screen),
) -> ScreenStateResponse:
    """Sort by a column; repeating the same column flips the direction."""
    try:
        controller.sort_by(body.column)
    except ValueError as e:
        raise _unprocessable(str(e))
    return _to_state(controller)


@router.post("/{screen}/page", response_model=ScreenStateResponse)
async def change_page(
    body: PageRequest,
    controller: ScreenController = Depends(_get_screen),
) -> ScreenStateResponse:
    """Go to a page; out-of-range numbers are clamped."""
    controller.set_page(body.page)
    return _to_state(controller)


@router.post("/{screen}/bucket", response_model=ScreenStateResponse)
async def change_bucket(
    body: BucketRequest,
    controller: ScreenController = Depends(_get_screen),
) -> ScreenStateResponse:
    """Switch the time bucket of a history or forecast screen."""
    if not isinstance(controller, DetailScreen):
        raise _unprocessable(f"Screen '{controller.name}' has no time bucket.")
    await controller.set_bucket(body.bucket)
    return _to_state(controller)


@router.get("/{screen}/export")
async def export_screen(
    controller: ScreenController = Depends(_get_screen),
) -> Response:
    """Download the filtered rows as CSV; 204 when there is nothing to export."""
    content = controller.export_csv()
    if content is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{controller.export_filename}"'},
    )
