from dataclasses import dataclass, field
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from api.catalog import resolve_form
from core.auth import Session, provide_current_session
from core.guards import require_session
from core.notifications import ActionResult, Notification
from core.responses import ColumnMeta, column_meta, respond
from core.schema import RECORD_ID_KEY, FormDefinition
from core.state import AppState, provide_app_state
from views.grid import DeleteConfirmation, GridState, GridView


@dataclass
class PaginationUpdate:
    page: int = 1
    limit: int = 10


@dataclass
class RowCommit:
    row: dict[str, Any] = field(default_factory=dict)


@dataclass
class GridResponse:
    title: str
    columns: list[ColumnMeta]
    state: GridState
    notifications: list[Notification]


@dataclass
class GridActionResponse:
    result: ActionResult
    grid: GridResponse


router = APIRouter(
    prefix="/api/forms/{sector}/{form}/grid",
    tags=["grid"],
    dependencies=[Depends(require_session)],
)


async def provide_grid(
    definition: FormDefinition = Depends(resolve_form),
    app_state: AppState = Depends(provide_app_state),
    current_session: Session = Depends(provide_current_session),
) -> GridView:
    """The session's grid for the form, loaded on first use."""
    grid = app_state.grid_for(current_session, definition)
    await grid.mount()
    return grid


def _grid_response(definition: FormDefinition, grid: GridView) -> GridResponse:
    return GridResponse(
        title=definition.title,
        columns=column_meta(definition.columns),
        state=grid.state(),
        notifications=grid.drain_notifications(),
    )


@router.get("")
async def get_grid(
    definition: FormDefinition = Depends(resolve_form),
    grid: GridView = Depends(provide_grid),
) -> GridResponse:
    """Current page of the grid."""
    return _grid_response(definition, grid)


@router.put("/pagination")
async def update_pagination(
    data: PaginationUpdate,
    definition: FormDefinition = Depends(resolve_form),
    app_state: AppState = Depends(provide_app_state),
    grid: GridView = Depends(provide_grid),
) -> GridResponse:
    """Move to another page. Changing the page size returns to page 1."""
    if data.page < 1 or not 1 <= data.limit <= app_state.config.grid.max_limit:
        raise HTTPException(status_code=400, detail="Invalid page or limit")
    await grid.set_pagination(data.page, data.limit)
    return _grid_response(definition, grid)


@router.post("/refresh")
async def refresh_grid(
    definition: FormDefinition = Depends(resolve_form),
    grid: GridView = Depends(provide_grid),
) -> GridResponse:
    """Reload from page 1."""
    await grid.refresh()
    return _grid_response(definition, grid)


@router.put("/rows/{record_id}")
async def commit_row(
    record_id: str,
    data: RowCommit,
    definition: FormDefinition = Depends(resolve_form),
    grid: GridView = Depends(provide_grid),
) -> JSONResponse:
    """Replace a whole row with its edited values."""
    row = {**data.row, RECORD_ID_KEY: record_id}
    result = await grid.commit_row(row)
    return respond(GridActionResponse(result=result, grid=_grid_response(definition, grid)), result)


@router.post("/rows/{record_id}/confirmation")
async def request_delete(
    record_id: str,
    grid: GridView = Depends(provide_grid),
) -> DeleteConfirmation:
    """Ask for confirmation before a row can be deleted."""
    return grid.request_delete(record_id)


@router.delete("/rows/{record_id}/confirmation", status_code=204)
async def cancel_delete(
    record_id: str,
    grid: GridView = Depends(provide_grid),
) -> None:
    """Withdraw a pending delete."""
    grid.cancel_delete(record_id)


@router.delete("/rows/{record_id}")
async def delete_row(
    record_id: str,
    definition: FormDefinition = Depends(resolve_form),
    grid: GridView = Depends(provide_grid),
) -> JSONResponse:
    """Delete a row whose deletion was confirmed."""
    result = await grid.confirm_delete(record_id)
    return respond(GridActionResponse(result=result, grid=_grid_response(definition, grid)), result)
