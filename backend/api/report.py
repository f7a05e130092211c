from dataclasses import dataclass
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from api.catalog import resolve_form
from core.gateway import FormsGateway, Page
from core.guards import require_session
from core.notifications import ActionResult
from core.responses import PageResponse, column_meta, respond
from core.schema import FormDefinition, WidgetKind
from core.state import AppState, provide_app_state, provide_gateway
from views.report import FilterControl, ReportPage, ReportView


RESERVED_PARAMS = {"page", "limit"}


@dataclass
class ReportResponse:
    title: str
    filters: dict[str, Any]
    controls: list[FilterControl]
    page: PageResponse | None
    result: ActionResult


router = APIRouter(
    prefix="/api/forms/{sector}/{form}/report",
    tags=["report"],
    dependencies=[Depends(require_session)],
)


def _raw_filters(request: Request, definition: FormDefinition) -> dict[str, Any]:
    """Query parameters other than paging; multi-selects may repeat."""
    raw: dict[str, Any] = {}
    for name in request.query_params:
        if name in RESERVED_PARAMS:
            continue
        schema = definition.get_field(name)
        if schema and schema.widget_kind == WidgetKind.MULTISELECT:
            raw[name] = request.query_params.getlist(name)
        else:
            raw[name] = request.query_params.get(name)
    return raw


@router.get("")
async def get_report(
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1),
    definition: FormDefinition = Depends(resolve_form),
    gateway: FormsGateway = Depends(provide_gateway),
    app_state: AppState = Depends(provide_app_state),
) -> JSONResponse:
    """Read-only listing; every query parameter named after a field filters it."""
    if limit > app_state.config.grid.max_limit:
        raise HTTPException(status_code=400, detail="Invalid page or limit")

    async def fetch(page: int, limit: int, filters: dict[str, Any]) -> Page:
        return await gateway.list(definition.form, definition.sector, page, limit, filters)

    view = ReportView(definition.fields, definition.columns, fetch)
    result = await view.query(_raw_filters(request, definition), page=page, limit=limit)
    report: ReportPage = result.data
    result.data = None

    page_response = None
    if report.page is not None:
        page_response = PageResponse(
            columns=column_meta(definition.columns),
            data=report.page.records,
            total=report.page.total,
            page=report.page.page,
            limit=report.page.limit,
        )

    body = ReportResponse(
        title=definition.title,
        filters=report.filters,
        controls=view.filter_controls(),
        page=page_response,
        result=result,
    )
    return respond(body, result)
