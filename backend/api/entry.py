from dataclasses import dataclass, field
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.catalog import resolve_form
from core.gateway import FormsGateway
from core.guards import require_session
from core.notifications import ActionResult
from core.responses import respond
from core.schema import FormDefinition
from core.state import provide_gateway
from views.form import FormView, Widget


@dataclass
class EntrySubmit:
    values: dict[str, Any] = field(default_factory=dict)


@dataclass
class EntryResponse:
    title: str
    visible: bool
    widgets: list[Widget]
    result: ActionResult | None = None


router = APIRouter(
    prefix="/api/forms/{sector}/{form}/entry",
    tags=["entry"],
    dependencies=[Depends(require_session)],
)


def _form_view(definition: FormDefinition, gateway: FormsGateway) -> FormView:
    async def create(record: dict[str, Any]) -> dict[str, Any]:
        return await gateway.create(definition.form, definition.sector, record)

    return FormView(definition.fields, create)


@router.get("")
async def render_entry(
    definition: FormDefinition = Depends(resolve_form),
    gateway: FormsGateway = Depends(provide_gateway),
) -> EntryResponse:
    """Render the add drawer with initial values."""
    view = _form_view(definition, gateway)
    view.open()
    return EntryResponse(title=definition.title, visible=view.visible, widgets=view.render())


@router.post("")
async def submit_entry(
    data: EntrySubmit,
    definition: FormDefinition = Depends(resolve_form),
    gateway: FormsGateway = Depends(provide_gateway),
) -> JSONResponse:
    """Submit the add drawer. A rejected submission re-renders the typed values."""
    view = _form_view(definition, gateway)
    result = await view.submit(data.values)
    body = EntryResponse(
        title=definition.title,
        visible=view.visible,
        widgets=view.render(),
        result=result,
    )
    return respond(body, result, status_code=201)
