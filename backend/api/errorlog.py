from fastapi import APIRouter, Depends

from core.auth import Session, provide_current_session
from core.guards import require_session
from core.responses import ColumnMeta, MultiRowResponse


ERRORLOG_COLUMNS = [
    ColumnMeta(key="id", label="ID", type="number"),
    ColumnMeta(key="logged_at", label="Time", type="date"),
    ColumnMeta(key="sector", label="Sector", type="text"),
    ColumnMeta(key="form", label="Form", type="text"),
    ColumnMeta(key="payload", label="Errors", type="text"),
]


router = APIRouter(prefix="/api/errorlog", tags=["errorlog"], dependencies=[Depends(require_session)])


@router.get("")
async def list_errorlog(
    current_session: Session = Depends(provide_current_session),
) -> MultiRowResponse:
    """List validation failures captured from bulk saves, newest first."""
    return MultiRowResponse(
        columns=ERRORLOG_COLUMNS,
        data=[
            {
                "id": entry.id,
                "logged_at": entry.logged_at.isoformat(),
                "sector": entry.sector,
                "form": entry.form,
                "payload": entry.payload,
            }
            for entry in reversed(current_session.error_log.entries)
        ],
    )


@router.delete("", status_code=204)
async def clear_errorlog(
    current_session: Session = Depends(provide_current_session),
) -> None:
    """Empty the error log."""
    current_session.error_log.clear()
