from dataclasses import dataclass

import httpx
from fastapi import APIRouter, Depends

from core.state import AppState, provide_app_state


@dataclass
class HealthResponse:
    status: str
    config_loaded: bool
    backend_url: str | None = None
    backend_reachable: bool = False
    active_sessions: int = 0


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health_check(app_state: AppState = Depends(provide_app_state)) -> HealthResponse:
    backend_reachable = False
    try:
        await app_state.client.get("/")
        backend_reachable = True
    except httpx.TransportError:
        pass

    return HealthResponse(
        status="ok",
        config_loaded=app_state.config is not None,
        backend_url=app_state.config.backend.base_url,
        backend_reachable=backend_reachable,
        active_sessions=len(app_state.sessions),
    )


@router.get("/ping")
async def ping() -> dict:
    return {"message": "pong"}
