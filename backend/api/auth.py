"""Authentication routes for login, logout, and session management."""

import logging
from dataclasses import dataclass

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from core.auth import Session, provide_current_session
from core.errors import ErrorKind, GatewayError
from core.middleware import SESSION_COOKIE
from core.state import AppState, provide_app_state


logger = logging.getLogger(__name__)


@dataclass
class LoginRequest:
    username: str
    password: str


@dataclass
class SessionResponse:
    username: str
    issued: str
    expires: str


def _session_response(session: Session) -> SessionResponse:
    return SessionResponse(
        username=session.username,
        issued=session.issued.isoformat(),
        expires=session.expires.isoformat(),
    )


router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
async def login(
    data: LoginRequest,
    response: Response,
    app_state: AppState = Depends(provide_app_state),
) -> SessionResponse:
    """Exchange credentials for backend tokens and open a session."""
    try:
        tokens = await app_state.gateway().login(data.username, data.password)
    except GatewayError as exc:
        logger.info("Login failed for %s: %s", data.username, exc.msg)
        if exc.kind in (ErrorKind.UNAUTHORIZED, ErrorKind.VALIDATION):
            raise HTTPException(status_code=401, detail="Invalid username or password") from exc
        raise HTTPException(status_code=exc.code if exc.code == 503 else 502, detail=exc.msg) from exc

    session = app_state.sessions.create(data.username, tokens)
    config = app_state.config.session
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session.id,
        httponly=True,
        secure=config.secure_cookie,
        samesite="strict",
        path="/",
        max_age=config.expire_minutes * 60,
    )
    return _session_response(session)


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    app_state: AppState = Depends(provide_app_state),
) -> dict:
    """Discard the session (tokens, error log, grids) and clear the cookie."""
    session_id = request.cookies.get(SESSION_COOKIE)
    if session_id:
        app_state.sessions.remove(session_id)

    response.delete_cookie(key=SESSION_COOKIE, path="/")
    return {"ok": True}


@router.get("/me")
async def get_current_session(
    current_session: Session = Depends(provide_current_session),
) -> SessionResponse:
    """Get the current session."""
    return _session_response(current_session)
