"""Application state owned by the app lifespan, and its dependency providers."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import httpx
from fastapi import Depends, Request

from core.auth import AuthTokens, Session, provide_current_session
from core.config import AppConfig
from core.gateway import FormsGateway
from core.schema import FormDefinition
from views.grid import GridView


class SessionStore:
    """Live sessions by id. Expired sessions are dropped on lookup."""

    def __init__(self, expire_minutes: int):
        self._sessions: dict[str, Session] = {}
        self._lifetime = timedelta(minutes=expire_minutes)

    def create(self, username: str, tokens: AuthTokens) -> Session:
        now = datetime.now(timezone.utc)
        session = Session(
            id=str(uuid4()),
            username=username,
            tokens=tokens,
            issued=now,
            expires=now + self._lifetime,
            last_activity=now,
        )
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Session | None:
        session = self._sessions.get(session_id)
        if session and session.is_expired():
            self.remove(session_id)
            return None
        return session

    def remove(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session:
            session.discard()

    def prune(self, now: datetime | None = None) -> int:
        expired = [s.id for s in self._sessions.values() if s.is_expired(now)]
        for session_id in expired:
            self.remove(session_id)
        return len(expired)

    def active(self) -> list[Session]:
        return list(self._sessions.values())

    def clear(self) -> None:
        for session_id in list(self._sessions):
            self.remove(session_id)

    def __len__(self) -> int:
        return len(self._sessions)


@dataclass
class AppState:
    config: AppConfig
    client: httpx.AsyncClient
    sessions: SessionStore

    def gateway(self, session: Session | None = None) -> FormsGateway:
        token = session.tokens.access_token if session else None
        return FormsGateway(self.client, access_token=token)

    def grid_for(self, session: Session, definition: FormDefinition) -> GridView:
        """The session's grid for a form, created on first use.

        Callbacks look up the session's token on every call so a refreshed
        token is picked up by grids that are already open.
        """
        key = (definition.sector.value, definition.form.value)
        grid = session.grids.get(key)
        if grid is None:
            form, sector = definition.form, definition.sector

            async def fetch_page(page: int, limit: int):
                return await self.gateway(session).list(form, sector, page, limit)

            async def update_row(row: dict):
                return await self.gateway(session).update(form, sector, row)

            async def delete_row(record_id: str):
                await self.gateway(session).delete(form, sector, record_id)

            grid = GridView(
                definition.columns,
                fetch_page,
                update_row,
                delete_row,
                limit=self.config.grid.default_limit,
                page_size_options=self.config.grid.page_size_options,
            )
            session.grids[key] = grid
        return grid


async def provide_app_state(request: Request) -> AppState:
    """Dependency provider for the application state."""
    return request.app.state.runtime


async def provide_gateway(
    app_state: AppState = Depends(provide_app_state),
    current_session: Session = Depends(provide_current_session),
) -> FormsGateway:
    """Gateway carrying the current session's bearer token."""
    return app_state.gateway(current_session)
