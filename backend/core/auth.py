"""Session types and the current-session dependency."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import HTTPException, Request

from core.errorlog import ErrorLog


@dataclass
class AuthTokens:
    """Bearer/refresh token pair issued by the records backend."""

    access_token: str
    refresh_token: str

    @classmethod
    def from_payload(cls, data: Any) -> "AuthTokens":
        if not isinstance(data, dict):
            raise ValueError(f"Token payload must be an object, got {type(data).__name__}")
        access = data.get("accessToken") or data.get("access_token")
        refresh = data.get("refreshToken") or data.get("refresh_token")
        if not access or not refresh:
            raise ValueError("Token payload is missing accessToken or refreshToken")
        return cls(access_token=access, refresh_token=refresh)


@dataclass
class Session:
    """One logged-in user's state: tokens, error log and open grids."""

    id: str
    username: str
    tokens: AuthTokens
    issued: datetime
    expires: datetime
    last_activity: datetime
    error_log: ErrorLog = field(default_factory=ErrorLog)
    grids: dict[tuple[str, str], Any] = field(default_factory=dict)

    def touch(self, now: datetime | None = None) -> None:
        self.last_activity = now or datetime.now(timezone.utc)

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires

    def is_idle(self, idle_after: timedelta, now: datetime | None = None) -> bool:
        return (now or datetime.now(timezone.utc)) - self.last_activity >= idle_after

    def discard(self) -> None:
        """Drop everything the session holds (logout)."""
        self.error_log.clear()
        self.grids.clear()
        self.tokens = AuthTokens(access_token="", refresh_token="")


async def provide_current_session(request: Request) -> Session:
    """Dependency provider that returns the session from the request scope."""
    session = request.scope.get("user_session")
    if not session:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return session
