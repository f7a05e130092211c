"""Middleware for session handling."""

from starlette.datastructures import Headers
from starlette.requests import cookie_parser
from starlette.types import ASGIApp, Receive, Scope, Send


SESSION_COOKIE = "session_id"


class SessionMiddleware:
    """Resolve the session cookie and put the live session in the scope.

    Every request on a live session also counts as user activity for the
    token refresher.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        session_id = self._session_id(scope)
        runtime = getattr(scope["app"].state, "runtime", None)

        if session_id and runtime:
            session = runtime.sessions.get(session_id)
            if session:
                session.touch()
                scope["user_session"] = session

        await self.app(scope, receive, send)

    @staticmethod
    def _session_id(scope: Scope) -> str | None:
        cookies = cookie_parser(Headers(scope=scope).get("cookie", ""))
        return cookies.get(SESSION_COOKIE) or None
