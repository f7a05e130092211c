"""
In-memory records backend for tests.

Implements the forms REST contract (list/create/update/delete/batch) and the
auth endpoints behind an httpx.MockTransport. Canned responses can be queued
to simulate failures.
"""

import itertools
import json
from collections import defaultdict
from typing import Any

import httpx


class FakeBackend:
    def __init__(self, users: dict[str, str] | None = None):
        self.records: dict[tuple[str, str], list[dict[str, Any]]] = defaultdict(list)
        self.requests: list[httpx.Request] = []
        self.users = users or {"encoder": "secret"}
        self.refresh_count = 0
        self._ids = itertools.count(1)
        self._tokens = itertools.count(1)
        self._queued: list[httpx.Response | Exception] = []

    # ------------------------------------------------------------------
    # Test controls
    # ------------------------------------------------------------------

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def queue_response(self, status: int, body: Any = None) -> None:
        """Answer the next request with ``status``/``body`` instead of handling it."""
        self._queued.append(httpx.Response(status, json=body if body is not None else {}))

    def queue_raw(self, status: int, content: bytes = b"", content_type: str = "text/html") -> None:
        """Answer the next request with a non-JSON body (or none at all)."""
        headers = {"content-type": content_type} if content else {}
        self._queued.append(httpx.Response(status, content=content, headers=headers))

    def queue_error(self, exc: Exception) -> None:
        """Raise ``exc`` (e.g. httpx.ConnectError) for the next request."""
        self._queued.append(exc)

    def seed(self, sector: str, form: str, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        stored = []
        for record in records:
            item = {**record, "_id": str(next(self._ids))}
            self.records[(sector, form)].append(item)
            stored.append(item)
        return stored

    def form_requests(self, method: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if "/forms/" in r.url.path and (method is None or r.method == method)
        ]

    # ------------------------------------------------------------------
    # Transport handler
    # ------------------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._queued:
            queued = self._queued.pop(0)
            if isinstance(queued, Exception):
                raise queued
            return queued

        parts = [p for p in request.url.path.split("/") if p]
        if "auth" in parts:
            return self._auth(request, parts[parts.index("auth") + 1:])
        if "forms" in parts:
            if not request.headers.get("authorization", "").startswith("Bearer "):
                return httpx.Response(401, json={"msg": "Unauthorized"})
            return self._forms(request, parts[parts.index("forms") + 1:])
        return httpx.Response(404, json={"msg": "Not found"})

    def _issue_tokens(self) -> dict[str, str]:
        n = next(self._tokens)
        return {"accessToken": f"access-{n}", "refreshToken": f"refresh-{n}"}

    def _auth(self, request: httpx.Request, parts: list[str]) -> httpx.Response:
        body = json.loads(request.content or b"{}")
        if parts == ["login"]:
            if self.users.get(body.get("username")) != body.get("password"):
                return httpx.Response(401, json={"msg": "Invalid credentials"})
            return httpx.Response(200, json=self._issue_tokens())
        if parts == ["refresh"]:
            if not body.get("refreshToken"):
                return httpx.Response(401, json={"msg": "Missing refresh token"})
            self.refresh_count += 1
            return httpx.Response(200, json=self._issue_tokens())
        return httpx.Response(404, json={"msg": "Not found"})

    def _forms(self, request: httpx.Request, parts: list[str]) -> httpx.Response:
        sector, form, *rest = parts
        items = self.records[(sector, form)]

        if request.method == "GET" and not rest:
            params = request.url.params
            page = int(params.get("page", 1))
            limit = int(params.get("limit", 10))
            matched = [r for r in items if self._matches(r, params)]
            start = (page - 1) * limit
            return httpx.Response(
                200, json={"models": matched[start:start + limit], "total": len(matched)}
            )

        if request.method == "POST" and not rest:
            record = {**json.loads(request.content), "_id": str(next(self._ids))}
            items.append(record)
            return httpx.Response(201, json=record)

        if request.method == "POST" and rest == ["batch"]:
            models = json.loads(request.content)["models"]
            saved = [{**m, "_id": str(next(self._ids))} for m in models]
            items.extend(saved)
            return httpx.Response(201, json={"count": len(saved), "models": saved})

        if request.method in ("PUT", "DELETE") and len(rest) == 1:
            record_id = rest[0]
            index = next((i for i, r in enumerate(items) if r["_id"] == record_id), None)
            if index is None:
                return httpx.Response(404, json={"msg": "Record not found"})
            if request.method == "DELETE":
                items.pop(index)
                return httpx.Response(200, json={"msg": "Deleted"})
            items[index] = {**json.loads(request.content), "_id": record_id}
            return httpx.Response(200, json=items[index])

        return httpx.Response(405, json={"msg": "Method not allowed"})

    @staticmethod
    def _matches(record: dict[str, Any], params: httpx.QueryParams) -> bool:
        for name in params.keys():
            if name in ("page", "limit"):
                continue
            wanted = params.get_list(name)
            value = record.get(name)
            if isinstance(value, list):
                if not all(w in value for w in wanted):
                    return False
            elif str(value) not in wanted:
                return False
        return True
