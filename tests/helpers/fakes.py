from __future__ import annotations

import json
from datetime import date
from typing import Any, Optional

API_URL = "http://api.test/api"
TODAY = date(2026, 3, 15)

DEFAULT_ME = {"name": "Jane Operator", "isHighPrivilege": True}
DEFAULT_SETTINGS = {
    "domains": ["contoso", "fabrikam"],
    "optionalGroupsForHighPrivilege": ["VPN Users", "Remote Desktop"],
}


class StubResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, text: Optional[str] = None):
        self._payload = payload
        self.status_code = status_code
        if text is not None:
            self.text = text
        elif status_code == 204:
            self.text = ""
        else:
            self.text = json.dumps(payload)

    @property
    def content(self) -> bytes:
        return self.text.encode()

    def json(self):
        return json.loads(self.text)

    def close(self):
        pass


class FakeApi:
    """Stand-in for the remote API, routed by (method, path).

    Route values may be a ``StubResponse``, a JSON payload (served with 200),
    an exception instance to raise, or a callable receiving the call record.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[dict] = []

    def add(self, method: str, path: str, response: Any) -> "FakeApi":
        self.routes[(method.upper(), path)] = response
        return self

    def calls_to(self, path: str, method: Optional[str] = None) -> list[dict]:
        return [c for c in self.calls if c["path"] == path and (method is None or c["method"] == method)]

    def paths(self) -> list[str]:
        return [c["path"] for c in self.calls]

    def __call__(self, method, url, params=None, data=None, headers=None, timeout=None, verify=None, **kwargs):
        path = url[len(API_URL):] if url.startswith(API_URL) else url
        record = {
            "method": method.upper(),
            "path": path,
            "params": dict(params or {}),
            "body": json.loads(data) if data else None,
            "headers": dict(headers or {}),
            "timeout": timeout,
        }
        self.calls.append(record)
        route = self.routes.get((record["method"], path))
        if route is None:
            raise RuntimeError(f"Unexpected {method} {url} in unit test")
        if callable(route) and not isinstance(route, StubResponse):
            route = route(record)
        if isinstance(route, BaseException):
            raise route
        if isinstance(route, StubResponse):
            return route
        return StubResponse(route)


class Recorder:
    """Collects confirmation prompts, alerts and clipboard writes."""

    def __init__(self, answer: bool = True):
        self.answer = answer
        self.prompts: list[str] = []
        self.alerts: list = []
        self.clipboard: list[str] = []

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answer

    def copy(self, text: str) -> None:
        self.clipboard.append(text)
