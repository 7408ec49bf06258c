"""RequestContext — per-request state container."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from starlette.requests import Request

from fastapi_middleware_pipeline.exceptions import DuplicateHeader, ResponseAlreadyStarted


@dataclass
class RequestContext:
    """One request/response exchange, passed by reference through the pipeline.

    Request data is read through ``method``, ``path`` and ``client_host``.
    The response under construction is held in ``status_code`` and
    ``response_headers``; both are frozen once ``start_response`` runs.
    """

    request: Request
    status_code: int = 200
    response_headers: dict[str, str] = field(default_factory=dict)
    state: dict[str, Any] = field(default_factory=dict)
    response_started: bool = False

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.url.path

    @property
    def client_host(self) -> str | None:
        client = self.request.client
        return client.host if client is not None else None

    def has_header(self, name: str) -> bool:
        return self._find_key(name) is not None

    def get_header(self, name: str) -> str | None:
        key = self._find_key(name)
        return self.response_headers[key] if key is not None else None

    def add_header(self, name: str, value: str) -> None:
        """Add a header that must not already be present."""
        self._ensure_not_started()
        if self._find_key(name) is not None:
            raise DuplicateHeader(name)
        self.response_headers[name] = value

    def set_header(self, name: str, value: str) -> None:
        """Set a header, replacing any existing value."""
        self._ensure_not_started()
        key = self._find_key(name)
        if key is not None:
            del self.response_headers[key]
        self.response_headers[name] = value

    def set_status(self, status_code: int) -> None:
        self._ensure_not_started()
        self.status_code = status_code

    def start_response(self) -> None:
        """Finalize the response. Allowed once per context."""
        self._ensure_not_started()
        self.response_started = True

    def _ensure_not_started(self) -> None:
        if self.response_started:
            raise ResponseAlreadyStarted()

    def _find_key(self, name: str) -> str | None:
        lowered = name.lower()
        for key in self.response_headers:
            if key.lower() == lowered:
                return key
        return None
