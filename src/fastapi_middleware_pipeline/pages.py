"""Index page model and its minimal HTML rendering."""

from __future__ import annotations

from html import escape
from typing import Any

from fastapi_middleware_pipeline.config import AppSettings

DEBUG_MESSAGE = "Debug mode is enabled!"


class IndexPage:
    """Page model for ``/``. Adds a debug message when ShowDebugInfo is on."""

    user_name = "FastAPI Developer"

    def __init__(self, settings: AppSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def on_get(self) -> dict[str, Any]:
        view_data: dict[str, Any] = {"UserName": self.user_name}
        if self._settings.features.show_debug_info:
            view_data["DebugMessage"] = DEBUG_MESSAGE
        return view_data


def render_index(view_data: dict[str, Any]) -> str:
    parts = [
        "<!DOCTYPE html>",
        "<html><head><title>Home</title></head><body>",
        f"<h1>Welcome, {escape(str(view_data['UserName']))}</h1>",
    ]
    if "DebugMessage" in view_data:
        parts.append(f'<p class="debug">{escape(str(view_data["DebugMessage"]))}</p>')
    parts.append("</body></html>")
    return "\n".join(parts)
