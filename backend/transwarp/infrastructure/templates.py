"""Template Renderer — Jinja2 environment behind Starlette's Jinja2Templates.

Invariants:
    - Development mode never caches compiled templates (edits show up on reload)
    - render() always returns an HTML TemplateResponse
"""

from typing import Any

import jinja2
from starlette.requests import Request
from starlette.responses import Response
from starlette.templating import Jinja2Templates


class TemplateRenderer:
    def __init__(self, directory: str, cache: bool = True):
        env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(directory),
            autoescape=jinja2.select_autoescape(["html", "xml"]),
            auto_reload=not cache,
            cache_size=400 if cache else 0,
        )
        self._templates = Jinja2Templates(env=env)

    @property
    def env(self) -> jinja2.Environment:
        return self._templates.env

    def render(self, request: Request, view: str, model: dict[str, Any]) -> Response:
        return self._templates.TemplateResponse(request, view, model)
