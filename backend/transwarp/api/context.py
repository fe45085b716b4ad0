"""Request Context — per-request identity, area and response mode for handlers.

Invariants:
    - Built by the request pipeline before any handler runs, discarded afterwards
    - Handlers receive it through FastAPI dependencies, never through globals

Design Decisions:
    - Stored on request.state by the pipeline and re-bound to the endpoint's own
      Request object by request_context(), so render() sees the final scope
"""

from dataclasses import dataclass, replace
from typing import Any

from fastapi import Depends, Request
from starlette.responses import Response

from transwarp.core.areas import Area, ResponseMode
from transwarp.core.roles import Identity


@dataclass(frozen=True)
class RequestContext:
    request: Request
    identity: Identity | None
    area: Area
    mode: ResponseMode
    timestamp: int

    def augment(self, model: dict[str, Any] | None = None) -> dict[str, Any]:
        return self.mode.augment(model, self.identity, self.timestamp)

    def render(self, view: str, model: dict[str, Any] | None = None) -> Response:
        """Render a view through the selected response mode (theme or manage)."""
        renderer = self.request.app.state.renderer
        return renderer.render(
            self.request, self.mode.resolve_view(view), self.augment(model),
        )


def request_context(request: Request) -> RequestContext:
    ctx = getattr(request.state, "context", None)
    if ctx is None:
        raise RuntimeError(
            f"No request context for {request.url.path}: RequestPipeline not installed",
        )
    return replace(ctx, request=request)


def response_mode(ctx: RequestContext = Depends(request_context)) -> ResponseMode:
    return ctx.mode


def current_identity(
    ctx: RequestContext = Depends(request_context),
) -> Identity | None:
    return ctx.identity
