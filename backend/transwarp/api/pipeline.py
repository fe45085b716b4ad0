"""Request Pipeline — ordered per-request stages in front of the route table.

Stages, strictly in this order:
    1. API latency jitter (development only, configured at boot)
    2. Identity resolution (IdentityParser collaborator)
    3. Area gate: /manage/ needs role <= CONTRIBUTOR or redirects to /auth/,
       everything else gets the Theme response mode
    4. Dispatch to the handler (call_next)
    5. Default JSON content type for /api/ responses, set on the way out:
       a handler-chosen content type is only known after dispatch, so the
       default fills the header only when the response left it empty

Invariants:
    - Identity is resolved before the area gate runs
    - A denied /manage/ request never reaches its handler
    - APIError raised by a stage is translated exactly like one raised by a handler
    - Any other stage error propagates to the terminal error handler

Design Decisions:
    - One middleware runs all stages instead of one middleware per stage: the
      order is visible in one place and cannot drift with add_middleware() order
"""

import asyncio
import logging
import random
import time

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from transwarp.api.context import RequestContext
from transwarp.api.error_handlers import api_error_response
from transwarp.core.areas import AccessDenied, Area, Theme, classify_area, gate
from transwarp.core.errors import APIError
from transwarp.infrastructure.identity import IdentityParser

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


class RequestPipeline(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        identity_parser: IdentityParser,
        theme: Theme,
        api_jitter_ms: int = 0,
    ):
        super().__init__(app)
        self._identity_parser = identity_parser
        self._theme = theme
        self._api_jitter_ms = api_jitter_ms

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        area = classify_area(path)
        try:
            if area is Area.API and self._api_jitter_ms > 0:
                await asyncio.sleep(random.randrange(self._api_jitter_ms) / 1000)
            identity = await self._identity_parser(request)
        except APIError as exc:
            return api_error_response(request, exc)

        decision = gate(path, identity, self._theme)
        if isinstance(decision, AccessDenied):
            logger.info(
                f"Access denied to {path}, redirecting to {decision.redirect_to}",
                extra={"path": path},
            )
            return RedirectResponse(decision.redirect_to, status_code=302)

        request.state.context = RequestContext(
            request=request,
            identity=identity,
            area=area,
            mode=decision,
            timestamp=int(time.time() * 1000),
        )
        response = await call_next(request)
        if area is Area.API and "content-type" not in response.headers:
            response.headers["content-type"] = JSON_CONTENT_TYPE
        return response
