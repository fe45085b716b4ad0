"""transwarp — FastAPI application factory and process entry point.

Invariants:
    - The route table is built from handler modules once, before serving, and
      never mutated afterwards
    - Environment mode is decided once in create_app(): production trusts the
      reverse proxy and masks errors; development disables template caching,
      serves /static and delays /api/ requests by a random jitter
    - The upload scratch directory exists before any request is parsed
    - GET /error always fails with "test error." (diagnostic route)

Design Decisions:
    - App factory over a module-level app: tests build production and development
      apps side by side with injected registries and identity parsers
    - /error registered after all handler modules, so it wins any collision
    - Lifespan over @app.on_event: FastAPI recommended pattern
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from transwarp.api.error_handlers import register_error_handlers
from transwarp.api.pipeline import RequestPipeline
from transwarp.api.registry import HandlerRegistry
from transwarp.api.router import RouteTable
from transwarp.config import Settings, get_settings
from transwarp.core.areas import ERROR_PATH, Theme, theme_path_for
from transwarp.core.route_spec import RouteSpec, Verb
from transwarp.infrastructure.identity import (
    CookieIdentityParser, IdentityParser, InMemoryUserStore, UserStore,
)
from transwarp.infrastructure.observability import setup_logging
from transwarp.infrastructure.templates import TemplateRenderer
from transwarp.infrastructure.uploads import ensure_upload_dir

logger = logging.getLogger(__name__)


def _log_uncaught(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    err = context.get("exception") or context.get("message")
    logger.error(f">>>>>> UNCAUGHT EXCEPTION >>>>>> {err}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    if settings.production_mode:
        asyncio.get_running_loop().set_exception_handler(_log_uncaught)
    logger.info(f"Start app on port {settings.port}...")
    yield
    logger.info("transwarp shutting down")


async def raise_test_error():
    raise RuntimeError("test error.")


def create_app(
    settings: Settings | None = None,
    registry: HandlerRegistry | None = None,
    identity_parser: IdentityParser | None = None,
    user_store: UserStore | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    production = settings.production_mode

    app = FastAPI(
        title="transwarp", version="1.0.0", debug=not production, lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.renderer = TemplateRenderer(settings.templates_dir, cache=production)
    app.state.user_store = user_store or InMemoryUserStore()
    ensure_upload_dir(settings.upload_dir)

    if not production and os.path.isdir(settings.static_dir):
        app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")

    if identity_parser is None:
        identity_parser = CookieIdentityParser(
            app.state.user_store,
            settings.session_secret,
            settings.session_cookie,
            max_age=settings.session_max_age,
        )
    app.add_middleware(
        RequestPipeline,
        identity_parser=identity_parser,
        theme=Theme(theme_path_for(settings.theme), settings.website),
        api_jitter_ms=0 if production else settings.api_jitter_ms,
    )
    # Outermost, so the client address is fixed before the pipeline runs
    if production:
        app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

    table = RouteTable.from_registry(
        registry or HandlerRegistry(settings.handlers_package),
    )
    table.register(RouteSpec(Verb.GET, ERROR_PATH), raise_test_error, "main")
    table.install(app)
    app.state.route_table = table
    app.state.api_docs = table.docs

    register_error_handlers(app, production)
    return app


def run():
    """Process entry point: one HTTP listener on the configured port, no flags."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    uvicorn.run(
        "transwarp.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
