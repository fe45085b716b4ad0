"""API test fixtures — apps built by create_app() + httpx test clients.

Invariants:
    - Every client gets its own app, settings and upload directory
    - Handler modules are registered explicitly unless a package is named
    - Identity comes from HeaderIdentityParser unless a test passes its own

Design Decisions:
    - raise_app_exceptions toggled per client: development apps re-raise
      unhandled errors (observable in tests), production apps answer 500
"""

import pytest
from httpx import ASGITransport, AsyncClient

from transwarp.api.registry import HandlerModule, HandlerRegistry
from transwarp.main import create_app
from tests.identities import HeaderIdentityParser


@pytest.fixture
async def make_client(make_settings):
    clients: list[AsyncClient] = []

    def _make(
        *modules: HandlerModule,
        environment: str = "development",
        package: str | None = None,
        identity_parser=None,
        user_store=None,
        raise_app_exceptions: bool = True,
        **overrides,
    ) -> AsyncClient:
        registry = HandlerRegistry(package)
        for m in modules:
            registry.register(m)
        if identity_parser is None and user_store is None:
            identity_parser = HeaderIdentityParser()
        app = create_app(
            make_settings(environment=environment, **overrides),
            registry=registry,
            identity_parser=identity_parser,
            user_store=user_store,
        )
        client = AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions),
            base_url="http://test",
        )
        client.app = app
        clients.append(client)
        return client

    yield _make
    for client in clients:
        await client.aclose()
