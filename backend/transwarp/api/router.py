"""Route Table — binds (verb, path) pairs to handlers on a FastAPI router.

Invariants:
    - One RouteEntry per accepted spec; malformed specs, unknown verbs and
      non-callable handlers are logged and skipped, every other spec still registers
    - Registration order = module order x routes() iteration order
    - A later registration for the same (verb, path) replaces the earlier one
      and logs a collision warning naming both modules
    - Every /api/ route goes through the doc extractor; missing docs only warn
    - Path pattern syntax is FastAPI's ({param}), matched by the engine itself

Design Decisions:
    - Entries kept in a dict keyed by (verb, path) and installed once, so the
      engine never sees two routes for one key (Starlette would pick the first)
    - dispatch() reuses the installed routes' own matches() instead of a
      second matcher
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from fastapi import APIRouter, FastAPI
from fastapi.responses import JSONResponse
from starlette.routing import Match

from transwarp.api.registry import HandlerModule, HandlerRegistry
from transwarp.core.api_docs import ApiDocIndex, handler_doc
from transwarp.core.areas import is_api_path
from transwarp.core.errors import RouteSpecError
from transwarp.core.route_spec import RouteSpec, Verb, as_route_spec

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


@dataclass(frozen=True)
class RouteEntry:
    verb: Verb
    path: str
    handler: Handler
    module: str


class RouteTable:
    """Single source of truth for which handler answers which request."""

    def __init__(self, docs: ApiDocIndex | None = None):
        self.docs = docs if docs is not None else ApiDocIndex()
        self._entries: dict[tuple[Verb, str], RouteEntry] = {}
        self._router: APIRouter | None = None

    @classmethod
    def from_registry(
        cls, registry: HandlerRegistry, docs: ApiDocIndex | None = None,
    ) -> "RouteTable":
        table = cls(docs)
        for module in registry.load_all().values():
            table.add_module(module)
        return table

    @property
    def entries(self) -> tuple[RouteEntry, ...]:
        return tuple(self._entries.values())

    def add_module(self, module: HandlerModule) -> int:
        """Register every valid route of a module. Returns how many were accepted."""
        accepted = 0
        for raw, handler in module.routes.items():
            try:
                spec = as_route_spec(raw)
            except RouteSpecError as e:
                logger.warning(
                    f"error: {e.message} in {module.name}.py",
                    extra={"module_name": module.name, "error_code": e.code},
                )
                continue
            if not callable(handler):
                logger.warning(
                    f"error: handler for {spec} is not callable in {module.name}.py",
                    extra={
                        "module_name": module.name,
                        "verb": spec.verb.value,
                        "route": spec.path,
                    },
                )
                continue
            self.register(spec, handler, module.name)
            accepted += 1
        return accepted

    def register(self, spec: RouteSpec, handler: Handler, module: str) -> RouteEntry:
        if self._router is not None:
            raise RuntimeError("Route table already installed")
        key = (spec.verb, spec.path)
        previous = self._entries.pop(key, None)
        if previous is not None:
            logger.warning(
                f"route collision: {spec} in {module}.py replaces "
                f"handler from {previous.module}.py",
                extra={"verb": spec.verb.value, "route": spec.path},
            )
            self.docs.discard(previous.module, spec.verb.value, spec.path)
        logger.info(
            f"found: {spec} in {module}.py",
            extra={"module_name": module, "verb": spec.verb.value, "route": spec.path},
        )
        entry = RouteEntry(spec.verb, spec.path, handler, module)
        self._entries[key] = entry
        if is_api_path(spec.path):
            self._collect_doc(entry)
        return entry

    def _collect_doc(self, entry: RouteEntry) -> None:
        doc = handler_doc(entry.handler)
        if doc is None:
            logger.warning(
                f"WARNING: no api docs found for api: {entry.path}",
                extra={"module_name": entry.module, "route": entry.path},
            )
            return
        self.docs.add(entry.module, entry.verb.value, entry.path, doc)

    @property
    def router(self) -> APIRouter:
        if self._router is None:
            self._router = self._build_router()
        return self._router

    def _build_router(self) -> APIRouter:
        router = APIRouter()
        for entry in self._entries.values():
            kwargs: dict[str, Any] = {}
            if is_api_path(entry.path):
                kwargs["response_class"] = JSONResponse
            router.add_api_route(
                entry.path, entry.handler, methods=[entry.verb.value],
                name=f"{entry.module}.{getattr(entry.handler, '__name__', 'handler')}",
                **kwargs,
            )
        return router

    def install(self, app: FastAPI) -> None:
        app.include_router(self.router)

    def dispatch(self, method: str, path: str) -> Handler | None:
        """Handler that answers method + path, or None (404)."""
        scope = {
            "type": "http", "method": method.upper(), "path": path, "root_path": "",
        }
        for route in self.router.routes:
            match, _ = route.matches(scope)
            if match is Match.FULL:
                return route.endpoint
        return None
