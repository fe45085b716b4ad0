"""Handler Module Registry — find handler modules by filename and collect their routes.

Invariants:
    - Only filenames matching ^[A-Za-z][A-Za-z0-9_]*\\.py$ are handler modules
    - Discovery order is directory listing order (unsorted); it decides which
      handler wins a route collision
    - One log line per discovered module
    - A module without a usable routes() contributes zero routes, never an error
    - HandlerModule.routes is read-only once built

Design Decisions:
    - Modules expose a routes() capability returning {spec: handler} instead of
      being scanned for arbitrary exports (ADR: explicit plugin interface)
    - register() accepts HandlerModule values directly: built-ins and tests add
      modules without touching the filesystem
    - Import errors propagate: a broken handler module is a boot bug, not a
      skipped route
"""

import importlib
import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType, ModuleType
from typing import Any, Callable

from transwarp.core.route_spec import RouteSpec

logger = logging.getLogger(__name__)

_MODULE_FILENAME = re.compile(r"^[A-Za-z][A-Za-z0-9_]*\.py$")

Handler = Callable[..., Any]


@dataclass(frozen=True)
class HandlerModule:
    name: str
    routes: Mapping[RouteSpec | str, Handler] = field(
        default_factory=lambda: MappingProxyType({}),
    )

    def __post_init__(self):
        if not isinstance(self.routes, MappingProxyType):
            object.__setattr__(self, "routes", MappingProxyType(dict(self.routes)))

    @classmethod
    def from_module(cls, name: str, module: ModuleType) -> "HandlerModule":
        provider = getattr(module, "routes", None)
        if not callable(provider):
            logger.debug(f"Module {name} exports no routes()")
            return cls(name)
        routes = provider()
        if not isinstance(routes, Mapping):
            logger.debug(f"Module {name} routes() returned {type(routes).__name__}")
            return cls(name)
        return cls(name, routes)


class HandlerRegistry:
    """Discovers handler modules in a package and loads them in discovery order."""

    def __init__(self, package: str | None = None):
        self._package = package
        self._explicit: dict[str, HandlerModule] = {}

    @property
    def package(self) -> str | None:
        return self._package

    def register(self, module: HandlerModule) -> None:
        self._explicit[module.name] = module

    def discover(self) -> list[str]:
        if self._package is None:
            return []
        names = []
        for filename in os.listdir(self._package_dir()):
            if not _MODULE_FILENAME.match(filename):
                continue
            name = filename[:-3]
            logger.info(f"found handler module: {name}", extra={"module_name": name})
            names.append(name)
        return names

    def load_all(self) -> dict[str, HandlerModule]:
        modules: dict[str, HandlerModule] = {}
        for name in self.discover():
            module = importlib.import_module(f"{self._package}.{name}")
            modules[name] = HandlerModule.from_module(name, module)
        for name, module in self._explicit.items():
            modules.pop(name, None)
            modules[name] = module
        return modules

    def _package_dir(self) -> str:
        package = importlib.import_module(self._package)
        return list(package.__path__)[0]
