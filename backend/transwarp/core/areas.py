"""Areas & Response Modes — path-prefix zones and the area gate decision.

Invariants:
    - /manage/ requests get Manage only when can_manage(identity); otherwise AccessDenied
    - Every other request gets Theme (API requests included, they simply never render)
    - Theme models always carry __theme__, __user__, __time__, __website__
    - Manage models always carry __user__
    - augment() never mutates the caller's model

Design Decisions:
    - ResponseMode is a closed variant (Theme | Manage) chosen once by the gate
      and handed to the handler, instead of attaching render functions to the
      response object (ADR: explicit response modes)
    - gate() is pure: the pipeline turns AccessDenied into a redirect
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from transwarp.core.roles import Identity, can_manage

API_PREFIX = "/api/"
MANAGE_PREFIX = "/manage/"
AUTH_PATH = "/auth/"
ERROR_PATH = "/error"


class Area(str, Enum):
    API = "api"
    MANAGE = "manage"
    THEME = "theme"


def classify_area(path: str) -> Area:
    if path.startswith(MANAGE_PREFIX):
        return Area.MANAGE
    if path.startswith(API_PREFIX):
        return Area.API
    return Area.THEME


def is_api_path(path: str) -> bool:
    return path.startswith(API_PREFIX)


@dataclass(frozen=True)
class Theme:
    """Public pages: views resolved under the theme path, model enriched with site metadata."""
    theme_path: str
    website: dict[str, str] = field(default_factory=dict)

    def resolve_view(self, view: str) -> str:
        return self.theme_path + view

    def augment(
        self, model: dict[str, Any] | None, identity: Identity | None, timestamp: int,
    ) -> dict[str, Any]:
        m = dict(model or {})
        m["__theme__"] = self.theme_path
        m["__user__"] = identity
        m["__time__"] = timestamp
        m["__website__"] = dict(self.website)
        return m


@dataclass(frozen=True)
class Manage:
    """Admin pages: views used as-is, model enriched with the current user."""

    def resolve_view(self, view: str) -> str:
        return view

    def augment(
        self, model: dict[str, Any] | None, identity: Identity | None, timestamp: int,
    ) -> dict[str, Any]:
        m = dict(model or {})
        m["__user__"] = identity
        return m


ResponseMode = Theme | Manage


@dataclass(frozen=True)
class AccessDenied:
    redirect_to: str = AUTH_PATH


def theme_path_for(theme: str) -> str:
    return f"themes/{theme}/"


def gate(path: str, identity: Identity | None, theme: Theme) -> ResponseMode | AccessDenied:
    """Area gate: pick the response mode for a request, or deny it."""
    if classify_area(path) is Area.MANAGE:
        if can_manage(identity):
            return Manage()
        return AccessDenied()
    return theme
