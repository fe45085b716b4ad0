"""Error Hierarchy — typed exceptions for boot-time and request-time failures.

Invariants:
    - Every error has a code (str) and an http_status (int)
    - Route spec errors are boot-time only and never abort the boot
    - APIError.to_response() is the exact payload sent to the client
    - No internal details leaked in APIError messages

Design Decisions:
    - Single hierarchy with TranswarpError base: the router catches RouteSpecError,
      the error translator catches APIError (ADR: uniform error shape)
    - APIError payload keeps the {error, data, message} shape handler authors
      already rely on; constructors below cover the common error kinds
"""

from typing import Any


class TranswarpError(Exception):
    """Base exception for all transwarp errors."""

    def __init__(self, message: str, code: str, http_status: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status


# ─── Boot-time Errors (recovered by the router) ─────────────────

class RouteSpecError(TranswarpError):
    """A route spec could not be turned into a route."""
    def __init__(self, message: str, code: str, spec: str):
        super().__init__(message, code)
        self.spec = spec


class InvalidRouteSpec(RouteSpecError):
    """Raw spec does not split into exactly one verb and one path."""
    def __init__(self, spec: str):
        super().__init__(
            f"Not a route definition: {spec}", "INVALID_ROUTE_SPEC", spec,
        )


class UnsupportedVerb(RouteSpecError):
    """Verb token is not GET or POST."""
    def __init__(self, spec: str, verb: str):
        super().__init__(f"Invalid verb: {verb}", "UNSUPPORTED_VERB", spec)
        self.verb = verb


# ─── Request-time Errors (sent to the client) ───────────────────

class APIError(TranswarpError):
    """Structured error raised by handler logic, always sent to the client."""

    def __init__(
        self,
        error: str,
        data: Any = "",
        message: str = "",
        http_status: int = 400,
    ):
        super().__init__(message or error, error, http_status)
        self.error = error
        self.data = data
        self.message = message

    def to_response(self) -> dict:
        """Client payload, identical in every environment mode."""
        return {"error": self.error, "data": self.data, "message": self.message}


def invalid_param(field: str, message: str = "") -> APIError:
    return APIError(
        "parameter:invalid", field,
        message or f"Invalid or missing parameter: {field}", 400,
    )


def not_found(field: str, message: str = "") -> APIError:
    return APIError(
        "resource:notfound", field,
        message or f"Resource not found: {field}", 404,
    )


def not_allowed(message: str = "") -> APIError:
    return APIError(
        "permission:denied", "permission",
        message or "Permission denied.", 403,
    )


def auth_failed(field: str, message: str = "") -> APIError:
    return APIError(
        "auth:failed", field,
        message or "Authentication failed.", 401,
    )
