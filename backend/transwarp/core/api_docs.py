"""API Docs — pull documentation out of API handlers into a process-wide index.

Invariants:
    - Only the first block comment region is captured, markers excluded
    - Captured text is forwarded verbatim (format is opaque here)
    - A handler without docs yields None; the caller warns, never fails
    - Only the handler function itself is read: partials are unwrapped and
      class docstrings (functools.partial, callable objects) never count

Design Decisions:
    - Docstring first: Python handlers document themselves with __doc__, the
      /** ... */ scan over source text stays as a fallback for handlers that
      carry their docs as comments
    - ApiDocIndex is append-only during boot, read-only afterwards
"""

import functools
import inspect
import re
from dataclasses import dataclass
from typing import Callable, Iterator

_BLOCK_COMMENT = re.compile(r"/\*\*?(.*?)\*/", re.DOTALL)


@dataclass(frozen=True)
class APIDocEntry:
    module: str
    verb: str
    route: str
    doc: str


def extract_doc_block(source_text: str) -> str | None:
    """Return the text between the first /** (or /*) and the next */."""
    match = _BLOCK_COMMENT.search(source_text)
    if match is None:
        return None
    return match.group(1)


def _doc_target(handler: Callable) -> Callable | None:
    """The function whose own docstring/source documents the handler."""
    while isinstance(handler, functools.partial):
        handler = handler.func
    if not (inspect.isfunction(handler) or inspect.ismethod(handler)):
        # Callable instance: documented on its __call__, never on its class
        handler = getattr(handler, "__call__", None)
    if inspect.isfunction(handler) or inspect.ismethod(handler):
        return handler
    return None


def handler_doc(handler: Callable) -> str | None:
    """Documentation attached to a handler: its docstring, else a block comment in its source."""
    target = _doc_target(handler)
    if target is None:
        return None
    doc = inspect.cleandoc(target.__doc__ or "")
    if doc:
        return doc
    try:
        source = inspect.getsource(target)
    except (OSError, TypeError):
        return None
    return extract_doc_block(source)


class ApiDocIndex:
    """Collects APIDocEntry values keyed by (module, verb, route)."""

    def __init__(self):
        self._entries: dict[tuple[str, str, str], APIDocEntry] = {}

    def add(self, module: str, verb: str, route: str, doc: str) -> APIDocEntry:
        entry = APIDocEntry(module=module, verb=verb, route=route, doc=doc)
        self._entries[(module, verb, route)] = entry
        return entry

    def discard(self, module: str, verb: str, route: str) -> None:
        self._entries.pop((module, verb, route), None)

    def get(self, module: str, verb: str, route: str) -> APIDocEntry | None:
        return self._entries.get((module, verb, route))

    def by_module(self) -> dict[str, list[APIDocEntry]]:
        grouped: dict[str, list[APIDocEntry]] = {}
        for entry in self._entries.values():
            grouped.setdefault(entry.module, []).append(entry)
        return grouped

    def __iter__(self) -> Iterator[APIDocEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)
