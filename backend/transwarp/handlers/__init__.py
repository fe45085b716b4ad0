"""Handler Modules — one file per resource/concern, discovered by filename.

Invariants:
    - Each module exposes routes() -> {"VERB /path": handler} (or RouteSpec keys)
    - Filenames must match ^[A-Za-z][A-Za-z0-9_]*\\.py$ to be discovered
    - Routes never contain dispatch logic (area gate, errors live in api/)

Design Decisions:
    - /api/ handlers document themselves with a docstring: it feeds the API console
"""
