"""Core Layer — pure dispatch rules, no IO, no FastAPI.

Invariants:
    - No module in core/ imports from api/, infrastructure/, or handlers/
    - Route spec parsing, area gating and doc extraction are deterministic

Design Decisions:
    - Functional core separated from the HTTP shell so the dispatch contract
      can be tested without an app (ADR: impureim sandwich)
"""
