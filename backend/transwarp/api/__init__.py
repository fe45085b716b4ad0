"""API Layer — handler registry, route table, request pipeline and error handlers.

Invariants:
    - Routes come only from handler modules (plus the /error diagnostic route)
    - Every request passes the pipeline before reaching a handler

Design Decisions:
    - Handlers stay thin and take their context via Depends (ADR: impureim sandwich)
"""
