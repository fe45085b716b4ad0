"""Infrastructure Layer — IO collaborators behind the dispatch core.

Invariants:
    - Templates, identity lookup and upload storage live here, never in core/
    - Each collaborator is injected into create_app() and replaceable in tests
"""
