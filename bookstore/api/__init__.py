"""API Layer — FastAPI routes, identity dependency and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return the {success, message, data[, meta]} envelope

Design Decisions:
    - Thin routes delegate order logic to services/, which delegate rules to core/
"""
