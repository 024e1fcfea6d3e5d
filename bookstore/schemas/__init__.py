"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Every response body is an ApiResponse envelope {success, message, data[, meta]}

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
