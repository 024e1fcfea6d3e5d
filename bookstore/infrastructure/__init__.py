"""Infrastructure Layer — database engine, password hashing, token signing, logging.

Invariants:
    - Infrastructure never imports domain logic from core/ (only the error types)
    - Library exceptions are mapped to BookstoreError subclasses at this boundary
"""
