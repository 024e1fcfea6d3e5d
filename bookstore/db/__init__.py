"""Database Package — declarative Base and session factory helpers.

Invariants:
    - Models import Base from here; nothing here imports models
"""
