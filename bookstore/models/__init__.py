"""ORM Models — SQLAlchemy declarative models for all bookstore entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Order is the aggregate root for OrderItem; Book and Genre are soft-deleted only

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from bookstore.models.user import User  # noqa: F401
from bookstore.models.genre import Genre  # noqa: F401
from bookstore.models.book import Book  # noqa: F401
from bookstore.models.order import Order  # noqa: F401
from bookstore.models.order_item import OrderItem  # noqa: F401
