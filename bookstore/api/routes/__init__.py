"""Route Modules — one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Catalog routes hold their own simple queries; transaction routes call services/
"""
