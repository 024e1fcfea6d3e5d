"""Services Layer — imperative shell around the pure order and sales logic.

Invariants:
    - Services own the AsyncSession work (queries, transaction boundaries)
    - Business rules are delegated to core/ functions
"""
