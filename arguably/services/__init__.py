"""Services Layer — the imperative shell around core/.

Invariants:
    - Services load rows, call pure core validators/planners, then write the
      outcome in a single transaction
    - The acting identity is always an explicit parameter

Design Decisions:
    - One service module per workflow for locality
"""
