"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (the acting identity is always an argument)

Design Decisions:
    - Functional core separated from imperative shell: services load rows,
      core decides, services write the decision atomically
"""
