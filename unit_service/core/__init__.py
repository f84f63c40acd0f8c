"""Core Layer: pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - Entity helpers mutate only the Unit they are called on

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
