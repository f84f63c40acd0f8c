"""Services Layer: use-case orchestration over the repository protocols.

Invariants:
    - Services depend on core/ Protocols only, never on concrete repositories
    - Every operation writes at most one entity in one repository call

Design Decisions:
    - Repository injected via constructor (ADR: shell owns the wiring)
"""
