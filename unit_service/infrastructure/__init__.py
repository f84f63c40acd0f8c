"""Infrastructure Layer: database access and cross-cutting concerns.

Invariants:
    - Infrastructure implements core/ Protocols; core never imports infrastructure
    - All SQLAlchemy failures mapped to RepositoryError before leaving this layer
"""
