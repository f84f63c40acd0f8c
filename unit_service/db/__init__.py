"""Database Metadata: declarative Base and the shared session factory.

Invariants:
    - Engine lifecycle and the request-scoped session manager live in infrastructure/database.py
"""
