"""Infrastructure Layer - SQL-backed collaborators and cross-cutting concerns.

Invariants:
    - Stores implement the Protocols in core/repository_protocols.py
    - ORM rows are converted to core value objects before leaving this layer
    - SQLAlchemy exceptions never escape a store unmapped
"""
