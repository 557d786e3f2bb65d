"""Service Layer — resource repositories over core store contracts.

Invariants:
    - Services depend on core/ Protocols, never on SQLAlchemy directly
"""
