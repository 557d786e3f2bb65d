"""Core Layer — error taxonomy and boundary contracts, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/

Design Decisions:
    - Contracts live here so services depend on Protocols, not on SQLAlchemy
      (ADR: ExMA impureim sandwich)
"""
