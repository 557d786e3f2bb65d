"""Infrastructure Layer — database, document store, and logging.

Invariants:
    - Infrastructure never imports from api/ or services/
    - All external calls wrapped with timeout/error mapping

Design Decisions:
    - Resilient wrappers over raw clients (ADR: ExMA single responsibility)
"""
