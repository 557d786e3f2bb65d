"""API Layer — JSON:API envelopes, guard pipeline, routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every /hosts response body is a JSON:API envelope ({"data"} or {"errors"})

Design Decisions:
    - Guards compose around thin handlers; handlers delegate to services (ADR: ExMA impureim sandwich)
"""
