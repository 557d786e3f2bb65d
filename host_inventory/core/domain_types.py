"""Domain Types — shared constants and identity types for the inventory API.

Invariants:
    - JSONAPI_MEDIA_TYPE is the only media type accepted or emitted
    - DocumentId is the store's 32-char lowercase hex identifier

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
"""

from typing import NewType

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"

DocumentId = NewType("DocumentId", str)

HOSTS_COLLECTION = "hosts"

CORS_ALLOW_METHODS = "POST, GET, OPTIONS, PUT, DELETE"
CORS_ALLOW_HEADERS = (
    "Accept, Content-Type, Content-Length, Accept-Encoding, "
    "X-CSRF-Token, Authorization"
)
