"""Error Envelope Schemas — JSON:API error objects and the fixed catalogue.

Invariants:
    - ErrorItem is frozen: catalogue entries cannot be mutated after import
    - The catalogue is the complete set of errors this API ever returns
    - ErrorEnvelope always serializes as {"errors": [...]}

Design Decisions:
    - Module-level singletons referenced by identity (ERR_NOT_ACCEPTABLE is
      ERR_NOT_ACCEPTABLE), built once at import (ADR: no mutation path)
"""

from pydantic import BaseModel, ConfigDict

from host_inventory.core.domain_types import JSONAPI_MEDIA_TYPE


class ErrorItem(BaseModel):
    """Single JSON:API error object."""
    model_config = ConfigDict(frozen=True)

    id: str
    status: int
    title: str
    detail: str


class ErrorEnvelope(BaseModel):
    """Top-level error response body."""
    errors: list[ErrorItem]


# ─── Catalogue ───────────────────────────────────────────────────

ERR_BAD_REQUEST = ErrorItem(
    id="bad_request", status=400, title="Bad request",
    detail="Request body is not well-formed. It must be JSON.",
)
ERR_UNAUTHORIZED = ErrorItem(
    id="unauthorized", status=401, title="Unauthorized",
    detail="Access token is invalid.",
)
ERR_NOT_FOUND = ErrorItem(
    id="not_found", status=404, title="Not found",
    detail="Route not found.",
)
ERR_NOT_ACCEPTABLE = ErrorItem(
    id="not_acceptable", status=406, title="Not acceptable",
    detail=f'Accept HTTP header must be "{JSONAPI_MEDIA_TYPE}".',
)
ERR_UNSUPPORTED_MEDIA_TYPE = ErrorItem(
    id="unsupported_media_type", status=415, title="Unsupported Media Type",
    detail=f'Content-Type header must be "{JSONAPI_MEDIA_TYPE}".',
)
ERR_INTERNAL_SERVER = ErrorItem(
    id="internal_server_error", status=500, title="Internal Server Error",
    detail="Something went wrong.",
)
