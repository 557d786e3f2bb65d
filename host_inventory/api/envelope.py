"""JSON:API Envelopes — response builders for {"data": ...} and {"errors": [...]} bodies.

Invariants:
    - Every body-carrying response has Content-Type application/vnd.api+json
    - error_response() status always equals the ErrorItem status
    - None fields are omitted from data bodies (id before persistence, optional groups)

Design Decisions:
    - Responses are returned, not written to a sink: one request yields exactly
      one response object, so no double-write is possible (ADR: ASGI model)
"""

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from host_inventory.core.domain_types import JSONAPI_MEDIA_TYPE
from host_inventory.schemas.error import ErrorEnvelope, ErrorItem


class JSONAPIResponse(JSONResponse):
    media_type = JSONAPI_MEDIA_TYPE


def error_response(error: ErrorItem) -> JSONAPIResponse:
    """Single-item error envelope with the item's status."""
    return JSONAPIResponse(
        status_code=error.status,
        content=ErrorEnvelope(errors=[error]).model_dump(),
    )


def resource_response(body: BaseModel, status_code: int = 200) -> JSONAPIResponse:
    return JSONAPIResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
