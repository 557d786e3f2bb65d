"""Guards — cross-cutting request stages composed by api/pipeline.py.

Invariants:
    - Guards resolve their own client error immediately and halt the chain
    - recover() is the only place an exception becomes a response
    - Header comparison is exact string equality (no charset/parameter parsing)
    - log_requests never alters the response
    - decode_body is strict: a member of the wrong JSON type is a 400, a null
      member keeps its zero value

Design Decisions:
    - Factories (recover, decode_body) capture configuration at composition time,
      plain coroutines (log_requests, allow_cors, require_*) need none
    - decode_body takes a pydantic model class: one guard for every body shape,
      no runtime type inspection
    - Store errors collapse to 500 unless map_store_errors is set (ADR: opt-in,
      changing status codes is an API change)
"""

import logging
import time
from typing import Any

from fastapi.responses import Response
from pydantic import ValidationError
from pydantic_core import from_json, to_json

from host_inventory.api.envelope import error_response
from host_inventory.api.pipeline import Guard, Handler, ModelT, RequestContext
from host_inventory.core.domain_types import (
    CORS_ALLOW_HEADERS, CORS_ALLOW_METHODS, JSONAPI_MEDIA_TYPE,
)
from host_inventory.core.errors import (
    DocumentNotFoundError, ErrorCategory, ErrorSeverity, InvalidIdError,
    InventoryError,
)
from host_inventory.schemas.error import (
    ERR_BAD_REQUEST,
    ERR_INTERNAL_SERVER,
    ERR_NOT_ACCEPTABLE,
    ERR_NOT_FOUND,
    ERR_UNSUPPORTED_MEDIA_TYPE,
    ErrorItem,
)

logger = logging.getLogger(__name__)


# ─── Observability ───────────────────────────────────────────────

async def log_requests(ctx: RequestContext, call_next: Handler) -> Response:
    """Log method, target and latency once downstream finishes."""
    started = time.perf_counter()
    status_code = None
    try:
        response = await call_next(ctx)
        status_code = response.status_code
        return response
    finally:
        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"[{ctx.method}] {ctx.target!r} {duration_ms:.3f}ms",
            extra={
                "method": ctx.method,
                "path": ctx.target,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 3),
            },
        )


# ─── Recovery ────────────────────────────────────────────────────

def recover(map_store_errors: bool = False) -> Guard:
    """Build the failure boundary for everything composed inside it."""

    async def recover_guard(ctx: RequestContext, call_next: Handler) -> Response:
        try:
            return await call_next(ctx)
        except Exception as exc:
            error = _error_for(exc) if map_store_errors else ERR_INTERNAL_SERVER
            extra = {"path": ctx.target, **_classify(exc)}
            if error is ERR_INTERNAL_SERVER:
                logger.error(
                    f"Unhandled failure on {ctx.method} {ctx.target}: {exc!r}",
                    exc_info=True,
                    extra=extra,
                )
            else:
                logger.warning(
                    f"{error.id} on {ctx.method} {ctx.target}: {exc}",
                    extra=extra,
                )
            return error_response(error)

    return recover_guard


def _classify(exc: Exception) -> dict[str, str]:
    """Log fields for an exception; unknown failures are critical internals."""
    if isinstance(exc, InventoryError):
        return {
            "error_code": exc.code,
            "error_category": exc.category.value,
            "severity": exc.severity.value,
        }
    return {
        "error_code": "UNHANDLED",
        "error_category": ErrorCategory.INTERNAL.value,
        "severity": ErrorSeverity.CRITICAL.value,
    }


def _error_for(exc: Exception) -> ErrorItem:
    if isinstance(exc, DocumentNotFoundError):
        return ERR_NOT_FOUND
    if isinstance(exc, InvalidIdError):
        return ERR_BAD_REQUEST
    return ERR_INTERNAL_SERVER


# ─── CORS ────────────────────────────────────────────────────────

async def allow_cors(ctx: RequestContext, call_next: Handler) -> Response:
    """Reflect the caller's origin; answer preflight requests immediately."""
    origin = ctx.request.headers.get("origin")
    if origin:
        ctx.response_headers["Access-Control-Allow-Origin"] = origin
        ctx.response_headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
        ctx.response_headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS

    if ctx.method == "OPTIONS":
        return Response(status_code=200)

    return await call_next(ctx)


# ─── Content Negotiation ─────────────────────────────────────────

async def require_accept(ctx: RequestContext, call_next: Handler) -> Response:
    if ctx.request.headers.get("accept") != JSONAPI_MEDIA_TYPE:
        return error_response(ERR_NOT_ACCEPTABLE)
    return await call_next(ctx)


async def require_content_type(ctx: RequestContext, call_next: Handler) -> Response:
    if ctx.request.headers.get("content-type") != JSONAPI_MEDIA_TYPE:
        return error_response(ERR_UNSUPPORTED_MEDIA_TYPE)
    return await call_next(ctx)


# ─── Body Decoding ───────────────────────────────────────────────

def decode_body(model: type[ModelT]) -> Guard:
    """Build a guard that decodes the JSON body into a fresh `model`.

    A JSON null, at the top level or on any object member, leaves the zero
    value in place. Every other value must already have the declared type
    (strict mode: no "80" -> 80, no true -> 1, no epoch -> datetime).
    """

    async def decode_body_guard(ctx: RequestContext, call_next: Handler) -> Response:
        raw = await ctx.request.body()
        try:
            document = _without_nulls(from_json(raw))
            ctx.body = model.model_validate_json(to_json(document), strict=True)
        except ValueError as e:
            logger.warning(
                f"Undecodable {model.__name__} body on {ctx.method} "
                f"{ctx.target}: {_describe(e)}",
            )
            return error_response(ERR_BAD_REQUEST)
        return await call_next(ctx)

    return decode_body_guard


def _without_nulls(value: Any) -> Any:
    return {} if value is None else _member(value)


def _member(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _member(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_member(v) for v in value]
    return value


def _describe(e: ValueError) -> str:
    if isinstance(e, ValidationError):
        return f"{e.error_count()} error(s)"
    return "malformed JSON"
