"""Error Handlers — application-level handlers for errors raised outside route chains.

Invariants:
    - Unmatched routes answer with the not_found JSON:API envelope
    - Other router-level HTTP errors (405, ...) keep FastAPI's default shape
    - Failures inside a route chain never reach these handlers (recover() guard)

Design Decisions:
    - Registered from main.py via register_error_handlers (ADR: ExMA import fan-out < 10)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

from host_inventory.api.envelope import error_response
from host_inventory.schemas.error import ERR_NOT_FOUND

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_http_error_handler(app)


def _register_http_error_handler(app: FastAPI) -> None:
    """Register the routing error handler."""

    @app.exception_handler(StarletteHTTPException)
    async def routing_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            logger.info(
                f"No route for {request.method} {request.url.path}",
                extra={"method": request.method, "path": request.url.path},
            )
            return error_response(ERR_NOT_FOUND)
        return await http_exception_handler(request, exc)
