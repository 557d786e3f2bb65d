"""Request Pipeline — explicit per-request context and immutable guard chains.

Invariants:
    - A fresh RequestContext is built for every request (no cross-request state)
    - Guards run in composition order; a guard that returns without calling
      call_next stops every later guard and the handler
    - Chains are linked once in then() at startup and never mutated afterwards
    - Headers registered on ctx.response_headers land on the final response,
      whichever guard or handler produced it

Design Decisions:
    - Guard signature mirrors Starlette's dispatch(request, call_next), but over
      RequestContext so decoded bodies and params travel explicitly
      (ADR: no side-table keyed by request)
    - append() returns a new Chain: a base chain is shared by every route
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from fastapi import Request
from fastapi.responses import Response
from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class RequestContext:
    """Request-scoped state threaded through every guard and the handler."""
    request: Request
    params: dict[str, str] = field(default_factory=dict)
    body: BaseModel | None = None
    response_headers: dict[str, str] = field(default_factory=dict)

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def target(self) -> str:
        """Path plus query string, as sent by the client."""
        url = self.request.url
        return f"{url.path}?{url.query}" if url.query else url.path

    def body_as(self, model: type[ModelT]) -> ModelT:
        """Decoded body, checked against the shape the handler expects."""
        if not isinstance(self.body, model):
            raise TypeError(
                f"Request body is {type(self.body).__name__}, "
                f"expected {model.__name__} (missing decode_body guard?)",
            )
        return self.body


Handler = Callable[[RequestContext], Awaitable[Response]]
Guard = Callable[[RequestContext, Handler], Awaitable[Response]]
Endpoint = Callable[[Request], Awaitable[Response]]


class Chain:
    """Ordered, immutable list of guards ending in a handler."""

    def __init__(self, *guards: Guard):
        self._guards: tuple[Guard, ...] = guards

    @property
    def guards(self) -> tuple[Guard, ...]:
        return self._guards

    def append(self, *guards: Guard) -> "Chain":
        return Chain(*self._guards, *guards)

    def then(self, handler: Handler) -> Endpoint:
        """Link the guards around handler and return a FastAPI endpoint."""
        call = handler
        for guard in reversed(self._guards):
            call = _link(guard, call)

        async def endpoint(request: Request) -> Response:
            ctx = RequestContext(request=request, params=dict(request.path_params))
            response = await call(ctx)
            for name, value in ctx.response_headers.items():
                response.headers[name] = value
            return response

        return endpoint


def _link(guard: Guard, call_next: Handler) -> Handler:
    async def linked(ctx: RequestContext) -> Response:
        return await guard(ctx, call_next)
    return linked
