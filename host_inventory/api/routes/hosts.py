"""Host Routes — terminal handlers for /hosts and their guard chains.

Invariants:
    - Each handler invokes exactly one HostRepository operation
    - Handlers never catch repository errors: the recover() guard owns them
    - update_host takes the id from the path, overriding any id in the body
    - Chain order: log → recover → cors → accept [→ content-type → body] → handler

Design Decisions:
    - Chains declared once in build_router(); routes registered with
      add_api_route so FastAPI only does path matching (ADR: pipeline owns
      negotiation and decoding, not FastAPI dependencies)
    - Repository built per request from the store provider: the store singleton
      is initialized by the lifespan, after routes are registered
"""

import logging
from typing import Callable

from fastapi import APIRouter, status
from fastapi.responses import Response

from host_inventory.api.envelope import resource_response
from host_inventory.api.guards import (
    allow_cors,
    decode_body,
    log_requests,
    recover,
    require_accept,
    require_content_type,
)
from host_inventory.api.pipeline import Chain, RequestContext
from host_inventory.config import Settings
from host_inventory.core.domain_types import HOSTS_COLLECTION
from host_inventory.core.store_protocols import DocumentStoreLike
from host_inventory.infrastructure.document_store import get_document_store
from host_inventory.schemas.host import HostCollection, HostResource
from host_inventory.services.host_repository import HostRepository

logger = logging.getLogger(__name__)


class HostHandlers:
    """Terminal handlers, one per verb."""

    def __init__(
        self,
        collection_name: str = HOSTS_COLLECTION,
        store_provider: Callable[[], DocumentStoreLike] = get_document_store,
    ):
        self._collection_name = collection_name
        self._store_provider = store_provider

    def _repository(self) -> HostRepository:
        store = self._store_provider()
        return HostRepository(store.collection(self._collection_name))

    async def list_hosts(self, ctx: RequestContext) -> Response:
        hosts = await self._repository().list_all()
        return resource_response(HostCollection(data=hosts))

    async def get_host(self, ctx: RequestContext) -> Response:
        host = await self._repository().find_by_id(ctx.params["id"])
        return resource_response(HostResource(data=host))

    async def create_host(self, ctx: RequestContext) -> Response:
        body = ctx.body_as(HostResource)
        await self._repository().create(body.data)
        return resource_response(body, status.HTTP_201_CREATED)

    async def update_host(self, ctx: RequestContext) -> Response:
        body = ctx.body_as(HostResource)
        body.data.id = ctx.params["id"]
        await self._repository().update(body.data)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    async def delete_host(self, ctx: RequestContext) -> Response:
        await self._repository().delete(ctx.params["id"])
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    async def preflight(self, ctx: RequestContext) -> Response:
        return Response(status_code=status.HTTP_200_OK)


def build_router(
    settings: Settings, handlers: HostHandlers | None = None,
) -> APIRouter:
    """Compose the per-route chains and register them."""
    handlers = handlers or HostHandlers(settings.hosts_collection)

    common = Chain(
        log_requests,
        recover(settings.map_store_errors),
        allow_cors,
        require_accept,
    )
    with_body = common.append(require_content_type, decode_body(HostResource))

    routes = [
        ("GET", "/hosts", common, handlers.list_hosts),
        ("POST", "/hosts", with_body, handlers.create_host),
        ("OPTIONS", "/hosts", common, handlers.preflight),
        ("GET", "/hosts/{id}", common, handlers.get_host),
        ("PUT", "/hosts/{id}", with_body, handlers.update_host),
        ("DELETE", "/hosts/{id}", common, handlers.delete_host),
        ("OPTIONS", "/hosts/{id}", common, handlers.preflight),
    ]

    router = APIRouter(tags=["hosts"])
    for method, path, chain, handler in routes:
        router.add_api_route(
            path, chain.then(handler), methods=[method], name=handler.__name__,
            include_in_schema=method != "OPTIONS",
        )
    logger.debug(f"Registered {len(routes)} host routes")
    return router
