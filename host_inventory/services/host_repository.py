"""Host Repository — CRUD for hosts against one document-store collection.

Invariants:
    - create() ignores caller id/timestamps; created == modified at creation
    - create() writes the assigned id back onto the caller's Host only on success
    - update() preserves the stored creation timestamp and refreshes modified
    - Store failures propagate unchanged (no caching, retry, or batching)

Design Decisions:
    - Depends on the DocumentCollection Protocol, not on SQLAlchemy
      (ADR: core contracts, infrastructure implementations)
    - Injected clock: timestamps are deterministic under test
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from host_inventory.core.errors import InvalidIdError
from host_inventory.core.store_protocols import (
    Document, DocumentCollection, PRIMARY_KEY,
)
from host_inventory.schemas.host import Host

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HostRepository:
    """Host persistence bound to a single collection."""

    def __init__(
        self,
        collection: DocumentCollection,
        clock: Callable[[], datetime] | None = None,
    ):
        self._collection = collection
        self._clock = clock or utcnow

    async def list_all(self) -> list[Host]:
        documents = await self._collection.find_all()
        return [_to_host(doc) for doc in documents]

    async def find_by_id(self, host_id: str) -> Host:
        return _to_host(await self._collection.find_id(host_id))

    async def create(self, host: Host) -> None:
        """Persist a new host under a fresh store-assigned id."""
        host_id = self._collection.new_id()
        now = self._clock()
        host.created_at = now
        host.modified_at = now
        await self._collection.upsert_id(host_id, _to_document(host))
        host.id = host_id
        logger.info(
            f"Created host {host_id}",
            extra={"collection": self._collection.name, "document_id": host_id},
        )

    async def update(self, host: Host) -> None:
        """Replace a stored host. host.id must already be set."""
        if not host.id:
            raise InvalidIdError(host.id)
        stored = await self.find_by_id(host.id)
        host.created_at = stored.created_at
        host.modified_at = self._clock()
        await self._collection.update_id(host.id, _to_document(host))

    async def delete(self, host_id: str) -> None:
        await self._collection.remove_id(host_id)
        logger.info(
            f"Deleted host {host_id}",
            extra={"collection": self._collection.name, "document_id": host_id},
        )


def _to_document(host: Host) -> Document:
    return host.model_dump(mode="json", by_alias=True, exclude={"id"})


def _to_host(document: Document) -> Host:
    body = {k: v for k, v in document.items() if k != PRIMARY_KEY}
    return Host.model_validate({**body, "id": document[PRIMARY_KEY]})
