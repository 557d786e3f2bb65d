"""Document Store — collection-addressed CRUD over the documents table, with timeouts.

Invariants:
    - Identifiers are uuid4().hex; anything else raises InvalidIdError before IO
    - find_id/update_id/remove_id raise DocumentNotFoundError when no row matches
    - Every call is bounded by timeout_seconds; expiry raises StoreTimeoutError
    - Documents come back as {"_id": id, **data}, scans in insertion order

Design Decisions:
    - One session per call: the store never holds a transaction across calls
      (ADR: no multi-document consistency)
    - Timeout enforced here, not in the repository: all external calls wrapped
      with timeout/error mapping at the infrastructure layer
"""

import asyncio
import logging
import re
import uuid
from typing import Awaitable, TypeVar

from sqlalchemy import delete, select, update

from host_inventory.core.domain_types import DocumentId
from host_inventory.core.errors import (
    DocumentNotFoundError, InvalidIdError, StoreTimeoutError,
)
from host_inventory.core.store_protocols import Document, PRIMARY_KEY
from host_inventory.infrastructure.database import DatabaseSessionManager
from host_inventory.models.document import Document as DocumentRow

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def parse_id(document_id: object) -> DocumentId:
    """Validate a document id, raising InvalidIdError if malformed."""
    if not isinstance(document_id, str) or not _ID_PATTERN.match(document_id):
        raise InvalidIdError(str(document_id))
    return DocumentId(document_id)


class SQLDocumentCollection:
    """Named collection backed by the documents table."""

    def __init__(
        self, name: str, manager: DatabaseSessionManager, timeout_seconds: float,
    ):
        self.name = name
        self._manager = manager
        self._timeout_seconds = timeout_seconds

    def new_id(self) -> DocumentId:
        return DocumentId(uuid.uuid4().hex)

    async def find_all(self) -> list[Document]:
        return await self._bounded("find_all", self._find_all())

    async def find_id(self, document_id: str) -> Document:
        return await self._bounded("find_id", self._find_id(document_id))

    async def upsert_id(self, document_id: str, document: Document) -> None:
        await self._bounded("upsert_id", self._upsert_id(document_id, document))

    async def update_id(self, document_id: str, document: Document) -> None:
        await self._bounded("update_id", self._update_id(document_id, document))

    async def remove_id(self, document_id: str) -> None:
        await self._bounded("remove_id", self._remove_id(document_id))

    # ─── Internals ──────────────────────────────────────────────

    async def _bounded(self, operation: str, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(
                f"Store {operation} on '{self.name}' timed out "
                f"after {self._timeout_seconds}s",
                extra={"collection": self.name},
            )
            raise StoreTimeoutError(self._timeout_seconds, operation)

    async def _find_all(self) -> list[Document]:
        async with self._manager.session("find_all") as db:
            result = await db.execute(
                select(DocumentRow)
                .where(DocumentRow.collection == self.name)
                .order_by(DocumentRow.inserted_at, DocumentRow.id),
            )
            return [_to_document(row) for row in result.scalars().all()]

    async def _find_id(self, document_id: str) -> Document:
        key = parse_id(document_id)
        async with self._manager.session("find_id") as db:
            row = await db.get(DocumentRow, (self.name, key))
        if row is None:
            raise DocumentNotFoundError(self.name, key)
        return _to_document(row)

    async def _upsert_id(self, document_id: str, document: Document) -> None:
        key = parse_id(document_id)
        async with self._manager.session("upsert_id") as db:
            await db.merge(
                DocumentRow(collection=self.name, id=key, data=_strip_key(document)),
            )
            await db.commit()

    async def _update_id(self, document_id: str, document: Document) -> None:
        key = parse_id(document_id)
        async with self._manager.session("update_id") as db:
            result = await db.execute(
                update(DocumentRow)
                .where(DocumentRow.collection == self.name, DocumentRow.id == key)
                .values(data=_strip_key(document)),
            )
            await db.commit()
            matched = result.rowcount
        if not matched:
            raise DocumentNotFoundError(self.name, key)

    async def _remove_id(self, document_id: str) -> None:
        key = parse_id(document_id)
        async with self._manager.session("remove_id") as db:
            result = await db.execute(
                delete(DocumentRow)
                .where(DocumentRow.collection == self.name, DocumentRow.id == key),
            )
            await db.commit()
            matched = result.rowcount
        if not matched:
            raise DocumentNotFoundError(self.name, key)


def _to_document(row: DocumentRow) -> Document:
    return {**row.data, PRIMARY_KEY: row.id}


def _strip_key(document: Document) -> Document:
    return {k: v for k, v in document.items() if k != PRIMARY_KEY}


class DocumentStore:
    """Hands out collections that share one session manager and timeout."""

    def __init__(
        self, manager: DatabaseSessionManager, timeout_seconds: float = 10.0,
    ):
        self.manager = manager
        self.timeout_seconds = timeout_seconds

    def collection(self, name: str) -> SQLDocumentCollection:
        return SQLDocumentCollection(name, self.manager, self.timeout_seconds)


# Singleton (initialized on startup)
document_store: DocumentStore | None = None


def init_document_store(
    manager: DatabaseSessionManager, timeout_seconds: float = 10.0,
) -> DocumentStore:
    global document_store
    document_store = DocumentStore(manager, timeout_seconds)
    return document_store


def get_document_store() -> DocumentStore:
    """Return the process-wide store; fails if the lifespan has not run."""
    if not document_store:
        raise RuntimeError("Document store not initialized")
    return document_store
