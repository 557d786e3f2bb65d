"""Boundary Protocols — contract between the repository and the document store.

Invariants:
    - Core NEVER imports from infrastructure: dependency arrows point inward only
    - A document is a JSON-safe dict; its identifier lives under "_id"
    - Failures are raised as core/errors.py StoreError subclasses, never returned

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass in-memory fakes
      without inheriting anything (ADR: ExMA anti-pattern)
    - new_id() belongs to the store: identifiers are store-assigned
"""

from typing import Any, Protocol

Document = dict[str, Any]

PRIMARY_KEY = "_id"


class DocumentCollection(Protocol):
    """One named collection in the document store."""
    name: str

    def new_id(self) -> str: ...
    async def find_all(self) -> list[Document]: ...
    async def find_id(self, document_id: str) -> Document: ...
    async def upsert_id(self, document_id: str, document: Document) -> None: ...
    async def update_id(self, document_id: str, document: Document) -> None: ...
    async def remove_id(self, document_id: str) -> None: ...


class DocumentStoreLike(Protocol):
    """Structural contract for the store handed to resource handlers."""
    def collection(self, name: str) -> DocumentCollection: ...
