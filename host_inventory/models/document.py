"""Document ORM — one row per stored document, partitioned by collection name.

Invariants:
    - (collection, id) is the primary key: ids are unique per collection
    - data holds the document body without its identifier
    - inserted_at orders unconstrained scans (insertion order)

Design Decisions:
    - JSON column for the body: the store is schemaless, the schema lives in
      pydantic models (ADR: document-store semantics on a relational engine)
    - String(32) id: uuid4().hex, see infrastructure/document_store.py
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from host_inventory.db.base import Base


class Document(Base):
    """Stored document in a named collection."""
    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(String(64), primary_key=True)
    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    inserted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
