"""API test fixtures — store swapping and FastAPI test clients.

Invariants:
    - The document_store singleton is restored after every test (monkeypatch)
    - `client` drives the real app; `mount` builds throwaway apps for one chain

Design Decisions:
    - httpx ASGITransport does not run the lifespan: tests install the store
      themselves, nothing touches DATABASE_URL
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

import host_inventory.infrastructure.document_store as store_module
from host_inventory.main import app
from tests.fakes import RecordingStore


@pytest.fixture
def recording_store(monkeypatch):
    """Install an in-memory recording store as the process-wide store."""
    store = RecordingStore()
    monkeypatch.setattr(store_module, "document_store", store)
    return store

@pytest.fixture
def sql_store(monkeypatch, document_store):
    """Install the SQLite-backed store as the process-wide store."""
    monkeypatch.setattr(store_module, "document_store", document_store)
    return document_store

@pytest.fixture
async def client():
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

@pytest.fixture
def mount():
    """Mount one endpoint on a fresh app and return a request helper."""

    async def call(endpoint, method="GET", path="/mount", route="/mount", **kwargs):
        mounted_app = FastAPI()
        mounted_app.add_api_route(route, endpoint, methods=[method])
        async with AsyncClient(
            transport=ASGITransport(app=mounted_app), base_url="http://test",
        ) as c:
            return await c.request(method, path, **kwargs)

    return call
