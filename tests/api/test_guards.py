"""Guards — content negotiation, body decoding, CORS, recovery and request logging.

Tests cover:
    - require_accept / require_content_type: exact match, halt before downstream
    - decode_body: 400 on malformed or mistyped JSON, zero-valued defaults, any model
    - allow_cors: origin reflection, OPTIONS short-circuit
    - recover: single 500 envelope + single error log, optional store error mapping
    - log_requests: one record with method/target/duration, even on failure
"""

import logging

import pytest
from fastapi import Request
from fastapi.responses import Response

from host_inventory.api.guards import (
    allow_cors,
    decode_body,
    log_requests,
    recover,
    require_accept,
    require_content_type,
)
from host_inventory.api.pipeline import Chain, RequestContext
from host_inventory.core.domain_types import JSONAPI_MEDIA_TYPE
from host_inventory.core.errors import (
    DocumentNotFoundError, InvalidIdError, StoreError, StoreTimeoutError,
)
from host_inventory.schemas.host import HostResource, Sensor


class SpyHandler:
    def __init__(self):
        self.calls = []

    async def __call__(self, ctx):
        self.calls.append(ctx)
        return Response(status_code=200)


def _raising(exc):
    async def handler(ctx):
        raise exc
    return handler


# ─── require_accept ──────────────────────────────────────────────

@pytest.mark.parametrize("headers", [
    {},
    {"Accept": "application/json"},
    {"Accept": "*/*"},
    {"Accept": f"{JSONAPI_MEDIA_TYPE}; charset=utf-8"},
])
async def test_require_accept_rejects_anything_but_exact_media_type(mount, headers):
    spy = SpyHandler()
    res = await mount(Chain(require_accept).then(spy), headers=headers)

    assert res.status_code == 406
    assert res.json()["errors"][0]["id"] == "not_acceptable"
    assert res.headers["content-type"] == JSONAPI_MEDIA_TYPE
    assert spy.calls == []


async def test_require_accept_forwards_exact_media_type(mount):
    spy = SpyHandler()
    res = await mount(
        Chain(require_accept).then(spy), headers={"Accept": JSONAPI_MEDIA_TYPE},
    )
    assert res.status_code == 200
    assert len(spy.calls) == 1


# ─── require_content_type ────────────────────────────────────────

async def test_content_type_mismatch_halts_before_decoding(mount):
    spy = SpyHandler()
    chain = Chain(require_content_type, decode_body(HostResource))

    res = await mount(
        chain.then(spy), method="POST", content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert res.status_code == 415
    assert res.json()["errors"][0]["id"] == "unsupported_media_type"
    assert spy.calls == []


# ─── decode_body ─────────────────────────────────────────────────

@pytest.mark.parametrize("raw", [
    b"",
    b"{not json",
    b"[]",
    b'{"data": {"hostname": 5}}',
    b'{"data": {"sensors": [{"ports": ["http"]}]}}',
    b'{"data": {"sensors": [{"name": "s", "ports": ["80"]}]}}',
    b'{"data": {"sensors": [{"name": "s", "ports": [true]}]}}',
    b'{"data": {"sensors": [{"name": "s", "ports": [80.5]}]}}',
    b'{"data": {"sensors": [{"ports": [null]}]}}',
    b'{"data": {"created": 12345}}',
    b'{"data": {"hostname": true}}',
])
async def test_decode_body_rejects_undecodable_bodies(mount, raw):
    spy = SpyHandler()
    res = await mount(
        Chain(decode_body(HostResource)).then(spy), method="POST", content=raw,
    )

    assert res.status_code == 400
    assert res.json() == {"errors": [{
        "id": "bad_request", "status": 400, "title": "Bad request",
        "detail": "Request body is not well-formed. It must be JSON.",
    }]}
    assert spy.calls == []


async def test_decode_body_attaches_typed_body(mount):
    spy = SpyHandler()
    await mount(
        Chain(decode_body(HostResource)).then(spy), method="POST",
        content=b'{"data": {"hostname": "h1", "type": "vm", "extra": true}}',
    )

    body = spy.calls[0].body_as(HostResource)
    assert body.data.hostname == "h1"
    assert body.data.host_type == "vm"


async def test_decode_body_fills_zero_values(mount):
    spy = SpyHandler()
    await mount(
        Chain(decode_body(HostResource)).then(spy), method="POST", content=b"{}",
    )

    host = spy.calls[0].body.data
    assert host.id is None
    assert host.hostname == ""
    assert host.sensors == []
    assert host.ip_addresses.ipv4 == []


@pytest.mark.parametrize("raw", [
    b"null",
    b'{"data": null}',
    b'{"data": {"sensors": null, "ip_addresses": {"ipv4": null}, "provider": null}}',
    b'{"data": {"hostname": null, "sensors": [{"name": "snmp", "ports": null}]}}',
])
async def test_decode_body_treats_null_as_zero_value(mount, raw):
    spy = SpyHandler()
    res = await mount(
        Chain(decode_body(HostResource)).then(spy), method="POST", content=raw,
    )

    assert res.status_code == 200
    host = spy.calls[0].body_as(HostResource).data
    assert host.hostname == ""
    assert host.ip_addresses.ipv4 == []
    assert host.provider.name == ""
    assert all(sensor.ports == [] for sensor in host.sensors)


async def test_decode_body_keeps_iso_timestamps(mount):
    spy = SpyHandler()
    await mount(
        Chain(decode_body(HostResource)).then(spy), method="POST",
        content=b'{"data": {"created": "2026-01-01T00:00:00Z"}}',
    )
    assert spy.calls[0].body.data.created_at.year == 2026


async def test_decode_body_works_for_any_model(mount):
    spy = SpyHandler()
    await mount(
        Chain(decode_body(Sensor)).then(spy), method="POST",
        content=b'{"name": "snmp", "ports": [161, 162]}',
    )
    assert spy.calls[0].body_as(Sensor).ports == [161, 162]


# ─── allow_cors ──────────────────────────────────────────────────

async def test_cors_reflects_origin(mount):
    res = await mount(
        Chain(allow_cors).then(SpyHandler()),
        headers={"Origin": "https://ui.example.com"},
    )

    assert res.headers["access-control-allow-origin"] == "https://ui.example.com"
    assert res.headers["access-control-allow-methods"] == "POST, GET, OPTIONS, PUT, DELETE"
    assert res.headers["access-control-allow-headers"] == (
        "Accept, Content-Type, Content-Length, Accept-Encoding, "
        "X-CSRF-Token, Authorization"
    )


async def test_cors_without_origin_sets_nothing(mount):
    res = await mount(Chain(allow_cors).then(SpyHandler()))
    assert "access-control-allow-origin" not in res.headers


async def test_options_short_circuits_before_negotiation(mount):
    spy = SpyHandler()
    chain = Chain(allow_cors, require_accept, require_content_type)

    res = await mount(
        chain.then(spy), method="OPTIONS",
        headers={"Origin": "https://ui.example.com", "Accept": "text/html"},
    )

    assert res.status_code == 200
    assert res.content == b""
    assert res.headers["access-control-allow-origin"] == "https://ui.example.com"
    assert spy.calls == []


async def test_cors_headers_survive_inner_error_envelope(mount):
    res = await mount(
        Chain(allow_cors, require_accept).then(SpyHandler()),
        headers={"Origin": "https://ui.example.com"},
    )
    assert res.status_code == 406
    assert res.headers["access-control-allow-origin"] == "https://ui.example.com"


# ─── recover ─────────────────────────────────────────────────────

async def test_recover_turns_failure_into_single_500(mount, caplog):
    caplog.set_level(logging.INFO)
    chain = Chain(recover())

    res = await mount(chain.then(_raising(RuntimeError("disk on fire"))))

    assert res.status_code == 500
    assert res.json() == {"errors": [{
        "id": "internal_server_error", "status": 500,
        "title": "Internal Server Error", "detail": "Something went wrong.",
    }]}
    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert "disk on fire" in errors[0].getMessage()
    assert errors[0].exc_info is not None
    assert errors[0].error_code == "UNHANDLED"
    assert errors[0].severity == "critical"


@pytest.mark.parametrize("exc, code, category, severity", [
    (StoreError("connection refused", "execute"), "STORE_ERROR", "database", "critical"),
    (StoreTimeoutError(10.0, "find_all"), "STORE_TIMEOUT", "timeout", "critical"),
    (DocumentNotFoundError("hosts", "0" * 32), "DOCUMENT_NOT_FOUND", "resource_not_found", "error"),
])
async def test_recover_logs_error_classification(mount, caplog, exc, code, category, severity):
    caplog.set_level(logging.INFO)

    await mount(Chain(recover()).then(_raising(exc)))

    [record] = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert record.error_code == code
    assert record.error_category == category
    assert record.severity == severity


async def test_recover_does_not_leak_detail_to_client(mount):
    res = await mount(
        Chain(recover()).then(_raising(StoreError("password=hunter2", "execute"))),
    )
    assert "hunter2" not in res.text


@pytest.mark.parametrize("exc", [
    DocumentNotFoundError("hosts", "0" * 32),
    InvalidIdError("nope"),
])
async def test_recover_collapses_store_errors_by_default(mount, exc):
    res = await mount(Chain(recover()).then(_raising(exc)))
    assert res.status_code == 500


@pytest.mark.parametrize("exc, status, code", [
    (DocumentNotFoundError("hosts", "0" * 32), 404, "not_found"),
    (InvalidIdError("nope"), 400, "bad_request"),
    (StoreError("connection refused", "execute"), 500, "internal_server_error"),
])
async def test_recover_maps_store_errors_when_enabled(mount, exc, status, code):
    res = await mount(Chain(recover(map_store_errors=True)).then(_raising(exc)))

    assert res.status_code == status
    assert res.json()["errors"][0]["id"] == code


async def test_recover_catches_failures_in_inner_guards(mount):
    async def broken_guard(ctx, call_next):
        raise ValueError("guard bug")

    res = await mount(Chain(recover(), broken_guard).then(SpyHandler()))
    assert res.status_code == 500


# ─── log_requests ────────────────────────────────────────────────

def _make_ctx(method="GET", path="/hosts", query=b"") -> RequestContext:
    request = Request({
        "type": "http", "method": method, "path": path,
        "headers": [], "query_string": query,
    })
    return RequestContext(request=request)


async def test_log_requests_records_method_target_and_duration(caplog):
    caplog.set_level(logging.INFO, logger="host_inventory.api.guards")

    response = await log_requests(_make_ctx(query=b"page=2"), SpyHandler())

    assert response.status_code == 200
    [record] = [r for r in caplog.records if r.name == "host_inventory.api.guards"]
    assert record.method == "GET"
    assert record.path == "/hosts?page=2"
    assert record.status_code == 200
    assert record.duration_ms >= 0
    assert "[GET]" in record.getMessage()


async def test_log_requests_logs_even_when_downstream_raises(caplog):
    caplog.set_level(logging.INFO, logger="host_inventory.api.guards")

    with pytest.raises(RuntimeError):
        await log_requests(_make_ctx("DELETE"), _raising(RuntimeError("boom")))

    [record] = [r for r in caplog.records if r.name == "host_inventory.api.guards"]
    assert record.method == "DELETE"
    assert record.status_code is None
