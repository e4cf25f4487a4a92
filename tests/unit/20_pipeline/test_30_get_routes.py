# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for the get-routes hook of remote delivery."""

import logging

import msgpack
import pytest
from conftest import FakeTransport, failing, packed

from mta_hooks.codec import RouteRecord
from mta_hooks.errors import ConfigError, DecodeError, TransportError
from mta_hooks.pipeline import HookPipeline
from mta_hooks.session import Delivery

DELIVERY = Delivery(id="d-42", mail_from="alice@example.com", rcpt_to="bob@example.net", auth_user="alice")

ROUTES = packed(routes=[
    {"remote_host": "mx1.example.net", "remote_port": 25, "priority": 10},
    {"remote_host": "mx2.example.net", "local_ip": "10.0.0.7"},
])


@pytest.mark.asyncio
async def test_no_endpoint_returns_no_routes(make_config, transport):
    result = await HookPipeline(make_config(), transport=transport).get_routes(DELIVERY)

    assert result.stop is False
    assert result.routes == []
    assert transport.calls == []


@pytest.mark.asyncio
async def test_routes_are_returned(make_config):
    transport = FakeTransport({"http://routes/x": ROUTES})
    pipeline = HookPipeline(make_config(deliverdgetroutes=["http://routes/x"]), transport=transport)

    result = await pipeline.get_routes(DELIVERY)

    assert result.stop is False
    assert result.error is None
    assert result.routes == [
        RouteRecord(remote_host="mx1.example.net", remote_port=25, priority=10),
        RouteRecord(remote_host="mx2.example.net", local_ip="10.0.0.7"),
    ]
    ((_, payload),) = transport.calls
    assert msgpack.unpackb(payload, raw=False) == {
        "deliverd_id": "d-42",
        "mail_from": "alice@example.com",
        "rcpt_to": "bob@example.net",
        "authentified_user": "alice",
    }


@pytest.mark.asyncio
async def test_only_first_endpoint_is_called(make_config):
    transport = FakeTransport({"http://first/x": packed(routes=[]), "http://second/x": ROUTES})
    pipeline = HookPipeline(
        make_config(deliverdgetroutes=["http://first/x", "http://second/x"]), transport=transport
    )

    result = await pipeline.get_routes(DELIVERY)

    assert transport.addresses == ["http://first/x"]
    assert result.routes == []
    assert result.stop is False


@pytest.mark.asyncio
async def test_first_endpoint_failure_does_not_fall_through(make_config):
    transport = FakeTransport({"http://first/x": failing(), "http://second/x": ROUTES})
    pipeline = HookPipeline(
        make_config(deliverdgetroutes=["http://first/x", "http://second/x"]), transport=transport
    )

    result = await pipeline.get_routes(DELIVERY)

    assert transport.addresses == ["http://first/x"]
    assert result.routes == []


@pytest.mark.asyncio
async def test_malformed_reference_returns_config_error(make_config, transport, caplog):
    pipeline = HookPipeline(
        make_config(deliverdgetroutes=["http://routes/x?timeout=never", "http://second/x"]),
        transport=transport,
    )

    with caplog.at_level(logging.ERROR):
        result = await pipeline.get_routes(DELIVERY)

    assert isinstance(result.error, ConfigError)
    assert result.stop is False
    assert result.routes == []
    assert transport.calls == []
    assert "deliverd-remote d-42 - get_routes" in caplog.text


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("policy", "stop"), [("continue", False), ("tempfail", True), ("permfail", True)]
)
@pytest.mark.parametrize(("answer", "error_type"), [(failing(), TransportError), (b"\xc1", DecodeError)])
async def test_failure_policy(make_config, policy, stop, answer, error_type):
    transport = FakeTransport({"http://routes/x": answer})
    pipeline = HookPipeline(
        make_config(deliverdgetroutes=[f"http://routes/x?onfailure={policy}"]), transport=transport
    )

    result = await pipeline.get_routes(DELIVERY)

    assert result.stop is stop
    assert result.routes == []
    assert isinstance(result.error, error_type)
