# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for the REST server exposing message bodies."""

from urllib.parse import urlsplit

import pytest
from conftest import FakeSession, FakeTransport
from fastapi.testclient import TestClient

from mta_hooks.api import create_app
from mta_hooks.hook_config import HooksConfig
from mta_hooks.msdata import message_body_link
from mta_hooks.pipeline import HookPipeline
from mta_hooks.prometheus import HookMetrics


@pytest.fixture
def config(tmp_path):
    return HooksConfig(temp_dir=str(tmp_path))


@pytest.fixture
def client(config):
    return TestClient(create_app(config))


def test_serves_message_during_hook(config, client):
    with message_body_link(b"Subject: hi\r\n\r\nbody", config) as link:
        path = urlsplit(link).path
        response = client.get(path)

    assert response.status_code == 200
    assert response.content == b"Subject: hi\r\n\r\nbody"
    assert response.headers["content-type"] == "application/octet-stream"

    assert client.get(path).status_code == 404


def test_unknown_file(client):
    assert client.get("/msdata/mth-doesnotexist").status_code == 404


def test_rejects_foreign_names(tmp_path, client):
    (tmp_path / "secret.txt").write_text("nope")

    assert client.get("/msdata/secret.txt").status_code == 404


def test_status(client):
    assert client.get("/status").json() == {"ok": True}


def test_metrics(config):
    metrics = HookMetrics()
    metrics.inc_call("smtpdrcptto")
    client = TestClient(create_app(config, metrics=metrics))

    response = client.get("/metrics")

    assert response.status_code == 200
    assert 'mth_hook_calls_total{hook="smtpdrcptto"} 1.0' in response.text


def test_standalone_metrics_have_no_samples(client):
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "mth_hook_calls_total{" not in response.text


@pytest.mark.asyncio
async def test_metrics_shared_with_pipeline(config):
    pipeline = HookPipeline(
        HooksConfig(endpoints={"smtpdrcptto": ["http://a/x"]}, temp_dir=config.temp_dir),
        transport=FakeTransport(),
        metrics=HookMetrics(),
    )
    await pipeline.rcpt_to(FakeSession(), "bob@example.com")
    client = TestClient(create_app(config, metrics=pipeline.metrics))

    response = client.get("/metrics")

    assert 'mth_hook_calls_total{hook="smtpdrcptto"} 1.0' in response.text
