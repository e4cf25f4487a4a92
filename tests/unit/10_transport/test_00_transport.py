# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for the HTTP transport of hook calls."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from mta_hooks.codec import CONTENT_TYPE
from mta_hooks.endpoint import parse_endpoint
from mta_hooks.errors import TransportError
from mta_hooks.transport import TransportClient


def _mock_client_session(status=200, body=b"", reason="OK", post_side_effect=None):
    """Build a patched aiohttp.ClientSession returning a canned response."""
    mock_response = MagicMock()
    mock_response.status = status
    mock_response.reason = reason
    mock_response.read = AsyncMock(return_value=body)

    mock_session = MagicMock()
    if post_side_effect is not None:
        mock_session.post = MagicMock(side_effect=post_side_effect)
    else:
        mock_session.post = MagicMock(return_value=AsyncMock(
            __aenter__=AsyncMock(return_value=mock_response),
            __aexit__=AsyncMock(return_value=None),
        ))

    session_factory = MagicMock(return_value=AsyncMock(
        __aenter__=AsyncMock(return_value=mock_session),
        __aexit__=AsyncMock(return_value=None),
    ))
    return session_factory, mock_session


class TestCall:
    @pytest.mark.asyncio
    async def test_success_returns_raw_body(self):
        factory, mock_session = _mock_client_session(body=b"\x80")
        endpoint = parse_endpoint("http://filter.local/rcptto?timeout=7")

        with patch("aiohttp.ClientSession", factory):
            body = await TransportClient().call(endpoint, b"payload")

        assert body == b"\x80"
        args, kwargs = mock_session.post.call_args
        assert args[0] == "http://filter.local/rcptto"
        assert kwargs["data"] == b"payload"
        assert kwargs["headers"] == {"Content-Type": CONTENT_TYPE}

    @pytest.mark.asyncio
    async def test_timeout_comes_from_endpoint(self):
        factory, _ = _mock_client_session()
        endpoint = parse_endpoint("http://filter.local/x?timeout=7")

        with patch("aiohttp.ClientSession", factory):
            await TransportClient().call(endpoint, b"")

        timeout = factory.call_args.kwargs["timeout"]
        assert isinstance(timeout, aiohttp.ClientTimeout)
        assert timeout.total == 7

    @pytest.mark.asyncio
    async def test_zero_timeout_means_no_deadline(self):
        factory, _ = _mock_client_session()

        with patch("aiohttp.ClientSession", factory):
            await TransportClient().call(parse_endpoint("http://filter.local/x?timeout=0"), b"")

        assert factory.call_args.kwargs["timeout"].total == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [301, 404, 500, 503])
    async def test_non_success_status_is_an_error(self, status):
        factory, _ = _mock_client_session(status=status, body=b"go away", reason="Nope")
        endpoint = parse_endpoint("http://filter.local/x")

        with patch("aiohttp.ClientSession", factory), pytest.raises(TransportError) as excinfo:
            await TransportClient().call(endpoint, b"")

        assert excinfo.value.status == status
        assert excinfo.value.body == "go away"
        assert str(excinfo.value) == f"{status} Nope - go away"

    @pytest.mark.asyncio
    async def test_204_is_a_success(self):
        factory, _ = _mock_client_session(status=204)

        with patch("aiohttp.ClientSession", factory):
            body = await TransportClient().call(parse_endpoint("http://h/x"), b"")

        assert body == b""

    @pytest.mark.asyncio
    async def test_network_error(self):
        factory, _ = _mock_client_session(
            post_side_effect=aiohttp.ClientConnectionError("connection refused")
        )

        with patch("aiohttp.ClientSession", factory), pytest.raises(TransportError) as excinfo:
            await TransportClient().call(parse_endpoint("http://h/x"), b"")

        assert excinfo.value.status is None
        assert "connection refused" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_timeout_error(self):
        factory, _ = _mock_client_session(post_side_effect=asyncio.TimeoutError())

        with patch("aiohttp.ClientSession", factory), pytest.raises(TransportError, match="timeout after 2s"):
            await TransportClient().call(parse_endpoint("http://h/x?timeout=2"), b"")
