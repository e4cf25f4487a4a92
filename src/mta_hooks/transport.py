# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""HTTP transport for hook endpoints.

One call is one POST carrying the encoded query as an opaque body. The
response body is returned raw; decoding belongs to the codec.

Example:
    Calling an endpoint::

        client = TransportClient()
        endpoint = parse_endpoint("http://filter.local/rcptto?timeout=5")
        body = await client.call(endpoint, payload)
"""

from __future__ import annotations

import asyncio

import aiohttp

from .codec import CONTENT_TYPE
from .endpoint import EndpointDescriptor
from .errors import TransportError


class TransportClient:
    """Performs request/response exchanges against hook endpoints.

    Attributes:
        content_type: Value of the Content-Type header sent with each call.
    """

    def __init__(self, content_type: str = CONTENT_TYPE):
        self.content_type = content_type

    async def call(self, endpoint: EndpointDescriptor, payload: bytes) -> bytes:
        """POST ``payload`` to the endpoint and return the raw response body.

        The whole exchange (connect, send, read) must complete within
        ``endpoint.timeout_seconds``; zero disables the deadline.

        Raises:
            TransportError: On network failure, timeout, or non-2xx status.
        """
        timeout = aiohttp.ClientTimeout(total=endpoint.timeout_seconds)
        headers = {"Content-Type": self.content_type}
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(endpoint.address, data=payload, headers=headers) as response:
                    # always read the body, error responses carry the reason
                    body = await response.read()
                    status = response.status
                    reason = response.reason or ""
        except asyncio.TimeoutError as exc:
            raise TransportError(
                f"timeout after {endpoint.timeout_seconds}s calling {endpoint.address}"
            ) from exc
        except aiohttp.ClientError as exc:
            raise TransportError(f"unable to call {endpoint.address}: {exc}") from exc

        if not 200 <= status < 300:
            text = body.decode("utf-8", errors="replace")
            raise TransportError(f"{status} {reason} - {text}", status=status, body=text)
        return body


__all__ = ["TransportClient"]
