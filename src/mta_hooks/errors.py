# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exceptions raised by the hook dispatcher.

Leaf modules (endpoint parser, codec, transport) raise these errors; the
pipeline catches them and decides what the SMTP session should see.
A policy halt is not an error and has no exception class: it is reported
through ``PipelineResult.stop``.
"""

from __future__ import annotations


class HookError(Exception):
    """Base class for every error produced by the hook subsystem."""


class ConfigError(HookError):
    """Raised when an endpoint reference is not a well formed locator."""

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        self.reason = reason
        super().__init__(f"invalid hook endpoint {reference!r}: {reason}")


class EncodeError(HookError):
    """Raised when the outbound payload of a hook cannot be built."""


class DecodeError(HookError):
    """Raised when an endpoint response cannot be decoded."""


class TransportError(HookError):
    """Raised when a call to an endpoint fails.

    Attributes:
        status: HTTP status of the response, or None for network errors
            and timeouts.
        body: Raw response body text (empty for network errors).
    """

    def __init__(self, message: str, status: int | None = None, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(message)


__all__ = [
    "ConfigError",
    "DecodeError",
    "EncodeError",
    "HookError",
    "TransportError",
]
