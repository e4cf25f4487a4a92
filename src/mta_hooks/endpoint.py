# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Hook endpoint references and their parsed form.

A hook endpoint is configured as a URL whose query string carries the
per-endpoint policy::

    https://filter.example.com/smtpd/rcptto?onfailure=tempfail&timeout=5

Recognized parameters:
    skipauthentifieduser=true: do not call the endpoint for authenticated sessions.
    fireandforget=true: dispatch the call without waiting for its result.
    timeout=<seconds>: per-call deadline (default 30, 0 disables it).
    onfailure=continue|tempfail|permfail: what to do when the call fails.

Unknown parameters are ignored, and so is an unrecognized ``onfailure``
value. A malformed ``timeout`` is a configuration error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import parse_qs, urlsplit

from .errors import ConfigError

DEFAULT_TIMEOUT = 30
MAX_TIMEOUT = 2**64 - 1

_TIMEOUT_RE = re.compile(r"[0-9]+")


class OnFailure(Enum):
    """Policy applied when a call to an endpoint fails."""

    CONTINUE = "continue"
    TEMPFAIL = "tempfail"
    PERMFAIL = "permfail"


@dataclass(frozen=True)
class EndpointDescriptor:
    """Typed settings of one configured hook endpoint."""

    address: str
    skip_if_authenticated: bool = False
    fire_and_forget: bool = False
    timeout_seconds: int = DEFAULT_TIMEOUT
    on_failure: OnFailure = OnFailure.CONTINUE


def _first(query: dict[str, list[str]], key: str) -> str:
    values = query.get(key)
    return values[0] if values else ""


def parse_endpoint(reference: str) -> EndpointDescriptor:
    """Parse a configured endpoint reference.

    Args:
        reference: URL of the endpoint, optionally followed by policy
            parameters in its query string.

    Returns:
        The parsed EndpointDescriptor. Its ``address`` is the reference
        without the query string.

    Raises:
        ConfigError: If the reference is not a well formed http(s) URL or
            the timeout is not an unsigned 64-bit integer.
    """
    reference = (reference or "").strip()
    if not reference:
        raise ConfigError(reference, "empty reference")

    try:
        parts = urlsplit(reference)
        parts.port  # noqa: B018 - validates the port
    except ValueError as exc:
        raise ConfigError(reference, str(exc)) from exc

    if parts.scheme not in ("http", "https"):
        raise ConfigError(reference, f"unsupported scheme {parts.scheme!r}")
    if not parts.hostname:
        raise ConfigError(reference, "missing host")

    query = parse_qs(parts.query, keep_blank_values=True)
    settings: dict = {"address": reference.split("?", 1)[0]}

    if _first(query, "skipauthentifieduser") == "true":
        settings["skip_if_authenticated"] = True
    if _first(query, "fireandforget") == "true":
        settings["fire_and_forget"] = True

    timeout = _first(query, "timeout")
    if timeout:
        if not _TIMEOUT_RE.fullmatch(timeout) or int(timeout) > MAX_TIMEOUT:
            raise ConfigError(reference, f"invalid timeout {timeout!r}")
        settings["timeout_seconds"] = int(timeout)

    on_failure = _first(query, "onfailure")
    if on_failure in ("continue", "tempfail", "permfail"):
        settings["on_failure"] = OnFailure(on_failure)

    return EndpointDescriptor(**settings)


__all__ = [
    "DEFAULT_TIMEOUT",
    "MAX_TIMEOUT",
    "EndpointDescriptor",
    "OnFailure",
    "parse_endpoint",
]
