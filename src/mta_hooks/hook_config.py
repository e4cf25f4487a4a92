# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Configuration dataclasses for the hook dispatcher.

Provides nested configuration structure:
- config.endpoints["smtpdrcptto"]
- config.rest.host / config.rest.port / config.rest.tls
- config.temp_directory()
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field

HOOK_NEW_CLIENT = "smtpdnewclient"
HOOK_RCPT_TO = "smtpdrcptto"
HOOK_DATA = "smtpddata"
HOOK_GET_ROUTES = "deliverdgetroutes"

HOOK_NAMES = (HOOK_NEW_CLIENT, HOOK_RCPT_TO, HOOK_DATA, HOOK_GET_ROUTES)


@dataclass
class RestServerConfig:
    """REST server exposing received message bodies to the data hook."""

    host: str = "127.0.0.1"
    """Address advertised in message body links."""

    port: int = 8080
    """Port advertised in message body links."""

    tls: bool = False
    """Whether links use https."""


@dataclass
class HooksConfig:
    """Main configuration container for the hook dispatcher.

    Example:
        config = HooksConfig(
            endpoints={"smtpdrcptto": ["http://filter.local/rcpt?onfailure=tempfail"]},
            rest=RestServerConfig(host="10.0.0.5", port=8080),
        )
        pipeline = HookPipeline(config)
    """

    endpoints: dict[str, list[str]] = field(default_factory=dict)
    """Ordered endpoint references per hook name."""

    rest: RestServerConfig = field(default_factory=RestServerConfig)
    """REST server settings."""

    temp_dir: str = field(default_factory=tempfile.gettempdir)
    """Directory holding message bodies while the data hook runs."""

    def endpoints_for(self, hook_name: str) -> list[str]:
        """Return the configured references for ``hook_name`` in order."""
        return list(self.endpoints.get(hook_name, ()))

    def temp_directory(self) -> str:
        return self.temp_dir

    def rest_server_address(self) -> tuple[str, int]:
        return self.rest.host, self.rest.port

    def rest_server_uses_tls(self) -> bool:
        return self.rest.tls


__all__ = [
    "HOOK_DATA",
    "HOOK_GET_ROUTES",
    "HOOK_NAMES",
    "HOOK_NEW_CLIENT",
    "HOOK_RCPT_TO",
    "HooksConfig",
    "RestServerConfig",
]
