# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Interfaces the hook pipeline consumes from the MTA.

The SMTP protocol engine and the delivery queue live outside this
package. They hand the pipeline objects matching these protocols.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class Session(Protocol):
    """A live SMTP server session.

    ``write_reply`` sends a reply line to the client; ``request_termination``
    asks the engine to close the connection as soon as possible and must be
    idempotent.
    """

    session_id: str
    remote_address: str

    @property
    def is_authenticated(self) -> bool: ...

    def write_reply(self, code: int, msg: str) -> None: ...

    def request_termination(self) -> None: ...

    def log_info(self, msg: str) -> None: ...

    def log_error(self, msg: str) -> None: ...


class HookConfigProvider(Protocol):
    """Read-only view of the configuration used by the pipeline."""

    def temp_directory(self) -> str: ...

    def endpoints_for(self, hook_name: str) -> list[str]: ...

    def rest_server_address(self) -> tuple[str, int]: ...

    def rest_server_uses_tls(self) -> bool: ...


@dataclass(frozen=True)
class Delivery:
    """Queued message being delivered to a remote host."""

    id: str
    mail_from: str
    rcpt_to: str
    auth_user: str = ""


__all__ = ["Delivery", "HookConfigProvider", "Session"]
