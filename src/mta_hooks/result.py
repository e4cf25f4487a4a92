# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Aggregate outcome of one hook run."""

from __future__ import annotations

from dataclasses import dataclass, field

from .codec import RouteRecord, SmtpReply
from .errors import HookError


@dataclass
class PipelineResult:
    """What a hook run tells its caller.

    Attributes:
        stop: Halt further processing of the current SMTP command
            (or of the delivery, for get-routes).
        relay_granted: Relay permission from the rcpt-to hook, None when no
            endpoint answered.
        extra_headers: Header lines collected by the data hook.
        routes: Routes returned by the get-routes hook.
        reply: Reply written to the session by this run, if any.
        error: Last error met during the run (configuration, encoding,
            transport or decoding), whether or not it stopped the run.
    """

    stop: bool = False
    relay_granted: bool | None = None
    extra_headers: list[str] = field(default_factory=list)
    routes: list[RouteRecord] = field(default_factory=list)
    reply: SmtpReply | None = None
    error: HookError | None = None


__all__ = ["PipelineResult"]
