# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Failure policy of hook endpoints.

``onfailure=continue`` swallows a failed call. ``tempfail`` and
``permfail`` halt the pipeline and, for session hooks, answer the client
with 450 or 550.
"""

from __future__ import annotations

from .codec import SmtpReply
from .endpoint import EndpointDescriptor, OnFailure
from .errors import HookError
from .session import Session

FAILURE_MESSAGE = "sorry something wrong happened"

_DEFAULT_CODES = {
    OnFailure.TEMPFAIL: 450,
    OnFailure.PERMFAIL: 550,
}


def halts_pipeline(policy: OnFailure) -> bool:
    """Return True when a failure under ``policy`` stops the pipeline."""
    return policy in (OnFailure.TEMPFAIL, OnFailure.PERMFAIL)


def default_reply(policy: OnFailure) -> SmtpReply | None:
    """SMTP reply sent to the client when a call fails under ``policy``."""
    code = _DEFAULT_CODES.get(policy)
    if code is None:
        return None
    return SmtpReply(code=code, msg=FAILURE_MESSAGE)


def handle_failure(
    endpoint: EndpointDescriptor,
    error: HookError,
    session: Session,
    replied: bool = False,
) -> SmtpReply | None:
    """Log a failed call on the session and apply the endpoint policy.

    Args:
        endpoint: The endpoint whose call failed.
        error: Transport or decode error of the call.
        session: Live SMTP session.
        replied: True if this hook run already wrote a reply.

    Returns:
        None when the pipeline should continue. Otherwise the reply that
        was written (or would have been, if ``replied`` is set).
    """
    session.log_error(f"hook endpoint {endpoint.address} failed. {error}")
    if not halts_pipeline(endpoint.on_failure):
        return None
    reply = default_reply(endpoint.on_failure)
    if not replied:
        session.write_reply(reply.code, reply.msg)
    return reply


__all__ = ["FAILURE_MESSAGE", "default_reply", "halts_pipeline", "handle_failure"]
