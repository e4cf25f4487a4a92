# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Apply a decoded endpoint response to the SMTP session."""

from __future__ import annotations

from .codec import HookResponse
from .result import PipelineResult
from .session import Session
from .variants import HookVariant


def apply_outcome(
    variant: HookVariant,
    outcome: HookResponse,
    session: Session,
    result: PipelineResult,
) -> bool:
    """Fold ``outcome`` into ``result`` and the session.

    Hook-specific data is folded first. A reply with both code and message
    is written to the client and stops the command. A drop request asks
    the session to terminate and stops the command even without a reply.

    Returns:
        True when the current SMTP command must not be processed further.
    """
    variant.fold(outcome, result)

    stop = False
    reply = outcome.smtp_response
    if reply is not None and reply.is_set:
        session.write_reply(reply.code, reply.msg)
        session.log_info(f"smtp response from hook sent to client: {reply}")
        result.reply = reply
        stop = True

    if outcome.drop_connection:
        session.request_termination()
        stop = True

    return stop


__all__ = ["apply_outcome"]
