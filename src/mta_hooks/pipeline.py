# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Hook pipeline: call the configured endpoints of a hook and fold their answers.

For a hook run the pipeline:

1. reads the ordered endpoint references configured for the hook
   (none configured: nothing happens, no network activity);
2. encodes the query once;
3. visits the endpoints in order, skipping those marked
   ``skipauthentifieduser`` for authenticated sessions, detaching those
   marked ``fireandforget``, and calling the others;
4. stops at the first endpoint whose failure policy halts or whose answer
   carries an SMTP reply or a drop request.

Example:
    Running the rcpt-to hook from an SMTP session::

        pipeline = HookPipeline(load_hooks_config("/etc/mta-hooks/config.ini"))
        result = await pipeline.rcpt_to(session, "alice@example.com")
        if result.stop:
            return  # the hook already answered the client
        relay_allowed = bool(result.relay_granted)
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from .bridge import apply_outcome
from .codec import decode, encode_query
from .endpoint import EndpointDescriptor, parse_endpoint
from .errors import ConfigError, DecodeError, EncodeError, TransportError
from .logger import get_logger
from .msdata import message_body_link
from .policy import halts_pipeline, handle_failure
from .prometheus import HookMetrics
from .result import PipelineResult
from .session import Delivery, HookConfigProvider, Session
from .transport import TransportClient
from .variants import DATA, GET_ROUTES, NEW_CLIENT, RCPT_TO, HookVariant

ErrorSink = Callable[[EndpointDescriptor, BaseException], None]

logger = get_logger(__name__)


class HookPipeline:
    """Runs hooks against their configured endpoints.

    One pipeline can serve every session of the MTA: a run keeps its state
    in its own PipelineResult and only mutates the session it was given.

    Attributes:
        config: Provider of endpoint references and REST server settings.
        transport: Client performing the endpoint calls.
        metrics: Optional Prometheus collector.
        error_sink: Optional callable receiving errors of fire-and-forget
            calls. It is informational only and never changes a run.
    """

    def __init__(
        self,
        config: HookConfigProvider,
        transport: TransportClient | None = None,
        metrics: HookMetrics | None = None,
        error_sink: ErrorSink | None = None,
    ):
        self.config = config
        self.transport = transport or TransportClient()
        self.metrics = metrics
        self.error_sink = error_sink
        self._detached: set[asyncio.Task] = set()

    # ----------------------------------------------------------------- hooks

    async def new_client(self, session: Session) -> PipelineResult:
        """Run the new-client hook for a freshly connected session."""
        return await self.run(
            NEW_CLIENT,
            session,
            session_id=session.session_id,
            remote_ip=session.remote_address,
        )

    async def rcpt_to(self, session: Session, rcpt_to: str) -> PipelineResult:
        """Run the rcpt-to hook. ``relay_granted`` of the result holds the answer."""
        return await self.run(RCPT_TO, session, session_id=session.session_id, rcpt_to=rcpt_to)

    async def data(self, session: Session, raw_mail: bytes) -> PipelineResult:
        """Run the data hook on a received message.

        The message is exposed to endpoints through a temporary file served by
        the REST server; the file is removed before this coroutine returns.
        Header lines returned by endpoints are collected in ``extra_headers``.
        """
        if not self.config.endpoints_for(DATA.hook_name):
            return PipelineResult()
        try:
            with message_body_link(raw_mail, self.config) as link:
                return await self.run(DATA, session, session_id=session.session_id, data_link=link)
        except EncodeError as exc:
            session.log_error(f"hook {DATA.hook_name} aborted. {exc}")
            return PipelineResult(error=exc)

    async def get_routes(self, delivery: Delivery) -> PipelineResult:
        """Ask the route provider where ``delivery`` should go.

        Only the first configured endpoint is consulted. There is no SMTP
        session: failures are logged and ``stop`` carries the policy decision.
        """
        result = PipelineResult()
        references = self.config.endpoints_for(GET_ROUTES.hook_name)
        if not references:
            return result
        prefix = f"deliverd-remote {delivery.id} - get_routes"

        try:
            payload = encode_query(
                GET_ROUTES.query_model,
                {
                    "deliverd_id": delivery.id,
                    "mail_from": delivery.mail_from,
                    "rcpt_to": delivery.rcpt_to,
                    "authentified_user": delivery.auth_user,
                },
            )
            endpoint = parse_endpoint(references[0])
        except (EncodeError, ConfigError) as exc:
            logger.error(f"{prefix} - unable to prepare call: {exc}")
            result.error = exc
            return result

        logger.info(f"{prefix} - call {endpoint.address}")
        try:
            outcome = await self._exchange(GET_ROUTES, endpoint, payload)
        except (TransportError, DecodeError) as exc:
            logger.error(f"{prefix} - call to {endpoint.address} failed: {exc}")
            self._count("failure", GET_ROUTES)
            result.error = exc
            result.stop = halts_pipeline(endpoint.on_failure)
            if result.stop:
                self._count("halt", GET_ROUTES)
            return result

        GET_ROUTES.fold(outcome, result)
        if not result.routes:
            logger.info(f"{prefix} - no routes returned")
        return result

    # -------------------------------------------------------------- executor

    async def run(self, variant: HookVariant, session: Session, **fields: Any) -> PipelineResult:
        """Run a session hook.

        Args:
            variant: The hook to run.
            session: Live SMTP session the hook belongs to.
            **fields: Query fields for ``variant.query_model``.

        Returns:
            The aggregated PipelineResult. ``stop`` is True when the current
            SMTP command must not be processed further.

        Raises:
            ValueError: ``variant`` is the get-routes hook, which has no
                session and is run with ``get_routes``.
        """
        if variant is GET_ROUTES:
            raise ValueError("get-routes is single-provider, use HookPipeline.get_routes")
        result = PipelineResult()
        references = self.config.endpoints_for(variant.hook_name)
        if not references:
            return result

        try:
            payload = encode_query(variant.query_model, fields)
        except EncodeError as exc:
            session.log_error(f"hook {variant.hook_name} aborted. {exc}")
            result.error = exc
            return result

        for reference in references:
            try:
                endpoint = parse_endpoint(reference)
            except ConfigError as exc:
                session.log_error(str(exc))
                result.error = exc
                continue

            if session.is_authenticated and endpoint.skip_if_authenticated:
                self._count("skipped", variant)
                continue

            session.log_info(f"calling {endpoint.address}")
            if endpoint.fire_and_forget:
                self._detach(variant, endpoint, payload)
                continue

            try:
                outcome = await self._exchange(variant, endpoint, payload)
            except (TransportError, DecodeError) as exc:
                self._count("failure", variant)
                result.error = exc
                reply = handle_failure(endpoint, exc, session, replied=result.reply is not None)
                if reply is None:
                    continue
                if result.reply is None:
                    result.reply = reply
                return self._stopped(variant, result)

            if apply_outcome(variant, outcome, session, result):
                return self._stopped(variant, result)

        return result

    async def drain(self) -> None:
        """Wait for outstanding fire-and-forget calls.

        Hook runs never wait for them; this is for shutdown and tests.
        """
        if self._detached:
            await asyncio.gather(*list(self._detached), return_exceptions=True)

    @property
    def detached_count(self) -> int:
        """Number of fire-and-forget calls still in flight."""
        return len(self._detached)

    # --------------------------------------------------------------- helpers

    async def _exchange(
        self, variant: HookVariant, endpoint: EndpointDescriptor, payload: bytes
    ) -> BaseModel:
        self._count("call", variant)
        body = await self.transport.call(endpoint, payload)
        return decode(variant.response_model, body)

    def _stopped(self, variant: HookVariant, result: PipelineResult) -> PipelineResult:
        result.stop = True
        self._count("halt", variant)
        return result

    def _detach(self, variant: HookVariant, endpoint: EndpointDescriptor, payload: bytes) -> None:
        # not joined: may outlive the run and the session
        task = asyncio.create_task(
            self._fire_and_forget(endpoint, payload),
            name=f"hook-{variant.hook_name}-detached",
        )
        self._detached.add(task)
        task.add_done_callback(self._detached.discard)
        self._count("detached", variant)

    async def _fire_and_forget(self, endpoint: EndpointDescriptor, payload: bytes) -> None:
        try:
            await self.transport.call(endpoint, payload)
        except Exception as exc:  # noqa: BLE001 - outcome is discarded
            self._report_detached(endpoint, exc)

    def _report_detached(self, endpoint: EndpointDescriptor, exc: Exception) -> None:
        logger.debug(f"fire-and-forget call to {endpoint.address} failed: {exc}")
        if self.error_sink is None:
            return
        try:
            self.error_sink(endpoint, exc)
        except Exception:  # noqa: BLE001
            logger.debug("fire-and-forget error sink raised", exc_info=True)

    def _count(self, event: str, variant: HookVariant) -> None:
        if self.metrics is not None:
            getattr(self.metrics, f"inc_{event}")(variant.hook_name)


__all__ = ["ErrorSink", "HookPipeline"]
