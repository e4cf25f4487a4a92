# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""The closed set of hooks the MTA exposes.

Each variant pairs its hook name with the models used to encode queries
and decode answers, and with the rule folding hook-specific data into the
run result.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel

from .codec import (
    DataQuery,
    DataResponse,
    GetRoutesQuery,
    GetRoutesResponse,
    NewClientQuery,
    NewClientResponse,
    RcptToQuery,
    RcptToResponse,
)
from .hook_config import HOOK_DATA, HOOK_GET_ROUTES, HOOK_NEW_CLIENT, HOOK_RCPT_TO
from .result import PipelineResult

FoldRule = Callable[[BaseModel, PipelineResult], None]


def _fold_nothing(outcome: BaseModel, result: PipelineResult) -> None:
    pass


def _fold_relay_granted(outcome: RcptToResponse, result: PipelineResult) -> None:
    # last answering endpoint wins
    result.relay_granted = outcome.relay_granted


def _fold_extra_headers(outcome: DataResponse, result: PipelineResult) -> None:
    result.extra_headers.extend(outcome.extra_headers)


def _fold_routes(outcome: GetRoutesResponse, result: PipelineResult) -> None:
    result.routes.extend(outcome.routes)


@dataclass(frozen=True)
class HookVariant:
    """One hook point of the MTA.

    Attributes:
        hook_name: Configuration key listing the hook endpoints.
        query_model: Model of the request sent to endpoints.
        response_model: Model decoding endpoint answers.
        fold: Merges hook-specific response data into the run result.
    """

    hook_name: str
    query_model: type[BaseModel]
    response_model: type[BaseModel]
    fold: FoldRule


NEW_CLIENT = HookVariant(HOOK_NEW_CLIENT, NewClientQuery, NewClientResponse, _fold_nothing)
RCPT_TO = HookVariant(HOOK_RCPT_TO, RcptToQuery, RcptToResponse, _fold_relay_granted)
DATA = HookVariant(HOOK_DATA, DataQuery, DataResponse, _fold_extra_headers)
GET_ROUTES = HookVariant(HOOK_GET_ROUTES, GetRoutesQuery, GetRoutesResponse, _fold_routes)

VARIANTS = {v.hook_name: v for v in (NEW_CLIENT, RCPT_TO, DATA, GET_ROUTES)}


__all__ = ["DATA", "GET_ROUTES", "NEW_CLIENT", "RCPT_TO", "VARIANTS", "FoldRule", "HookVariant"]
