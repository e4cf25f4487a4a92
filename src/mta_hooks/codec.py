# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Wire messages exchanged with hook endpoints.

Requests and responses are pydantic models serialized as msgpack maps
(content type ``application/x-msgpack``). Field names follow the
message schema shared with hook implementers::

    NewClientQuery   -> NewClientResponse
    RcptToQuery      -> RcptToResponse
    DataQuery        -> DataResponse
    GetRoutesQuery   -> GetRoutesResponse

Unknown response fields are ignored and missing ones take their default,
so an empty 2xx body is a valid "no opinion" answer.
"""

from __future__ import annotations

from typing import Any, TypeVar

import msgpack
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import DecodeError, EncodeError

CONTENT_TYPE = "application/x-msgpack"


class SmtpReply(BaseModel):
    """SMTP reply requested by an endpoint (or synthesized on failure)."""

    model_config = ConfigDict(frozen=True)

    code: int = 0
    msg: str = ""

    @property
    def is_set(self) -> bool:
        """True when both a code and a message are present."""
        return self.code != 0 and self.msg != ""

    def __str__(self) -> str:
        return f"{self.code} {self.msg}"


# Queries


class NewClientQuery(BaseModel):
    session_id: str
    remote_ip: str


class RcptToQuery(BaseModel):
    session_id: str
    rcpt_to: str


class DataQuery(BaseModel):
    session_id: str
    data_link: str


class GetRoutesQuery(BaseModel):
    deliverd_id: str
    mail_from: str
    rcpt_to: str
    authentified_user: str = ""


# Responses


class HookResponse(BaseModel):
    """Fields shared by every SMTP session hook response."""

    smtp_response: SmtpReply | None = None
    drop_connection: bool = False


class NewClientResponse(HookResponse):
    pass


class RcptToResponse(HookResponse):
    relay_granted: bool = False


class DataResponse(HookResponse):
    extra_headers: list[str] = Field(default_factory=list)


class RouteRecord(BaseModel):
    """Delivery route returned by the get-routes hook.

    Zero or empty optional values on the wire mean "not set".
    """

    model_config = ConfigDict(frozen=True)

    remote_host: str
    local_ip: str | None = None
    remote_port: int | None = None
    priority: int | None = None

    @field_validator("local_ip", mode="before")
    @classmethod
    def _empty_ip(cls, value):
        return value or None

    @field_validator("remote_port", "priority", mode="before")
    @classmethod
    def _zero_int(cls, value):
        return value or None


class GetRoutesResponse(BaseModel):
    routes: list[RouteRecord] = Field(default_factory=list)


ResponseT = TypeVar("ResponseT", bound=BaseModel)


def encode(message: BaseModel) -> bytes:
    """Serialize a query model to msgpack bytes.

    Raises:
        EncodeError: If the message cannot be serialized.
    """
    try:
        return msgpack.packb(message.model_dump(mode="json"), use_bin_type=True)
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"unable to serialize {type(message).__name__}: {exc}") from exc


def encode_query(model: type[BaseModel], fields: dict[str, Any]) -> bytes:
    """Build a query model from ``fields`` and serialize it.

    Raises:
        EncodeError: If the fields do not make a valid query or cannot be serialized.
    """
    try:
        query = model(**fields)
    except ValidationError as exc:
        raise EncodeError(f"unable to build {model.__name__}: {exc}") from exc
    return encode(query)


def decode(model: type[ResponseT], data: bytes) -> ResponseT:
    """Deserialize an endpoint response into ``model``.

    Raises:
        DecodeError: If the body is not a msgpack map or does not match the model.
    """
    if not data:
        return model()
    try:
        raw = msgpack.unpackb(data, raw=False)
    except (ValueError, TypeError, msgpack.exceptions.UnpackException) as exc:
        raise DecodeError(f"unable to unpack {model.__name__}: {exc}") from exc
    if not isinstance(raw, dict):
        raise DecodeError(f"unable to unpack {model.__name__}: expected a map, got {type(raw).__name__}")
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise DecodeError(f"invalid {model.__name__}: {exc}") from exc


__all__ = [
    "CONTENT_TYPE",
    "DataQuery",
    "DataResponse",
    "GetRoutesQuery",
    "GetRoutesResponse",
    "HookResponse",
    "NewClientQuery",
    "NewClientResponse",
    "RcptToQuery",
    "RcptToResponse",
    "RouteRecord",
    "SmtpReply",
    "decode",
    "encode",
    "encode_query",
]
