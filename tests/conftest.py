# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Shared fixtures: an in-memory SMTP session and a scripted transport."""

from __future__ import annotations

import asyncio

import msgpack
import pytest

from mta_hooks.errors import TransportError
from mta_hooks.hook_config import HooksConfig


def packed(**fields) -> bytes:
    """Encode a response the way a hook endpoint would."""
    return msgpack.packb(fields, use_bin_type=True)


class FakeSession:
    """Records what the pipeline does to an SMTP session."""

    def __init__(self, authenticated: bool = False):
        self.session_id = "sess-1"
        self.remote_address = "192.0.2.10:40000"
        self.authenticated = authenticated
        self.replies: list[tuple[int, str]] = []
        self.terminations = 0
        self.infos: list[str] = []
        self.errors: list[str] = []

    @property
    def is_authenticated(self) -> bool:
        return self.authenticated

    def write_reply(self, code: int, msg: str) -> None:
        self.replies.append((code, msg))

    def request_termination(self) -> None:
        self.terminations += 1

    def log_info(self, msg: str) -> None:
        self.infos.append(msg)

    def log_error(self, msg: str) -> None:
        self.errors.append(msg)


class FakeTransport:
    """Answers calls from a per-address script.

    A script entry is response bytes, an exception to raise, or an
    awaitable factory returning bytes.
    """

    def __init__(self, script: dict | None = None):
        self.script = script or {}
        self.calls: list[tuple[str, bytes]] = []

    async def call(self, endpoint, payload: bytes) -> bytes:
        self.calls.append((endpoint.address, payload))
        answer = self.script.get(endpoint.address, b"")
        if callable(answer):
            answer = await answer()
        if isinstance(answer, BaseException):
            raise answer
        return answer

    @property
    def addresses(self) -> list[str]:
        return [address for address, _ in self.calls]


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def auth_session():
    return FakeSession(authenticated=True)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def make_config(tmp_path):
    def _make(**endpoints) -> HooksConfig:
        return HooksConfig(endpoints=dict(endpoints), temp_dir=str(tmp_path))

    return _make


def failing(status: int | None = 500) -> TransportError:
    return TransportError(f"{status} boom", status=status, body="boom")


async def slow_answer(delay: float = 0.05, body: bytes = b"") -> bytes:
    await asyncio.sleep(delay)
    return body
