# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Temporary storage of message bodies for the data hook.

The data hook does not send the message itself to its endpoints: it
writes the body to a uniquely named file in ``temp_directory()`` and sends a link
served by the REST server (:mod:`mta_hooks.api`)::

    http://<rest host>:<rest port>/msdata/<filename>

The file only lives for the duration of the hook run.
"""

from __future__ import annotations

import os
import re
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .errors import EncodeError
from .logger import get_logger
from .session import HookConfigProvider

MSDATA_PATH = "/msdata"
MSDATA_PREFIX = "mth-"

_FILENAME_RE = re.compile(rf"{re.escape(MSDATA_PREFIX)}[A-Za-z0-9_]+")

logger = get_logger(__name__)


def is_msdata_filename(name: str) -> bool:
    """True for names produced by :func:`message_body_link` and nothing else."""
    return bool(_FILENAME_RE.fullmatch(name))


def build_link(config: HookConfigProvider, filename: str) -> str:
    """Return the URL under which the REST server exposes ``filename``."""
    host, port = config.rest_server_address()
    scheme = "https" if config.rest_server_uses_tls() else "http"
    return f"{scheme}://{host}:{port}{MSDATA_PATH}/{filename}"


@contextmanager
def message_body_link(raw_mail: bytes, config: HookConfigProvider) -> Iterator[str]:
    """Store ``raw_mail`` in a temp file and yield its link.

    The file is removed when the context exits, whatever the outcome.

    Raises:
        EncodeError: If the message cannot be written.
    """
    try:
        with tempfile.NamedTemporaryFile(
            dir=config.temp_directory(), prefix=MSDATA_PREFIX, delete=False
        ) as handle:
            path = Path(handle.name)
            try:
                handle.write(raw_mail)
            except OSError:
                handle.close()
                os.remove(path)
                raise
    except OSError as exc:
        raise EncodeError(f"unable to save message in temp file. {exc}") from exc

    try:
        yield build_link(config, path.name)
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.debug(f"message file {path} already removed")


__all__ = [
    "MSDATA_PATH",
    "MSDATA_PREFIX",
    "build_link",
    "is_msdata_filename",
    "message_body_link",
]
