# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Hook dispatcher of a mail transfer agent.

At defined points of an SMTP session and of remote delivery the MTA calls
externally configured HTTP services and folds their answers back into
the session.

Components:
    HookPipeline: Runs a hook against its ordered endpoints.
    EndpointDescriptor: Parsed endpoint reference with its failure policy.
    TransportClient: One HTTP request/response exchange with a deadline.
    HooksConfig: Endpoint lists and REST server settings.

Hooks:
    - smtpdnewclient: new SMTP connection (reply, drop)
    - smtpdrcptto: RCPT TO accepted (reply, drop, relay permission)
    - smtpddata: message received (reply, drop, extra headers)
    - deliverdgetroutes: remote delivery routes

Example:
    Wiring the pipeline into an SMTP server::

        from mta_hooks import HookPipeline, load_hooks_config

        pipeline = HookPipeline(load_hooks_config("/etc/mta-hooks/config.ini"))

        result = await pipeline.new_client(session)
        if result.stop:
            return
"""

from .config_loader import load_hooks_config
from .endpoint import EndpointDescriptor, OnFailure, parse_endpoint
from .errors import ConfigError, DecodeError, EncodeError, HookError, TransportError
from .hook_config import HooksConfig, RestServerConfig
from .pipeline import HookPipeline
from .result import PipelineResult
from .session import Delivery
from .transport import TransportClient

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "DecodeError",
    "Delivery",
    "EncodeError",
    "EndpointDescriptor",
    "HookError",
    "HookPipeline",
    "HooksConfig",
    "OnFailure",
    "PipelineResult",
    "RestServerConfig",
    "TransportClient",
    "TransportError",
    "load_hooks_config",
    "parse_endpoint",
]
