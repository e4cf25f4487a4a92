# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Configuration loader for hook endpoints.

This module loads :class:`HooksConfig` from an INI-style configuration
file, with environment variables as fallbacks.

Example:
    Configuration file format (config.ini)::

        [hooks]
        smtpdnewclient = http://127.0.0.1:3000/newclient?fireandforget=true
        smtpdrcptto =
            http://127.0.0.1:3000/rcptto?onfailure=tempfail&timeout=5
            http://127.0.0.1:3001/rcptto?skipauthentifieduser=true
        smtpddata = http://127.0.0.1:3000/data
        deliverdgetroutes = http://127.0.0.1:3000/routes

        [rest]
        host = 10.0.0.5
        port = 8080
        tls = false

        [paths]
        temp_dir = /var/spool/mta-hooks

    Loading it::

        config = load_hooks_config("/etc/mta-hooks/config.ini")
"""

from __future__ import annotations

import configparser
import os
import re
from pathlib import Path

from .hook_config import HOOK_NAMES, HooksConfig, RestServerConfig
from .logger import get_logger

logger = get_logger("config_loader")

_TRUTHY = ("1", "true", "yes", "on")


def _is_truthy(value: str | None) -> bool:
    return value is not None and value.strip().lower() in _TRUTHY


def split_references(value: str | None) -> list[str]:
    """Split a configured value into endpoint references.

    References are separated by newlines, whitespace or commas.
    """
    if not value:
        return []
    return [ref for ref in re.split(r"[\s,]+", value.strip()) if ref]


def load_hooks_config(config_path: str | None = None) -> HooksConfig:
    """Load hook configuration from config file or environment.

    Priority: config file > environment variables > defaults.

    Environment variables:
        MTH_HOOK_<NAME>: Endpoint references for hook ``name``
            (e.g. MTH_HOOK_SMTPDRCPTTO)
        MTH_REST_HOST: Address advertised in message body links
        MTH_REST_PORT: Port advertised in message body links
        MTH_REST_TLS: Use https links ("1", "true", "yes", "on")
        MTH_TEMP_DIR: Directory for message bodies during the data hook

    Args:
        config_path: Optional path to config.ini file

    Returns:
        HooksConfig with parsed settings, using defaults for missing values.
    """
    config = HooksConfig()

    for name in HOOK_NAMES:
        refs = split_references(os.environ.get(f"MTH_HOOK_{name.upper()}"))
        if refs:
            config.endpoints[name] = refs

    rest = RestServerConfig()
    rest.host = os.environ.get("MTH_REST_HOST", rest.host)
    env_port = os.environ.get("MTH_REST_PORT")
    if env_port is not None:
        try:
            rest.port = int(env_port)
        except ValueError:
            logger.warning("Invalid value for MTH_REST_PORT, using default")
    if "MTH_REST_TLS" in os.environ:
        rest.tls = _is_truthy(os.environ["MTH_REST_TLS"])
    config.rest = rest

    temp_dir = os.environ.get("MTH_TEMP_DIR")
    if temp_dir:
        config.temp_dir = temp_dir

    if not config_path:
        return config
    if not Path(config_path).exists():
        logger.warning(f"Config file not found: {config_path}, using environment")
        return config

    parser = configparser.ConfigParser(interpolation=None)
    parser.read(config_path)

    if parser.has_section("hooks"):
        for name, value in parser.items("hooks"):
            if name not in HOOK_NAMES:
                logger.warning(f"Ignoring unknown hook in [hooks] section: {name}")
                continue
            config.endpoints[name] = split_references(value)

    if parser.has_section("rest"):
        rest.host = parser.get("rest", "host", fallback=rest.host).strip() or rest.host
        try:
            rest.port = parser.getint("rest", "port", fallback=rest.port)
        except ValueError:
            logger.warning("Invalid value for [rest] port, using default")
        try:
            rest.tls = parser.getboolean("rest", "tls", fallback=rest.tls)
        except ValueError:
            logger.warning("Invalid value for [rest] tls, using default")

    if parser.has_section("paths"):
        temp_dir = parser.get("paths", "temp_dir", fallback="").strip()
        if temp_dir:
            config.temp_dir = temp_dir

    return config


__all__ = ["load_hooks_config", "split_references"]
