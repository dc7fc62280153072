#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Runtime configuration for rpcmap registries.

Values come from explicit arguments first, then from the environment:

- ``RPCMAP_LOG_LEVEL``: log level name for registry components (default WARNING)
- ``RPCMAP_RICH_LOGGING``: ``0``/``false``/``no``/``off`` disables rich console output

The environment is read on every ``get_config()`` call; nothing is cached at
module level.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Mapping, Optional

NameMapper = Callable[[str], str]

LOG_LEVEL_ENV = "RPCMAP_LOG_LEVEL"
RICH_LOGGING_ENV = "RPCMAP_RICH_LOGGING"

_FALSE_VALUES = {"0", "false", "no", "off"}


def default_name_mapper(name: str) -> str:
    """Map a declared method name to its registered name (lower-case)."""
    return name.lower()


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() not in _FALSE_VALUES


@dataclass(frozen=True)
class RpcMapConfig:
    """
    Settings consumed by ``RpcMap`` and its components.
    """

    log_level: str = "WARNING"
    rich_logging: bool = True
    name_mapper: NameMapper = field(default=default_name_mapper)

    def __post_init__(self) -> None:
        if not callable(self.name_mapper):
            raise TypeError("name_mapper must be callable")
        object.__setattr__(self, "log_level", str(self.log_level).strip().upper())


def get_config(environ: Optional[Mapping[str, str]] = None) -> RpcMapConfig:
    """
    Build configuration from environment variables.
    """
    env = os.environ if environ is None else environ
    return RpcMapConfig(
        log_level=env.get(LOG_LEVEL_ENV) or "WARNING",
        rich_logging=_parse_bool(env.get(RICH_LOGGING_ENV), default=True),
    )


def create_config(
    environ: Optional[Mapping[str, str]] = None, **overrides: Any
) -> RpcMapConfig:
    """
    Build configuration from the environment with explicit overrides applied.
    """
    known = {item.name for item in fields(RpcMapConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise TypeError("Unknown configuration option(s): {0}".format(", ".join(unknown)))
    return replace(get_config(environ), **overrides)
