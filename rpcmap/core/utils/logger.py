#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Logging mixin for rpcmap components.

Components inherit ``ModernLogger`` and log through ``self.debug(...)``,
``self.info(...)`` and friends. Console output is rendered by rich.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import logging
from typing import Any, Optional, Union

from rich.logging import RichHandler

_ROOT_LOGGER_NAME = "rpcmap"
_CONSOLE_MARKER = "_rpcmap_console"


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        return logging.WARNING
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError("Unknown log level: {0}".format(level))
    return resolved


def _build_handler(rich_output: bool) -> logging.Handler:
    handler: logging.Handler
    if rich_output:
        handler = RichHandler(rich_tracebacks=True, show_time=False, show_path=False)
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    setattr(handler, _CONSOLE_MARKER, True)
    return handler


def configure_logging(
    level: Union[int, str, None] = None,
    rich_output: bool = True,
) -> logging.Logger:
    """
    Apply console style and level to the ``rpcmap`` namespace root.

    The console handler installed by rpcmap is replaced; handlers added by the
    application are left alone. Child loggers without their own level follow
    the root level.
    """
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        if getattr(handler, _CONSOLE_MARKER, False):
            root.removeHandler(handler)
    root.addHandler(_build_handler(rich_output))
    if level is not None:
        root.setLevel(_resolve_level(level))
    return root


def get_logger(
    name: Optional[str] = None,
    level: Union[int, str, None] = None,
    rich_output: bool = True,
) -> logging.Logger:
    """
    Return a logger under the ``rpcmap`` namespace.

    A console handler is attached to the namespace root the first time it is
    requested; child loggers propagate to it.
    """
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not root.handlers:
        root.addHandler(_build_handler(rich_output))

    if not name or name == _ROOT_LOGGER_NAME:
        logger = root
    elif name.startswith(_ROOT_LOGGER_NAME + "."):
        logger = logging.getLogger(name)
    else:
        logger = logging.getLogger("{0}.{1}".format(_ROOT_LOGGER_NAME, name))

    if level is not None:
        logger.setLevel(_resolve_level(level))
    return logger


class ModernLogger:
    """
    Mixin giving a component its own named logger.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        level: Union[int, str, None] = None,
        rich_output: bool = True,
    ) -> None:
        self._logger = get_logger(
            name or self.__class__.__name__,
            level=level,
            rich_output=rich_output,
        )

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def set_level(self, level: Union[int, str]) -> None:
        """Set logging level."""
        self._logger.setLevel(_resolve_level(level))

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.exception(msg, *args, **kwargs)
