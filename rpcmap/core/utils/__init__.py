#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Utility exports for rpcmap core.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from .logger import ModernLogger, configure_logging, get_logger
from .exceptions import *  # noqa: F401,F403
from .exceptions import ExceptionFormatter, ExceptionTranslator

# Common formatter shortcuts
format_exception = ExceptionFormatter.format_exception
format_exception_chain = ExceptionFormatter.format_exception_chain
format_exception_summary = ExceptionFormatter.format_exception_summary

__all__ = [
    "ModernLogger",
    "configure_logging",
    "get_logger",
    "ExceptionFormatter",
    "ExceptionTranslator",
    "format_exception",
    "format_exception_chain",
    "format_exception_summary",
]
