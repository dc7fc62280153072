#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
rpcmap public API with lazy imports.

Call functions and service methods by name, passing generic input and
receiving generic output, without forcing every target into one signature.

    rm = RpcMap()
    rm.func("greet", greet)
    rm.service(Accounts())
    result, error = rm.call("Accounts.balance", ctx, inp)

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from importlib import import_module
from typing import Any, Dict, Tuple

from ._version import __version__

__author__ = "Silan Hu"
__email__ = "silan.hu@u.nus.edu"

_EXPORT_MAP: Dict[str, Tuple[str, str]] = {
    "RpcMap": ("rpcmap.registry", "RpcMap"),
    "NoArg": ("rpcmap.core.signature", "NoArg"),
    "CallingConvention": ("rpcmap.core.signature", "CallingConvention"),
    "accepts": ("rpcmap.core.signature", "accepts"),
    "FunctionCallable": ("rpcmap.core.callables", "FunctionCallable"),
    "MethodCallable": ("rpcmap.core.callables", "MethodCallable"),
    "make_callable": ("rpcmap.core.callables", "make_callable"),
    "ServiceDescriptor": ("rpcmap.core.service", "ServiceDescriptor"),
    "make_service": ("rpcmap.core.service", "make_service"),
    "method_metadata": ("rpcmap.core.metadata", "method_metadata"),
    "RpcMapConfig": ("rpcmap.core.config", "RpcMapConfig"),
    "NO_METHOD_ERROR": ("rpcmap.core.utils.exceptions", "NO_METHOD_ERROR"),
    "NoMethodError": ("rpcmap.core.utils.exceptions", "NoMethodError"),
    "RegistrationError": ("rpcmap.core.utils.exceptions", "RegistrationError"),
    "SignatureError": ("rpcmap.core.utils.exceptions", "SignatureError"),
    "JsonRpcDispatcher": ("rpcmap.protocols", "JsonRpcDispatcher"),
}

__all__ = ["__version__", *sorted(_EXPORT_MAP.keys())]


def __getattr__(name: str) -> Any:
    """
    Resolve public API symbols lazily.
    """
    if name not in _EXPORT_MAP:
        raise AttributeError("module 'rpcmap' has no attribute '{0}'".format(name))

    module_name, attr_name = _EXPORT_MAP[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
