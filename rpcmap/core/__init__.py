#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
rpcmap core module exports (lazy-loaded).

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from importlib import import_module
from typing import Any, Dict, Tuple

_EXPORT_MAP: Dict[str, Tuple[str, str]] = {
    "NoArg": ("rpcmap.core.signature", "NoArg"),
    "CallingConvention": ("rpcmap.core.signature", "CallingConvention"),
    "CallSignature": ("rpcmap.core.signature", "CallSignature"),
    "accepts": ("rpcmap.core.signature", "accepts"),
    "describe_rejection": ("rpcmap.core.signature", "describe_rejection"),
    "analyze_signature": ("rpcmap.core.signature", "analyze_signature"),
    "make_arg": ("rpcmap.core.args", "make_arg"),
    "BaseCallable": ("rpcmap.core.callables", "BaseCallable"),
    "FunctionCallable": ("rpcmap.core.callables", "FunctionCallable"),
    "MethodCallable": ("rpcmap.core.callables", "MethodCallable"),
    "make_callable": ("rpcmap.core.callables", "make_callable"),
    "ServiceDescriptor": ("rpcmap.core.service", "ServiceDescriptor"),
    "SkippedMethod": ("rpcmap.core.service", "SkippedMethod"),
    "make_service": ("rpcmap.core.service", "make_service"),
    "MetadataStore": ("rpcmap.core.metadata", "MetadataStore"),
    "method_metadata": ("rpcmap.core.metadata", "method_metadata"),
    "RpcMapConfig": ("rpcmap.core.config", "RpcMapConfig"),
    "get_config": ("rpcmap.core.config", "get_config"),
    "create_config": ("rpcmap.core.config", "create_config"),
}

__all__ = sorted(_EXPORT_MAP.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MAP:
        raise AttributeError("module 'rpcmap.core' has no attribute '{0}'".format(name))

    module_name, attr_name = _EXPORT_MAP[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
