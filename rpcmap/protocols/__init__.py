#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
rpcmap protocol adapters.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from .adapter import (
    InvalidParamsError,
    InvalidRequestError,
    JsonRpcProtocolAdapter,
    JsonRpcProtocolError,
    MethodNotFoundError,
    bind_params,
    to_jsonable,
)
from .jsonrpc import LIST_METHOD, JsonRpcDispatcher
from .models import CallableInfo, RpcRequest

__all__ = [
    "JsonRpcProtocolAdapter",
    "JsonRpcProtocolError",
    "InvalidRequestError",
    "InvalidParamsError",
    "MethodNotFoundError",
    "JsonRpcDispatcher",
    "LIST_METHOD",
    "CallableInfo",
    "RpcRequest",
    "bind_params",
    "to_jsonable",
]
