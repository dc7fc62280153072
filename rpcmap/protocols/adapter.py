#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
JSON-RPC adapter building blocks for rpcmap.

This module works on already-decoded JSON values (dicts, lists, scalars); it
does not read or write bytes.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import dataclasses
import inspect
import typing
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from ..core.args import pointee_type, zero_value
from ..core.signature import NoArg
from ..core.utils.exceptions import ExceptionTranslator
from .models import RpcRequest


class JsonRpcProtocolError(ValueError):
    """
    Base JSON-RPC validation error with protocol-specific error code.
    """

    code = -32000


class InvalidRequestError(JsonRpcProtocolError):
    """
    JSON-RPC invalid request error (-32600).
    """

    code = -32600


class MethodNotFoundError(JsonRpcProtocolError):
    """
    JSON-RPC method not found error (-32601).
    """

    code = -32601


class InvalidParamsError(JsonRpcProtocolError):
    """
    JSON-RPC invalid params error (-32602).
    """

    code = -32602


TARGET_ERROR_CODE = -32000
INTERNAL_ERROR_CODE = -32603

_PLAIN_TYPES: Tuple[type, ...] = (
    bool, int, float, complex, str, bytes, bytearray, list, dict, set, frozenset, tuple,
)


def _attribute_hints(cls: Any) -> Dict[str, Any]:
    hints: Dict[str, Any] = {}
    for source in (getattr(cls, "__init__", None), cls):
        try:
            found = typing.get_type_hints(source)
        except (NameError, TypeError):
            continue
        for key, value in found.items():
            if key != "return":
                hints.setdefault(key, value)
    return hints


def _is_structure(annotation: Any) -> bool:
    if not inspect.isclass(annotation) or issubclass(annotation, Enum):
        return False
    return not issubclass(annotation, _PLAIN_TYPES)


def _bind_value(annotation: Any, value: Any) -> Any:
    """
    Decode one nested value according to its declared type.
    """
    if value is None:
        return None
    target = pointee_type(annotation)
    origin = typing.get_origin(target)
    type_args = typing.get_args(target)

    if origin in (list, set, frozenset) and isinstance(value, list):
        item_type = type_args[0] if type_args else Any
        return origin(_bind_value(item_type, item) for item in value)
    if origin is tuple and isinstance(value, list):
        if len(type_args) == 2 and type_args[1] is Ellipsis:
            return tuple(_bind_value(type_args[0], item) for item in value)
        if len(type_args) == len(value):
            return tuple(_bind_value(kind, item) for kind, item in zip(type_args, value))
        return tuple(value)
    if origin is dict and isinstance(value, Mapping):
        value_type = type_args[1] if len(type_args) == 2 else Any
        return {key: _bind_value(value_type, item) for key, item in value.items()}
    if _is_structure(target) and isinstance(value, Mapping):
        return bind_params(zero_value(target), value, target)
    return value


def bind_params(arg: Any, params: Any, annotation: Any = None) -> Any:
    """
    Fill an input instance created by ``make_arg`` from decoded params.

    ``annotation`` is the declared input type; nested objects and arrays are
    decoded against it. An ``Any`` input receives the params unchanged.

    Returns the populated input, which is a new object for dataclasses and
    scalars.

    Raises:
        InvalidParamsError: If params do not fit the input shape.
    """
    if params is None:
        return arg

    target = pointee_type(annotation) if annotation is not None else type(arg)
    if target is Any or target is object:
        return params

    if isinstance(arg, NoArg):
        if params in ({}, []):
            return arg
        raise InvalidParamsError("Method takes no params")

    if dataclasses.is_dataclass(arg):
        if not isinstance(params, Mapping):
            raise InvalidParamsError("params must be an object")
        known = {item.name for item in dataclasses.fields(arg) if item.init}
        unknown = sorted(set(params) - known)
        if unknown:
            raise InvalidParamsError("Unknown param(s): {0}".format(", ".join(unknown)))
        hints = _attribute_hints(type(arg))
        values = {
            key: _bind_value(hints.get(key, Any), value)
            for key, value in params.items()
        }
        return dataclasses.replace(arg, **values)

    if isinstance(arg, dict):
        if not isinstance(params, Mapping):
            raise InvalidParamsError("params must be an object")
        arg.update(_bind_value(target, dict(params)))
        return arg

    if isinstance(arg, list):
        if not isinstance(params, list):
            raise InvalidParamsError("params must be an array")
        arg.extend(_bind_value(target, params))
        return arg

    if isinstance(arg, (bool, int, float, str)):
        expected = type(arg)
        if isinstance(params, bool) and expected is not bool:
            raise InvalidParamsError("params must be {0}".format(expected.__name__))
        if expected is float and isinstance(params, int):
            return float(params)
        if not isinstance(params, expected):
            raise InvalidParamsError("params must be {0}".format(expected.__name__))
        return params

    if isinstance(params, Mapping) and hasattr(arg, "__dict__"):
        hints = _attribute_hints(type(arg))
        for key, value in params.items():
            if key.startswith("_") or not (hasattr(arg, key) or key in hints):
                raise InvalidParamsError("Unknown param: {0}".format(key))
            setattr(arg, key, _bind_value(hints.get(key, Any), value))
        return arg

    raise InvalidParamsError(
        "Cannot bind params to {0}".format(type(arg).__name__)
    )


def to_jsonable(value: Any) -> Any:
    """
    Convert a call result into JSON-compatible values.
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return to_jsonable(value.value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            item.name: to_jsonable(getattr(value, item.name))
            for item in dataclasses.fields(value)
        }
    if isinstance(value, tuple) and hasattr(value, "_asdict"):
        return {key: to_jsonable(item) for key, item in value._asdict().items()}
    if isinstance(value, Mapping):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    if hasattr(value, "__dict__"):
        return {
            key: to_jsonable(item)
            for key, item in vars(value).items()
            if not key.startswith("_")
        }
    return str(value)


class JsonRpcProtocolAdapter:
    """
    Shared JSON-RPC request parsing and response building.
    """

    JSON_RPC_VERSION = "2.0"
    PROTOCOL = "jsonrpc"

    @classmethod
    def resolve_error_code(cls, exc: Exception) -> int:
        """
        Map framework/runtime exceptions to JSON-RPC error codes.
        """
        if isinstance(exc, JsonRpcProtocolError):
            return exc.code
        return INTERNAL_ERROR_CODE

    @staticmethod
    def standard_error_data(
        protocol: str, method: Optional[str], error_type: str
    ) -> Dict[str, Any]:
        """
        Build a normalized JSON-RPC error.data payload.
        """
        return {
            "protocol": protocol,
            "method": method,
            "error_type": error_type,
        }

    def parse_request(self, payload: Any) -> RpcRequest:
        if not isinstance(payload, Mapping):
            raise InvalidRequestError("JSON-RPC payload must be an object")

        version = payload.get("jsonrpc")
        if version != self.JSON_RPC_VERSION:
            raise InvalidRequestError(
                "Unsupported jsonrpc version: {0}".format(version)
            )

        method = payload.get("method")
        if not isinstance(method, str) or not method.strip():
            raise InvalidRequestError("JSON-RPC method must be a non-empty string")

        return RpcRequest(
            method=method.strip(),
            params=payload.get("params"),
            request_id=payload.get("id"),
            is_notification="id" not in payload,
        )

    def _success(self, request_id: Any, result: Any) -> Dict[str, Any]:
        return {
            "jsonrpc": self.JSON_RPC_VERSION,
            "id": request_id,
            "result": result,
        }

    def _error(
        self,
        request_id: Any,
        code: int,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        error_obj: Dict[str, Any] = {
            "code": code,
            "message": message,
        }
        if data:
            error_obj["data"] = data

        return {
            "jsonrpc": self.JSON_RPC_VERSION,
            "id": request_id,
            "error": error_obj,
        }

    def method_not_found(self, request_id: Any, method: str) -> Dict[str, Any]:
        """
        Build a standardized method-not-found response.
        """
        return self._error(
            request_id=request_id,
            code=MethodNotFoundError.code,
            message="Unknown method: {0}".format(method),
            data=self.standard_error_data(
                protocol=self.PROTOCOL,
                method=method or None,
                error_type="MethodNotFound",
            ),
        )

    def target_error(
        self, request_id: Any, method: str, error: Exception
    ) -> Dict[str, Any]:
        """
        Build the response for an error returned by a target.
        """
        return self._error(
            request_id=request_id,
            code=TARGET_ERROR_CODE,
            message=str(error) or error.__class__.__name__,
            data=self.standard_error_data(
                protocol=self.PROTOCOL,
                method=method,
                error_type=error.__class__.__name__,
            ),
        )

    def error_from_exception(
        self,
        request_id: Any,
        exc: Exception,
        method: Optional[str],
    ) -> Dict[str, Any]:
        """
        Build a standardized JSON-RPC error from runtime/validation exceptions.
        """
        translated = ExceptionTranslator.as_protocol_error(
            exc=exc,
            protocol=self.PROTOCOL,
            method=method,
        )
        return self._error(
            request_id=request_id,
            code=self.resolve_error_code(exc),
            message=translated.message,
            data=self.standard_error_data(
                protocol=self.PROTOCOL,
                method=method,
                error_type=exc.__class__.__name__,
            ),
        )
