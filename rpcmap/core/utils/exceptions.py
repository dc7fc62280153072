#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Exception hierarchy for rpcmap.

Two families are kept strictly apart:

- Registration faults (``RegistrationError`` and subclasses) are programming
  errors found while building descriptors. They are raised, never returned.
- Call-time outcomes are values. ``NoMethodError`` is the only one defined
  here and a single shared instance, ``NO_METHOD_ERROR``, is returned for
  every failed lookup so callers can test identity.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import traceback
from typing import Any, Dict, List, Optional


class RpcMapError(Exception):
    """
    Root of all rpcmap errors.
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        **details: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details: Dict[str, Any] = dict(details)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
        }
        if self.details:
            payload["details"] = dict(self.details)
        if self.cause is not None:
            payload["cause"] = ExceptionFormatter.format_exception_summary(self.cause)
        return payload


class RegistrationError(RpcMapError):
    """
    A function or service could not be registered.
    """


class SignatureError(RegistrationError):
    """
    Target does not match any accepted calling shape.
    """

    def __init__(self, target_name: str, reason: str) -> None:
        super().__init__(
            "Invalid function signature for {0}: {1}".format(target_name, reason),
            target_name=target_name,
            reason=reason,
        )
        self.target_name = target_name
        self.reason = reason


class ServiceNameError(RegistrationError):
    """
    Service name is missing or not public.
    """


class DuplicateRegistrationError(RegistrationError):
    """
    Name is already taken by an earlier registration.
    """


class NoMethodError(RpcMapError):
    """
    Lookup by name found no registered callable.
    """


class ProtocolHandlingError(RpcMapError):
    """
    Request could not be handled by the protocol dispatch layer.
    """

    def __init__(
        self,
        message: str,
        protocol: Optional[str] = None,
        method: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, cause=cause, protocol=protocol, method=method)
        self.protocol = protocol
        self.method = method


NO_METHOD_ERROR = NoMethodError("unknown method")


class ExceptionFormatter:
    """
    Render exceptions for log records and error payloads.
    """

    @staticmethod
    def format_exception(exc: BaseException) -> str:
        return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    @staticmethod
    def format_exception_chain(exc: BaseException) -> List[str]:
        chain: List[str] = []
        seen = set()
        current: Optional[BaseException] = exc
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            chain.append(ExceptionFormatter.format_exception_summary(current))
            current = current.__cause__ or current.__context__
        return chain

    @staticmethod
    def format_exception_summary(exc: BaseException) -> str:
        message = str(exc)
        if not message:
            return exc.__class__.__name__
        return "{0}: {1}".format(exc.__class__.__name__, message)


class ExceptionTranslator:
    """
    Map arbitrary exceptions onto the rpcmap hierarchy.
    """

    @staticmethod
    def as_protocol_error(
        exc: BaseException,
        protocol: Optional[str] = None,
        method: Optional[str] = None,
    ) -> ProtocolHandlingError:
        if isinstance(exc, ProtocolHandlingError):
            return exc
        return ProtocolHandlingError(
            message=str(exc) or exc.__class__.__name__,
            protocol=protocol,
            method=method,
            cause=exc,
        )


__all__ = [
    "RpcMapError",
    "RegistrationError",
    "SignatureError",
    "ServiceNameError",
    "DuplicateRegistrationError",
    "NoMethodError",
    "ProtocolHandlingError",
    "NO_METHOD_ERROR",
    "ExceptionFormatter",
    "ExceptionTranslator",
]
