#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Calling-shape validation for registered functions and methods.

Accepted shapes (``E`` is any fallible-result annotation such as
``Optional[Exception]``):

    def f() -> E
    def f() -> Tuple[R, E]
    def f(inp: I) -> E
    def f(inp: I) -> Tuple[R, E]
    def f(ctx: C, inp: I) -> E
    def f(ctx: C, inp: I) -> Tuple[R, E]

Methods take the same shapes after the receiver parameter.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import inspect
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

from .utils.exceptions import SignatureError

UNION_ORIGINS: Tuple[Any, ...] = (Union, types.UnionType)
_TUPLE_ORIGINS: Tuple[Any, ...] = (tuple, Tuple)
_REJECTED_PARAMETER_KINDS = {
    inspect.Parameter.VAR_POSITIONAL: "variadic positional parameters",
    inspect.Parameter.VAR_KEYWORD: "variadic keyword parameters",
    inspect.Parameter.KEYWORD_ONLY: "keyword-only parameters",
}


@dataclass
class NoArg:
    """
    Input placeholder for targets that take no input.

    Use it as the input annotation of a context-taking method without input:
    ``def ping(self, ctx: Ctx, _: NoArg) -> Optional[Exception]``.
    """


class CallingConvention(str, Enum):
    """
    Closed set of argument layouts, chosen once at registration.
    """

    NO_ARG = "no_arg"
    INPUT_ONLY = "input_only"
    CONTEXT_AND_INPUT = "context_and_input"

    @classmethod
    def from_arity(cls, arity: int) -> "CallingConvention":
        try:
            return _CONVENTION_BY_ARITY[arity]
        except KeyError:
            raise ValueError("Unsupported arity: {0}".format(arity)) from None

    @property
    def arity(self) -> int:
        return _ARITY_BY_CONVENTION[self]


_CONVENTION_BY_ARITY = {
    0: CallingConvention.NO_ARG,
    1: CallingConvention.INPUT_ONLY,
    2: CallingConvention.CONTEXT_AND_INPUT,
}
_ARITY_BY_CONVENTION = {value: key for key, value in _CONVENTION_BY_ARITY.items()}


@dataclass(frozen=True)
class CallSignature:
    """
    Validated calling shape of one target.
    """

    convention: CallingConvention
    has_result: bool
    input_type: Any
    context_type: Any
    declared_params: int

    @property
    def arity(self) -> int:
        return self.convention.arity


def _target_name(candidate: Any) -> str:
    return getattr(candidate, "__qualname__", None) or repr(candidate)


def _introspection_target(candidate: Any) -> Any:
    """
    Return the object whose signature describes the candidate's calling shape.
    """
    if inspect.isfunction(candidate) or inspect.ismethod(candidate):
        return candidate
    if inspect.isclass(candidate) or not callable(candidate):
        return None
    if inspect.isroutine(candidate):
        return candidate
    return getattr(candidate, "__call__", None)


def is_fallible_type(annotation: Any) -> bool:
    """
    True if the annotation can hold either "no failure" or an exception.
    """
    if inspect.isclass(annotation):
        return issubclass(annotation, Exception)

    if typing.get_origin(annotation) in UNION_ORIGINS:
        members = [item for item in typing.get_args(annotation) if item is not type(None)]
        return bool(members) and all(
            inspect.isclass(item) and issubclass(item, Exception) for item in members
        )
    return False


def _split_returns(annotation: Any) -> Tuple[int, Any]:
    if typing.get_origin(annotation) in _TUPLE_ORIGINS:
        members = typing.get_args(annotation)
        if len(members) == 2 and members[1] is not Ellipsis:
            return 2, members[1]
        return len(members), None
    return 1, annotation


def _inspect(candidate: Any, implicit_leading_args: int) -> Union[CallSignature, str]:
    target = _introspection_target(candidate)
    if target is None:
        return "not a function"
    if inspect.iscoroutinefunction(target):
        return "coroutine functions are not supported"

    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError) as exc:
        return "signature is not inspectable ({0})".format(exc)

    try:
        hints = typing.get_type_hints(target)
    except Exception as exc:
        return "annotations cannot be resolved ({0})".format(exc)

    parameters = list(signature.parameters.values())
    for parameter in parameters:
        reason = _REJECTED_PARAMETER_KINDS.get(parameter.kind)
        if reason is not None:
            return "{0} are not supported".format(reason)

    arity = len(parameters) - implicit_leading_args
    if arity < 0 or arity > 2:
        return "takes {0} argument(s), expected 0, 1 or 2".format(arity)

    if "return" not in hints:
        return "missing return annotation"
    return_count, last_return = _split_returns(hints["return"])
    if return_count not in (1, 2):
        return "returns {0} values, expected 1 or 2".format(return_count)
    if not is_fallible_type(last_return):
        return "last return value {0!r} is not an exception type".format(last_return)

    declared = parameters[implicit_leading_args:]
    if arity == 0:
        input_type: Any = NoArg
    else:
        input_type = hints.get(declared[-1].name, Any)
    context_type = hints.get(declared[0].name, Any) if arity == 2 else None

    return CallSignature(
        convention=CallingConvention.from_arity(arity),
        has_result=return_count == 2,
        input_type=input_type,
        context_type=context_type,
        declared_params=len(parameters),
    )


def describe_rejection(candidate: Any, implicit_leading_args: int = 0) -> Optional[str]:
    """
    Explain why a candidate is rejected, or return None if it is accepted.
    """
    result = _inspect(candidate, implicit_leading_args)
    if isinstance(result, CallSignature):
        return None
    return result


def accepts(candidate: Any, implicit_leading_args: int = 0) -> bool:
    """
    Check whether a candidate matches one of the accepted calling shapes.

    ``implicit_leading_args`` is 0 for free functions and 1 for methods looked
    up on a class (the receiver parameter is not counted). Never raises.
    """
    return describe_rejection(candidate, implicit_leading_args) is None


def analyze_signature(candidate: Any, implicit_leading_args: int = 0) -> CallSignature:
    """
    Validate a candidate and return its calling shape.

    Raises:
        SignatureError: If the candidate does not match an accepted shape.
    """
    result = _inspect(candidate, implicit_leading_args)
    if isinstance(result, CallSignature):
        return result
    raise SignatureError(_target_name(candidate), result)


__all__ = [
    "NoArg",
    "CallingConvention",
    "CallSignature",
    "is_fallible_type",
    "accepts",
    "describe_rejection",
    "analyze_signature",
]
