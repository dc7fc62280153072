#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Input-argument allocation.

``make_arg`` returns a fresh zero-valued instance of a declared input type so
that a transport layer can decode a payload into it before calling the
target. ``Optional[T]`` is treated as a reference to ``T``: the pointee is
allocated.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import dataclasses
import inspect
import typing
from enum import Enum
from typing import Any, Dict, Tuple

from .signature import NoArg, UNION_ORIGINS

_SCALAR_TYPES: Tuple[type, ...] = (bool, int, float, complex, str, bytes, bytearray)
_CONTAINER_FACTORIES: Dict[Any, Any] = {
    list: list,
    dict: dict,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
}


def pointee_type(annotation: Any) -> Any:
    """
    Strip a single ``Optional[...]`` layer from an input annotation.
    """
    if typing.get_origin(annotation) in UNION_ORIGINS:
        members = [item for item in typing.get_args(annotation) if item is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def _is_namedtuple(annotation: Any) -> bool:
    return (
        inspect.isclass(annotation)
        and issubclass(annotation, tuple)
        and hasattr(annotation, "_fields")
    )


def _zero_dataclass(annotation: Any) -> Any:
    hints = typing.get_type_hints(annotation)
    values: Dict[str, Any] = {}
    for item in dataclasses.fields(annotation):
        if not item.init:
            continue
        if item.default is not dataclasses.MISSING:
            continue
        if item.default_factory is not dataclasses.MISSING:
            continue
        values[item.name] = zero_value(hints.get(item.name, Any))
    return annotation(**values)


def _zero_namedtuple(annotation: Any) -> Any:
    hints = typing.get_type_hints(annotation)
    defaults = getattr(annotation, "_field_defaults", {})
    values = [
        defaults[name] if name in defaults else zero_value(hints.get(name, Any))
        for name in annotation._fields
    ]
    return annotation(*values)


def _zero_instance(annotation: Any) -> Any:
    """
    Build an instance of an ordinary class.

    Required constructor parameters are filled with zero values of their
    annotations. A class whose constructor cannot be satisfied that way is
    allocated without running ``__init__``.
    """
    try:
        parameters = list(inspect.signature(annotation).parameters.values())
    except (TypeError, ValueError):
        return annotation.__new__(annotation)

    required = [
        item
        for item in parameters
        if item.default is inspect.Parameter.empty
        and item.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]
    if not required:
        return annotation()

    try:
        hints = typing.get_type_hints(annotation.__init__)
    except (NameError, TypeError):
        hints = {}
    if any(item.name not in hints for item in required):
        return annotation.__new__(annotation)

    args = []
    kwargs: Dict[str, Any] = {}
    for item in required:
        value = zero_value(hints[item.name])
        if item.kind is inspect.Parameter.POSITIONAL_ONLY:
            args.append(value)
        else:
            kwargs[item.name] = value
    try:
        return annotation(*args, **kwargs)
    except (TypeError, ValueError):
        return annotation.__new__(annotation)


def zero_value(annotation: Any) -> Any:
    """
    Build the zero value for a type annotation.

    Optional members of a structure are zeroed to ``None``; use ``make_arg``
    for a top-level input, which allocates the pointee instead.
    """
    if annotation is Any or annotation is object:
        return {}
    if annotation is None or annotation is type(None):
        return None

    origin = typing.get_origin(annotation)
    if origin in UNION_ORIGINS:
        members = typing.get_args(annotation)
        if type(None) in members:
            return None
        return zero_value(members[0])
    if origin is not None:
        factory = _CONTAINER_FACTORIES.get(origin)
        if factory is not None:
            return factory()
        return zero_value(origin)

    if not inspect.isclass(annotation):
        return None
    if annotation is NoArg:
        return NoArg()
    if issubclass(annotation, Enum):
        return next(iter(annotation))
    if issubclass(annotation, _SCALAR_TYPES):
        return annotation()
    if dataclasses.is_dataclass(annotation):
        return _zero_dataclass(annotation)
    if _is_namedtuple(annotation):
        return _zero_namedtuple(annotation)
    return _zero_instance(annotation)


def make_arg(input_type: Any) -> Any:
    """
    Allocate a new input instance for a declared input type.
    """
    return zero_value(pointee_type(input_type))


__all__ = ["make_arg", "pointee_type", "zero_value"]
