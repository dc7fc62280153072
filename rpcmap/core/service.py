#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Service reflection: expose the public methods of a receiver as callables.

Every public instance method of the receiver's class is checked against the
accepted calling shapes (the receiver parameter is not counted). Methods that
do not match are skipped without error and recorded in
``ServiceDescriptor.skipped``. The remaining methods are registered under
``name_mapper(method_name)``; a mapper returning an empty string opts the
method out.

Methods are visited in lexicographic order of their declared names, so when
two names map to the same registered name the lexicographically greater one
wins.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .callables import MethodCallable
from .config import NameMapper
from .metadata import declared_metadata
from .signature import analyze_signature
from .utils.exceptions import ServiceNameError, SignatureError
from .utils.logger import get_logger

logger = get_logger(__name__)

NAME_MAPPER_OPT_OUT = "excluded by name mapper"


@dataclass(frozen=True)
class SkippedMethod:
    """
    Public method that was not exposed, with the reason.
    """

    name: str
    reason: str


def is_public_name(name: str) -> bool:
    return bool(name) and not name.startswith("_")


def service_name_for(receiver: Any) -> str:
    """
    Derive a service name from the receiver's type.

    Raises:
        ServiceNameError: If the type name is empty or not public.
    """
    type_name = type(receiver).__name__
    if not type_name:
        raise ServiceNameError(
            "No service name for type {0!r}".format(type(receiver)),
            receiver_type=repr(type(receiver)),
        )
    if not is_public_name(type_name):
        raise ServiceNameError(
            "Type {0!r} is not public".format(type_name),
            receiver_type=type_name,
        )
    return type_name


def _instance_methods(receiver_type: type) -> Iterator[Tuple[str, Callable[..., Any]]]:
    for name in sorted(dir(receiver_type)):
        if not is_public_name(name):
            continue
        raw = inspect.getattr_static(receiver_type, name)
        if inspect.isfunction(raw):
            yield name, raw


class ServiceDescriptor:
    """
    Named collection of method callables bound to one receiver.
    """

    def __init__(
        self,
        name: str,
        receiver: Any,
        methods: Dict[str, MethodCallable],
        skipped: List[SkippedMethod],
    ) -> None:
        self._name = name
        self._receiver = receiver
        self._methods = methods
        self._skipped = skipped

    @property
    def name(self) -> str:
        return self._name

    @property
    def receiver(self) -> Any:
        return self._receiver

    @property
    def skipped(self) -> List[SkippedMethod]:
        return list(self._skipped)

    def get_method(self, name: str) -> Optional[MethodCallable]:
        """Return the method registered under ``name``, or None."""
        return self._methods.get(name)

    def list_methods(self) -> List[MethodCallable]:
        return [self._methods[name] for name in sorted(self._methods)]

    def method_names(self) -> List[str]:
        return sorted(self._methods)

    def filter(self, predicate: Callable[[MethodCallable], bool]) -> None:
        """
        Drop every method for which ``predicate`` returns False.
        """
        for name, method in list(self._methods.items()):
            if not predicate(method):
                del self._methods[name]

    def __len__(self) -> int:
        return len(self._methods)

    def __contains__(self, name: object) -> bool:
        return name in self._methods

    def __repr__(self) -> str:
        return "ServiceDescriptor(name={0!r}, methods={1!r})".format(
            self._name, self.method_names()
        )


def make_service(name_mapper: NameMapper, name: str, receiver: Any) -> ServiceDescriptor:
    """
    Reflect over ``receiver`` and build its service descriptor.

    An empty ``name`` derives the service name from the receiver's type; an
    explicit name is used as given.

    Raises:
        ServiceNameError: If no public service name can be derived.
    """
    service_name = name or service_name_for(receiver)
    methods: Dict[str, MethodCallable] = {}
    skipped: List[SkippedMethod] = []

    for method_name, function in _instance_methods(type(receiver)):
        try:
            signature = analyze_signature(function, 1)
        except SignatureError as exc:
            logger.debug("%s.%s skipped: %s", service_name, method_name, exc.reason)
            skipped.append(SkippedMethod(method_name, exc.reason))
            continue

        mapped_name = name_mapper(method_name)
        if not mapped_name:
            logger.debug("%s.%s skipped: %s", service_name, method_name, NAME_MAPPER_OPT_OUT)
            skipped.append(SkippedMethod(method_name, NAME_MAPPER_OPT_OUT))
            continue

        previous = methods.get(mapped_name)
        if previous is not None:
            logger.warning(
                "%s: %s replaces %s under name %r",
                service_name,
                method_name,
                previous.name,
                mapped_name,
            )

        methods[mapped_name] = MethodCallable(
            target=function,
            receiver=receiver,
            original_name=method_name,
            mapped_name=mapped_name,
            signature=signature,
            metadata=declared_metadata(function),
        )

    return ServiceDescriptor(service_name, receiver, methods, skipped)


__all__ = [
    "NAME_MAPPER_OPT_OUT",
    "SkippedMethod",
    "ServiceDescriptor",
    "is_public_name",
    "service_name_for",
    "make_service",
]
