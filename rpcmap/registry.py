#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Name-based registry of functions and services.

Functions are looked up by their registered name. Service methods are looked
up as ``Service.method``; a bare method name resolves against the default
service, if one is registered.

Possible function and method signatures (after the receiver for methods)::

    def f() -> Optional[Exception]
    def f() -> Tuple[Output, Optional[Exception]]
    def f(inp: Input) -> Optional[Exception]
    def f(inp: Input) -> Tuple[Output, Optional[Exception]]
    def f(ctx: Context, inp: Input) -> Optional[Exception]
    def f(ctx: Context, inp: Input) -> Tuple[Output, Optional[Exception]]

Registration is not thread-safe; serialize it yourself if needed. Calls read
only state fixed at registration.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .core.callables import BaseCallable, CallOutcome, FunctionCallable, make_callable
from .core.config import NameMapper, RpcMapConfig, get_config
from .core.service import ServiceDescriptor, make_service
from .core.utils.exceptions import NO_METHOD_ERROR, DuplicateRegistrationError
from .core.utils.logger import ModernLogger, configure_logging


class RpcMap(ModernLogger):
    """
    Function and service mapper: call by name with generic input and output.
    """

    def __init__(
        self,
        name_mapper: Optional[NameMapper] = None,
        config: Optional[RpcMapConfig] = None,
    ) -> None:
        self.config = config or get_config()
        configure_logging(self.config.log_level, rich_output=self.config.rich_logging)
        super().__init__(
            name="RpcMap",
            level=self.config.log_level,
            rich_output=self.config.rich_logging,
        )
        self._name_mapper: NameMapper = name_mapper or self.config.name_mapper
        self._funcs: Dict[str, FunctionCallable] = {}
        self._services: Dict[str, ServiceDescriptor] = {}
        self._default_service: Optional[ServiceDescriptor] = None

    # Registration

    def func(
        self,
        name: str,
        target: Callable[..., Any],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> FunctionCallable:
        """
        Register a function under ``name``, replacing any earlier one.

        Raises:
            SignatureError: If the function does not match an accepted shape.
        """
        descriptor = make_callable(target, name=name, metadata=metadata)
        if name in self._funcs:
            self.debug("Function %r replaced", name)
        self._funcs[name] = descriptor
        self.debug("Function %r registered (%s)", name, descriptor.convention.value)
        return descriptor

    def function(
        self,
        target: Optional[Callable[..., Any]] = None,
        *,
        name: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Union[Callable[[Callable[..., Any]], Callable[..., Any]], Callable[..., Any]]:
        """
        Decorator form of ``func``; the function name is used by default.
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.func(name or func.__name__, func, metadata=metadata)
            return func

        if target is not None and callable(target):
            return decorator(target)
        return decorator

    def named_service(self, name: str, receiver: Any) -> ServiceDescriptor:
        """
        Register a service under an explicit name.

        Methods with unsupported signatures are skipped, see
        ``ServiceDescriptor.skipped``.

        Raises:
            DuplicateRegistrationError: If the service name is already taken.
            ServiceNameError: If ``name`` is empty and the receiver type is not public.
        """
        descriptor = make_service(self._name_mapper, name, receiver)
        if descriptor.name in self._services:
            raise DuplicateRegistrationError(
                "Service {0!r} is already registered".format(descriptor.name),
                service_name=descriptor.name,
            )
        self._services[descriptor.name] = descriptor
        self.debug(
            "Service %r registered with methods %s (%d skipped)",
            descriptor.name,
            descriptor.method_names(),
            len(descriptor.skipped),
        )
        return descriptor

    def service(self, receiver: Any) -> ServiceDescriptor:
        """
        Register a service named after the receiver's type.
        """
        return self.named_service("", receiver)

    def default_service(self, receiver: Any, name: str = "") -> ServiceDescriptor:
        """
        Register a service whose methods can also be called by bare name.

        Raises:
            DuplicateRegistrationError: If a default service is already registered.
        """
        if self._default_service is not None:
            raise DuplicateRegistrationError(
                "Default service is already set to {0!r}".format(
                    self._default_service.name
                ),
                service_name=self._default_service.name,
            )
        self._default_service = self.named_service(name, receiver)
        return self._default_service

    def set_name_mapper(self, mapper: NameMapper) -> None:
        """
        Set the method name mapper used by later service registrations.

        A mapper returning an empty string excludes that method.
        """
        self._name_mapper = mapper

    # Lookup

    def get_func(self, name: str) -> Optional[FunctionCallable]:
        return self._funcs.get(name)

    def get_service(self, name: str) -> Optional[ServiceDescriptor]:
        return self._services.get(name)

    @property
    def default(self) -> Optional[ServiceDescriptor]:
        return self._default_service

    def get_service_method(self, name: str) -> Optional[BaseCallable]:
        """
        Resolve ``Service.method``, or a bare method of the default service.
        """
        parts = name.split(".")
        if len(parts) == 2:
            service = self.get_service(parts[0])
            if service is None:
                return None
            return service.get_method(parts[1])
        if len(parts) == 1:
            if self._default_service is None:
                return None
            return self._default_service.get_method(parts[0])
        return None

    def get_callable(self, name: str) -> Optional[BaseCallable]:
        """
        Resolve a function first, then a service method.
        """
        found = self.get_func(name)
        if found is not None:
            return found
        return self.get_service_method(name)

    def list_functions(self) -> List[FunctionCallable]:
        return [self._funcs[name] for name in sorted(self._funcs)]

    def list_services(self) -> List[ServiceDescriptor]:
        return [self._services[name] for name in sorted(self._services)]

    # Invocation

    def call_func(self, name: str, context: Any, inp: Any) -> CallOutcome:
        """
        Call a registered function; unknown names give ``NO_METHOD_ERROR``.
        """
        descriptor = self.get_func(name)
        if descriptor is None:
            return None, NO_METHOD_ERROR
        return descriptor.call(context, inp)

    def call_method(self, name: str, context: Any, inp: Any) -> CallOutcome:
        """
        Call a service method by ``Service.method`` name.
        """
        descriptor = self.get_service_method(name)
        if descriptor is None:
            return None, NO_METHOD_ERROR
        return descriptor.call(context, inp)

    def call(self, name: str, context: Any, inp: Any) -> CallOutcome:
        """
        Call whatever ``get_callable`` resolves ``name`` to.
        """
        descriptor = self.get_callable(name)
        if descriptor is None:
            return None, NO_METHOD_ERROR
        return descriptor.call(context, inp)


__all__ = ["RpcMap"]
