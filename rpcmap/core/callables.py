#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Uniform invocation descriptors for functions and service methods.

Every registered target is wrapped in a callable exposing the same contract:

- ``call(context, inp) -> (result, error)``
- ``make_arg()`` -> fresh input instance for decoding a request into
- ``in_args()`` -> 0, 1 or 2 (context not counted separately)
- ``has_out_arg()`` -> whether the target returns a result besides the error
- ``set(key, value)`` / ``get(key)`` -> free-form metadata

Argument building and result unpacking are selected once, from the calling
convention, when the descriptor is built.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .args import make_arg
from .metadata import MetadataStore
from .signature import CallingConvention, CallSignature, analyze_signature

CallOutcome = Tuple[Any, Optional[Exception]]


def _no_args(context: Any, inp: Any) -> Tuple[Any, ...]:
    return ()


def _input_only(context: Any, inp: Any) -> Tuple[Any, ...]:
    return (inp,)


def _context_and_input(context: Any, inp: Any) -> Tuple[Any, ...]:
    return (context, inp)


_ARGUMENT_BUILDERS: Dict[CallingConvention, Callable[[Any, Any], Tuple[Any, ...]]] = {
    CallingConvention.NO_ARG: _no_args,
    CallingConvention.INPUT_ONLY: _input_only,
    CallingConvention.CONTEXT_AND_INPUT: _context_and_input,
}


def _as_error(value: Any) -> Optional[Exception]:
    if isinstance(value, Exception):
        return value
    return None


def _unpack_result_and_error(returned: Any) -> CallOutcome:
    result, error = returned
    return result, _as_error(error)


def _unpack_error_only(returned: Any) -> CallOutcome:
    return None, _as_error(returned)


class BaseCallable(MetadataStore, ABC):
    """
    Shared part of function and method descriptors.
    """

    def __init__(
        self,
        target: Callable[..., Any],
        signature: CallSignature,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(metadata)
        self._target = target
        self._signature = signature
        self._build_args = _ARGUMENT_BUILDERS[signature.convention]
        if signature.has_result:
            self._unpack = _unpack_result_and_error
        else:
            self._unpack = _unpack_error_only

    @property
    @abstractmethod
    def name(self) -> str:
        """Declared name of the target."""

    @abstractmethod
    def call(self, context: Any, inp: Any) -> CallOutcome:
        """
        Invoke the target.

        ``context`` is ignored unless the target takes one, so callers may
        always pass ``None``. Exceptions raised by the target propagate.
        """

    @property
    def target(self) -> Callable[..., Any]:
        return self._target

    @property
    def signature(self) -> CallSignature:
        return self._signature

    @property
    def convention(self) -> CallingConvention:
        return self._signature.convention

    @property
    def input_type(self) -> Any:
        return self._signature.input_type

    def make_arg(self) -> Any:
        """
        Create a new zero-valued input instance.

        Targets without input get a ``NoArg`` instance so that decoders always
        have something to populate.
        """
        return make_arg(self._signature.input_type)

    def in_args(self) -> int:
        return self._signature.arity

    def has_out_arg(self) -> bool:
        return self._signature.has_result


class FunctionCallable(BaseCallable):
    """
    Descriptor for a free function (or any other non-method callable).
    """

    def __init__(
        self,
        target: Callable[..., Any],
        name: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(target, analyze_signature(target, 0), metadata)
        self._name = name or getattr(target, "__name__", None) or repr(target)

    @property
    def name(self) -> str:
        return self._name

    def call(self, context: Any, inp: Any) -> CallOutcome:
        return self._unpack(self._target(*self._build_args(context, inp)))

    def __repr__(self) -> str:
        return "FunctionCallable(name={0!r}, convention={1}, has_result={2})".format(
            self._name, self.convention.value, self.has_out_arg()
        )


def make_callable(
    target: Callable[..., Any],
    name: Optional[str] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> FunctionCallable:
    """
    Validate a function and build its descriptor.

    Raises:
        SignatureError: If the function does not match an accepted shape.
    """
    return FunctionCallable(target, name=name, metadata=metadata)


class MethodCallable(BaseCallable):
    """
    Descriptor for one method of a service receiver.

    ``target`` is the plain function found on the receiver's class; the
    receiver is passed explicitly on every call. All methods of one service
    share the same receiver instance.
    """

    def __init__(
        self,
        target: Callable[..., Any],
        receiver: Any,
        original_name: str,
        mapped_name: str,
        signature: CallSignature,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(target, signature, metadata)
        self._receiver = receiver
        self._original_name = original_name
        self._mapped_name = mapped_name

    @property
    def name(self) -> str:
        """Method name as declared on the receiver type."""
        return self._original_name

    @property
    def mapped_name(self) -> str:
        """Name the method is registered under."""
        return self._mapped_name

    @property
    def receiver(self) -> Any:
        return self._receiver

    @property
    def argno(self) -> int:
        """Declared parameter count including the receiver."""
        return self._signature.declared_params

    def call(self, context: Any, inp: Any) -> CallOutcome:
        return self._unpack(self._target(self._receiver, *self._build_args(context, inp)))

    def __repr__(self) -> str:
        return "MethodCallable(name={0!r}, mapped_name={1!r}, convention={2})".format(
            self._original_name, self._mapped_name, self.convention.value
        )


__all__ = [
    "CallOutcome",
    "BaseCallable",
    "FunctionCallable",
    "MethodCallable",
    "make_callable",
]
