#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Protocol domain models for rpcmap.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from ..core.callables import BaseCallable, MethodCallable


def type_label(annotation: Any) -> str:
    """
    Human-readable name of an annotation.
    """
    if annotation is None:
        return "None"
    name = getattr(annotation, "__name__", None)
    if isinstance(name, str) and not getattr(annotation, "__args__", None):
        return name
    return str(annotation).replace("typing.", "")


@dataclass
class CallableInfo:
    """
    Description of one registered callable, as listed to protocol clients.
    """

    name: str
    kind: str
    convention: str
    in_args: int
    has_out_arg: bool
    input_type: str
    service: Optional[str] = None
    declared_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_callable(
        cls,
        name: str,
        descriptor: BaseCallable,
        service: Optional[str] = None,
    ) -> "CallableInfo":
        is_method = isinstance(descriptor, MethodCallable)
        return cls(
            name=name,
            kind="method" if is_method else "function",
            convention=descriptor.convention.value,
            in_args=descriptor.in_args(),
            has_out_arg=descriptor.has_out_arg(),
            input_type=type_label(descriptor.input_type),
            service=service,
            declared_name=descriptor.name if is_method else None,
            metadata=dict(descriptor.metadata),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RpcRequest:
    """
    Normalized JSON-RPC request.
    """

    method: str
    params: Any = None
    request_id: Any = None
    is_notification: bool = False
