#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Keyed metadata attached to registered callables.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

_METADATA_ATTR = "__rpcmap_metadata__"

F = TypeVar("F", bound=Callable[..., Any])


class MetadataStore:
    """
    Open string-keyed store, e.g. for a privilege level checked by a transport.

    Last write wins; values are never consulted when calling the target.
    Not synchronized.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    @property
    def metadata(self) -> Mapping[str, Any]:
        """Read-only view of all metadata."""
        return MappingProxyType(self._data)


def method_metadata(**values: Any) -> Callable[[F], F]:
    """
    Attach metadata to a service method.

    The values are copied into the method's callable when the service is
    registered::

        class Accounts:
            @method_metadata(level="admin")
            def Reset(self, inp: ResetInput) -> Optional[Exception]:
                ...
    """

    def decorator(target: F) -> F:
        existing = dict(getattr(target, _METADATA_ATTR, {}))
        existing.update(values)
        setattr(target, _METADATA_ATTR, existing)
        return target

    return decorator


def declared_metadata(target: Any) -> Dict[str, Any]:
    """Return metadata attached by ``method_metadata`` (empty if none)."""
    return dict(getattr(target, _METADATA_ATTR, {}))


__all__ = ["MetadataStore", "method_metadata", "declared_metadata"]
