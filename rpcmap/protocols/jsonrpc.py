#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
In-process JSON-RPC 2.0 dispatch over an ``RpcMap``.

Request flow: resolve the method name, decode ``params`` into the object
returned by ``make_arg()``, call it with the caller's context, and encode the
result or the returned error as a JSON-RPC response object.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from ..core.utils.logger import ModernLogger
from ..registry import RpcMap
from .adapter import (
    INTERNAL_ERROR_CODE,
    InvalidRequestError,
    JsonRpcProtocolAdapter,
    bind_params,
    to_jsonable,
)
from .models import CallableInfo

LIST_METHOD = "rpc.list"

Response = Optional[Dict[str, Any]]


class JsonRpcDispatcher(JsonRpcProtocolAdapter, ModernLogger):
    """
    Dispatch decoded JSON-RPC requests to registered callables.

    Supported methods:
    - rpc.list
    - any registered function name, ``Service.method`` or default-service method
    """

    def __init__(self, registry: RpcMap) -> None:
        ModernLogger.__init__(
            self,
            name="JsonRpcDispatcher",
            level=registry.config.log_level,
            rich_output=registry.config.rich_logging,
        )
        self._registry = registry

    def describe(self) -> List[CallableInfo]:
        """
        List every registered function and service method.
        """
        infos = [
            CallableInfo.from_callable(descriptor.name, descriptor)
            for descriptor in self._registry.list_functions()
        ]
        for service in self._registry.list_services():
            for method in service.list_methods():
                infos.append(
                    CallableInfo.from_callable(
                        "{0}.{1}".format(service.name, method.mapped_name),
                        method,
                        service=service.name,
                    )
                )
        return infos

    def handle_request(
        self, payload: Any, context: Any = None
    ) -> Union[Response, List[Dict[str, Any]]]:
        """
        Handle one request object or a batch list.

        Notifications (requests without ``id``) produce no response.
        """
        if isinstance(payload, (list, tuple)):
            return self._handle_batch(payload, context)
        return self._handle_single(payload, context)

    def _handle_batch(
        self, payloads: Sequence[Any], context: Any
    ) -> Union[Response, List[Dict[str, Any]]]:
        if len(payloads) == 0:
            return self._error(
                request_id=None,
                code=InvalidRequestError.code,
                message="Invalid Request",
                data=self.standard_error_data(
                    protocol=self.PROTOCOL,
                    method=None,
                    error_type="InvalidRequestError",
                ),
            )

        responses: List[Dict[str, Any]] = []
        for item in payloads:
            response = self._handle_single(item, context)
            if response is not None:
                responses.append(response)

        if not responses:
            return None
        return responses

    def _handle_single(self, payload: Any, context: Any) -> Response:
        request_id: Any = None
        method = ""
        is_notification = False
        if isinstance(payload, dict):
            request_id = payload.get("id")

        try:
            request = self.parse_request(payload)
            request_id = request.request_id
            method = request.method
            is_notification = request.is_notification

            if method == LIST_METHOD:
                result = to_jsonable([info.to_dict() for info in self.describe()])
                return None if is_notification else self._success(request_id, result)

            descriptor = self._registry.get_callable(method)
            if descriptor is None:
                self.debug("Unknown method %r", method)
                return None if is_notification else self.method_not_found(request_id, method)

            arg = bind_params(descriptor.make_arg(), request.params, descriptor.input_type)
            result, error = descriptor.call(context, arg)
            if is_notification:
                return None
            if error is not None:
                return self.target_error(request_id, method, error)
            return self._success(request_id, to_jsonable(result))
        except Exception as exc:
            if self.resolve_error_code(exc) == INTERNAL_ERROR_CODE:
                self.exception("Call to %r failed", method or None)
            if is_notification:
                return None
            return self.error_from_exception(
                request_id=request_id,
                exc=exc,
                method=method or None,
            )


__all__ = ["JsonRpcDispatcher", "LIST_METHOD"]
