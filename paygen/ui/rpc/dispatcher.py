"""
JSON-RPC 2.0 dispatcher.

Maps method names to handlers and turns one decoded message (or one raw
line) into a response object. Notifications (no ``id``) are executed
but never answered. Batches are supported.

Error codes:
    -32700  parse error       (response id is always null)
    -32600  invalid request
    -32601  method not found
    -32602  invalid params    (pydantic detail in ``error.data``)
    -32603  internal error
    -32000  server error      (a paygen domain error)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from paygen.core.errors import PaygenError

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SERVER_ERROR = -32000

Handler = Callable[[dict[str, Any]], Any]

_NO_ID = object()


class JsonRpcError(Exception):
    """An error that maps directly to a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


def invalid_params(message: str, data: Any = None) -> JsonRpcError:
    return JsonRpcError(INVALID_PARAMS, message, data)


def error_response(request_id: Any, error: JsonRpcError) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": error.to_dict()}


class Dispatcher:
    """Method table plus JSON-RPC envelope handling."""

    def __init__(self) -> None:
        self._methods: dict[str, Handler] = {}
        self.shutdown_requested = False

    def register(self, method: str, handler: Handler) -> None:
        if method in self._methods:
            logger.warning("Overwriting RPC method: %s", method)
        self._methods[method] = handler

    def method(self, name: str) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`register`."""
        def decorator(handler: Handler) -> Handler:
            self.register(name, handler)
            return handler
        return decorator

    def methods(self) -> list[str]:
        return sorted(self._methods)

    # ── Entry points ────────────────────────────────────────────

    def handle_line(self, line: str) -> str | None:
        """Decode one line, dispatch it, and encode the response (if any)."""
        text = line.strip()
        if not text:
            return None
        try:
            message = json.loads(text)
        except json.JSONDecodeError as e:
            logger.debug("Unparseable RPC line: %s", e)
            response: Any = error_response(None, JsonRpcError(PARSE_ERROR, "Parse error"))
        else:
            response = self.handle(message)
        if response is None:
            return None
        return json.dumps(response, ensure_ascii=False)

    def handle(self, message: Any) -> dict[str, Any] | list[dict[str, Any]] | None:
        if isinstance(message, list):
            if not message:
                return error_response(None, JsonRpcError(INVALID_REQUEST, "Invalid Request"))
            responses = [r for r in (self._handle_one(m) for m in message) if r is not None]
            return responses or None
        return self._handle_one(message)

    # ── Internals ───────────────────────────────────────────────

    def _handle_one(self, message: Any) -> dict[str, Any] | None:
        if not isinstance(message, dict):
            return error_response(None, JsonRpcError(INVALID_REQUEST, "Invalid Request"))

        request_id = message.get("id", _NO_ID)
        is_notification = request_id is _NO_ID
        if is_notification:
            request_id = None
        elif request_id is not None and not isinstance(request_id, (str, int, float)):
            return error_response(None, JsonRpcError(INVALID_REQUEST, "Invalid Request"))

        method = message.get("method")
        params = message.get("params", {})
        if message.get("jsonrpc") != "2.0" or not isinstance(method, str):
            return error_response(request_id, JsonRpcError(INVALID_REQUEST, "Invalid Request"))
        if not isinstance(params, (dict, list)):
            return error_response(request_id, JsonRpcError(INVALID_REQUEST, "params must be an object or array"))

        try:
            result = self._call(method, params)
        except JsonRpcError as e:
            if is_notification:
                return None
            return error_response(request_id, e)

        if is_notification:
            return None
        return {"jsonrpc": "2.0", "id": request_id, "result": result}

    def _call(self, method: str, params: dict[str, Any] | list[Any]) -> Any:
        handler = self._methods.get(method)
        if handler is None:
            raise JsonRpcError(METHOD_NOT_FOUND, f"Method not found: {method}")
        if isinstance(params, list):
            # Positional params: a single object is accepted as the param set.
            if len(params) == 1 and isinstance(params[0], dict):
                params = params[0]
            elif not params:
                params = {}
            else:
                raise invalid_params("Positional params are not supported")

        try:
            return handler(params)
        except JsonRpcError:
            raise
        except ValidationError as e:
            raise invalid_params("Invalid params", json.loads(e.json(include_url=False))) from e
        except PaygenError as e:
            logger.warning("RPC %s failed: %s", method, e)
            raise JsonRpcError(SERVER_ERROR, str(e)) from e
        except Exception as e:
            logger.exception("RPC %s raised", method)
            raise JsonRpcError(INTERNAL_ERROR, "Internal error", str(e)) from e
