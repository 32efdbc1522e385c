from __future__ import annotations

import functools
from typing import Any, Iterable, Optional, Union

from errhandler.handler import FallibleHandler


DEFAULT_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
DEFAULT_HEADERS = ("Content-Type", "Authorization")


def _header_value(value: Union[str, Iterable[str]]) -> str:
    if isinstance(value, str):
        return value
    return ", ".join(value)


# PUBLIC_INTERFACE
def cors(
    fn: Optional[FallibleHandler] = None,
    *,
    allow_origin: str = "*",
    allow_methods: Union[str, Iterable[str]] = DEFAULT_METHODS,
    allow_headers: Optional[Union[str, Iterable[str]]] = None,
):
    """
    Wrap a fallible handler so every response carries the CORS headers and
    OPTIONS preflight requests are answered without calling the handler.

    The preflight answer keeps the runtime default status (200) and an empty body.
    With allow_headers left as None the request's Access-Control-Request-Headers
    are echoed back, falling back to DEFAULT_HEADERS.

    Use it inside the adapter, e.g. Handler(cors(view)), and route OPTIONS to the view.
    """
    methods = _header_value(allow_methods)
    fixed_headers = _header_value(allow_headers) if allow_headers is not None else None

    def decorate(inner: FallibleHandler) -> FallibleHandler:
        @functools.wraps(inner)
        def wrapper(response, request, **view_args: Any):
            if fixed_headers is not None:
                headers = fixed_headers
            else:
                headers = request.headers.get("Access-Control-Request-Headers") or _header_value(DEFAULT_HEADERS)
            response.headers["Access-Control-Allow-Origin"] = allow_origin
            response.headers["Access-Control-Allow-Methods"] = methods
            response.headers["Access-Control-Allow-Headers"] = headers

            if request.method == "OPTIONS":
                return None
            return inner(response, request, **view_args)

        return wrapper

    if fn is None:
        return decorate
    return decorate(fn)
