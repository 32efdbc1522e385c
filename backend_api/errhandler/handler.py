"""
Adapter that lets request handlers return an HTTPError instead of writing one.

A fallible handler has the signature

    def handler(response, request, **view_args) -> Optional[HTTPError]

and either fills in `response` itself (success) or returns/raises an HTTPError.
Wrapping it in Handler gives a WSGI application and a Flask view function that log
the error and write it as a JSON document with the carried status code.
"""
from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Iterable, Iterator, Optional

from flask import Response, current_app, has_app_context
from flask import request as flask_request
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers import Request
from werkzeug.wsgi import ClosingIterator

from errhandler.errors import HTTPError, WireMode, error
from errhandler.serializers import serializer_for


JSON_CONTENT_TYPE = "application/json"

FallibleHandler = Callable[..., Optional[HTTPError]]

ERROR_LOG_FORMAT = "%s %s -> %d %s"


def error_log_level(err: HTTPError) -> int:
    return logging.ERROR if err.status_code >= 500 else logging.WARNING


def error_log_args(request: Request, err: HTTPError) -> tuple:
    """Arguments for ERROR_LOG_FORMAT: method, path, status and the numbered problem titles."""
    return request.method, request.path, err.status_code, err.to_log_string()


# PUBLIC_INTERFACE
def resolve_mode(err: HTTPError, mode: Optional[WireMode] = None) -> WireMode:
    """Explicit mode, then the app's ERROR_WIRE_MODE, then the error's own mode."""
    if mode is not None:
        return mode
    if has_app_context():
        configured = WireMode.parse(current_app.config.get("ERROR_WIRE_MODE"))
        if configured is not None:
            return configured
    return err.mode


class Handler:
    """
    PUBLIC_INTERFACE
    Wrap a fallible handler so it can be served as a WSGI app or a Flask view.

    logger: where returned errors are reported; defaults to this module's logger.
    mode: force a wire mode for every error this handler writes.
    """

    def __init__(self, fn: FallibleHandler, logger: Optional[Any] = None, mode: Any = None) -> None:
        self.fn = fn
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.mode = WireMode.parse(mode)
        functools.update_wrapper(self, fn)

    @property
    def name(self) -> str:
        return getattr(self.fn, "__name__", type(self.fn).__name__)

    # PUBLIC_INTERFACE
    def dispatch(self, request: Request, **view_args: Any) -> Response:
        """
        Run the wrapped handler for one request and return the response to send.
        Content-Type is set first, then the error status, then the error body.
        If the error cannot be serialized the client gets the status code and no body.
        """
        response = Response(content_type=JSON_CONTENT_TYPE)

        err = self._invoke(response, request, view_args)
        if err is None:
            return response

        self._log_error(request, err)
        response.status_code = err.status_code
        try:
            body = serializer_for(resolve_mode(err, self.mode)).dumps(err)
        except Exception:
            self._log(logging.ERROR, "Unable to write the JSON error response", exc_info=True)
            response.set_data(b"")
            return response
        response.set_data(body)
        return response

    # PUBLIC_INTERFACE
    def as_view(self, name: Optional[str] = None) -> Callable[..., Response]:
        """Return a Flask view function dispatching on the current request."""

        def view(**view_args: Any) -> Response:
            return self.dispatch(flask_request, **view_args)

        view.__name__ = name or self.name
        view.__doc__ = self.fn.__doc__
        return view

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        request = Request(environ)
        response = self.dispatch(request)
        app_iter = response(environ, start_response)
        return ClosingIterator(self._stream(request, app_iter), getattr(app_iter, "close", None))

    def _stream(self, request: Request, app_iter: Iterable[bytes]) -> Iterator[bytes]:
        # the server closes the iterable early when writing to the client fails
        try:
            for chunk in app_iter:
                yield chunk
        except GeneratorExit:
            self._log(
                logging.WARNING,
                "Client went away before the response to %s %s was written",
                request.method,
                request.path,
            )
            raise

    def _invoke(self, response: Response, request: Request, view_args: dict) -> Optional[HTTPError]:
        try:
            result = self.fn(response, request, **view_args)
        except HTTPError as err:
            return err
        except HTTPException as exc:
            return HTTPError.from_http_exception(exc)
        except Exception as exc:
            self._log(logging.ERROR, "Unhandled error in %s", self.name, exc_info=True)
            return error(500, "Internal Server Error", str(exc))

        if result is not None and not isinstance(result, HTTPError):
            raise TypeError(f"{self.name} must return an HTTPError or None, got {type(result).__name__}")
        return result

    def _log_error(self, request: Request, err: HTTPError) -> None:
        self._log(error_log_level(err), ERROR_LOG_FORMAT, *error_log_args(request, err))

    def _log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        try:
            self.logger.log(level, msg, *args, **kwargs)
        except Exception:  # noqa: BLE001
            # a broken log sink never changes the response
            pass


# PUBLIC_INTERFACE
def fallible(fn: Optional[FallibleHandler] = None, *, logger: Optional[Any] = None, mode: Any = None):
    """Decorator form of Handler: `@fallible` or `@fallible(logger=..., mode="map")`."""
    if fn is None:
        return lambda f: Handler(f, logger=logger, mode=mode)
    return Handler(fn, logger=logger, mode=mode)
