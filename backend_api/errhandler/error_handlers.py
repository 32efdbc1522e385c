from __future__ import annotations

import logging

from flask import Response, request
from werkzeug.exceptions import HTTPException

from errhandler.errors import HTTPError, error
from errhandler.handler import (
    ERROR_LOG_FORMAT,
    JSON_CONTENT_TYPE,
    error_log_args,
    error_log_level,
    resolve_mode,
)
from errhandler.serializers import serializer_for

logger = logging.getLogger(__name__)


def _render(err: HTTPError) -> Response:
    body = serializer_for(resolve_mode(err)).dumps(err)
    return Response(body, status=err.status_code, content_type=JSON_CONTENT_TYPE)


def register_error_handlers(app):
    """
    PUBLIC_INTERFACE
    Render errors raised outside adapted handlers (unknown routes, wrong methods,
    crashes in plain views) with the same JSON error documents.
    """
    @app.errorhandler(HTTPError)
    def handle_http_error(e: HTTPError):
        logger.log(error_log_level(e), ERROR_LOG_FORMAT, *error_log_args(request, e))
        return _render(e)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return _render(HTTPError.from_http_exception(e))

    @app.errorhandler(Exception)
    def handle_unexpected_exception(e: Exception):
        logger.exception("Unhandled error")
        return _render(error(500, "Internal Server Error", str(e)))
