from __future__ import annotations

import os
from typing import Any, Dict, List, Optional, Union

from flask import Flask
from flask_cors import CORS
from flask_smorest import Api

from errhandler.cors import cors
from errhandler.error_handlers import register_error_handlers
from errhandler.errors import HTTPError, Problem, WireMode, error
from errhandler.handler import Handler, fallible
from errhandler.logging import configure_logging
from errhandler.routes.health import blp as health_blp
from errhandler.routes.volume import blp as volume_blp

__all__ = [
    "HTTPError",
    "Handler",
    "Problem",
    "WireMode",
    "cors",
    "create_app",
    "error",
    "fallible",
]


def _parse_origins(value: Union[str, List[str], None]) -> Union[str, List[str]]:
    if not value:
        return []
    if isinstance(value, str):
        if value.strip() == "*":
            return "*"
        return [o.strip() for o in value.split(",") if o.strip()]
    return list(value)


# PUBLIC_INTERFACE
def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Build the Flask application: configuration, logging, CORS, OpenAPI docs,
    JSON error handlers and blueprints.

    Settings come from the environment and can be overridden with `config`.
    """
    app = Flask(__name__)
    app.url_map.strict_slashes = False

    app.config.setdefault("ERROR_WIRE_MODE", os.getenv("ERROR_WIRE_MODE") or None)
    app.config.setdefault("LOG_LEVEL", os.getenv("LOG_LEVEL", "INFO"))
    app.config.setdefault("CORS_ORIGINS", os.getenv("CORS_ORIGINS", "*"))

    # OpenAPI / Swagger configuration
    app.config.setdefault("API_TITLE", "errhandler example API")
    app.config.setdefault("API_VERSION", "v1")
    app.config.setdefault("OPENAPI_VERSION", "3.0.3")
    app.config.setdefault("OPENAPI_URL_PREFIX", "/docs")
    app.config.setdefault("OPENAPI_SWAGGER_UI_PATH", "")
    app.config.setdefault("OPENAPI_SWAGGER_UI_URL", "https://cdn.jsdelivr.net/npm/swagger-ui-dist/")

    if config:
        app.config.update(config)

    # Reject an unknown wire mode at startup rather than on the first error
    app.config["ERROR_WIRE_MODE"] = WireMode.parse(app.config["ERROR_WIRE_MODE"])

    configure_logging(app.config["LOG_LEVEL"])

    origins = _parse_origins(app.config["CORS_ORIGINS"])
    if origins:
        CORS(app, resources={r"/*": {"origins": origins}})

    api = Api(app)

    # Registered after Api so these replace flask-smorest's own HTTPException handler
    register_error_handlers(app)

    api.register_blueprint(health_blp)
    api.register_blueprint(volume_blp)

    return app
