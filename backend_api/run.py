import os
from typing import Mapping, Tuple

from errhandler import create_app

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3001


def bind_address(env: Mapping[str, str] = os.environ) -> Tuple[str, int]:
    """
    PUBLIC_INTERFACE
    Read HOST and PORT, defaulting to 0.0.0.0:3001. An unparsable PORT falls back to the default.
    """
    host = env.get("HOST", DEFAULT_HOST)
    try:
        port = int(env.get("PORT", DEFAULT_PORT))
    except ValueError:
        port = DEFAULT_PORT
    return host, port


if __name__ == "__main__":
    # Development entrypoint; use a WSGI server (run:app via create_app) in production.
    host, port = bind_address()
    create_app().run(host=host, port=port)
