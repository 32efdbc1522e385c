from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException


ATTRIBUTES_POINTER_PREFIX = "/data/attributes/"


class WireMode(str, Enum):
    """Shape of the JSON error document written to the client."""

    JSONAPI = "jsonapi"
    MAP = "map"
    LIST = "list"

    # PUBLIC_INTERFACE
    @classmethod
    def parse(cls, value: Any) -> Optional["WireMode"]:
        """
        Normalize a configured mode. None or an empty string means "not configured".
        Raises ValueError for anything that is not one of jsonapi, map or list.
        """
        if value is None or value == "":
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown error wire mode {value!r}, expected one of: {choices}") from None


@dataclass(frozen=True)
class Problem:
    """One human readable issue, optionally pointing at the offending input field."""

    title: str
    detail: str = ""
    source_pointer: str = ""


class HTTPError(Exception):
    """
    PUBLIC_INTERFACE
    A failed request outcome: one HTTP status code plus an ordered list of problems.

    Handlers wrapped by errhandler.handler.Handler return (or raise) an HTTPError instead
    of writing the error response themselves. The error document is modelled after
    jsonapi.org/examples/#error-objects:

        HTTP/1.1 422 Unprocessable Entity
        {
          "errors": [
            {
              "status": "422",
              "title": "Volume out of range",
              "detail": "Volume does not, in fact, go to 11.",
              "source": {"pointer": "/data/attributes/volume"}
            }
          ]
        }

    Instances are immutable; `mode` records which wire shape the construction path implies.
    """

    def __init__(
        self,
        status_code: int,
        problems: Iterable[Problem] = (),
        mode: WireMode = WireMode.JSONAPI,
    ) -> None:
        self._status_code = status_code
        self._problems: Tuple[Problem, ...] = tuple(problems)
        self._mode = WireMode(mode)
        super().__init__(status_code, self.to_log_string())

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def problems(self) -> Tuple[Problem, ...]:
        return self._problems

    @property
    def mode(self) -> WireMode:
        return self._mode

    # PUBLIC_INTERFACE
    @classmethod
    def from_problems(cls, status_code: int, problems: Iterable[Problem]) -> "HTTPError":
        """Build an error carrying several problems, e.g. one per invalid field."""
        return cls(status_code, problems, WireMode.JSONAPI)

    # PUBLIC_INTERFACE
    @classmethod
    def from_fields(cls, status_code: int, fields: Mapping[str, str]) -> "HTTPError":
        """Build an error from a {field: message} map. Rendered as a field map by default."""
        problems = [
            Problem(title=str(message), source_pointer=_field_pointer(name))
            for name, message in fields.items()
        ]
        return cls(status_code, problems, WireMode.MAP)

    # PUBLIC_INTERFACE
    @classmethod
    def from_messages(cls, status_code: int, messages: Iterable[str]) -> "HTTPError":
        """Build an error from plain messages. Rendered as a list of strings by default."""
        return cls(status_code, [Problem(title=str(m)) for m in messages], WireMode.LIST)

    # PUBLIC_INTERFACE
    @classmethod
    def from_validation_error(cls, exc: ValidationError, status_code: int = 422) -> "HTTPError":
        """
        Convert a marshmallow ValidationError into a field map error.
        Nested field names are joined with "/" and schema level errors carry no pointer.
        """
        fields: Dict[str, str] = {}
        for name, message in _flatten_messages(exc.messages):
            if name in fields:
                fields[name] = f"{fields[name]} {message}"
            else:
                fields[name] = message
        return cls.from_fields(status_code, fields)

    # PUBLIC_INTERFACE
    @classmethod
    def from_http_exception(cls, exc: HTTPException) -> "HTTPError":
        """Carry a werkzeug HTTPException (abort(404), MethodNotAllowed, ...) as an HTTPError."""
        return error(exc.code or 500, exc.name, exc.description or "")

    # PUBLIC_INTERFACE
    def to_log_string(self) -> str:
        """Render every problem as "error #<n>: <title>", 1-indexed, in order."""
        result = ""
        for i, problem in enumerate(self._problems, start=1):
            result = f"{result}error #{i}: {problem.title}"
        return result

    # PUBLIC_INTERFACE
    def to_wire_document(self, mode: Any = None) -> Dict[str, Any]:
        """Render the JSON error document, in this error's own mode unless one is given."""
        from errhandler.serializers import serializer_for

        return serializer_for(WireMode.parse(mode) or self._mode).dump(self)

    def __str__(self) -> str:
        return self.to_log_string()

    def __repr__(self) -> str:
        return f"HTTPError(status_code={self._status_code!r}, problems={list(self._problems)!r}, mode={self._mode.value!r})"


# PUBLIC_INTERFACE
def error(status_code: int, *args: str) -> HTTPError:
    """
    Helper to build a single problem error for early returns:

        return error(400, "bad body sent!")
        return error(400, "bad body sent!", str(exc))
        return error(400, "bad body sent!", str(exc), "/data/attributes/volume")

    args are positional: title, detail, source pointer. Missing ones stay empty.
    """
    title = args[0] if len(args) > 0 else ""
    detail = args[1] if len(args) > 1 else ""
    pointer = args[2] if len(args) > 2 else ""
    return HTTPError(status_code, [Problem(title=title, detail=detail, source_pointer=pointer)])


def field_name(pointer: str) -> str:
    """Inverse of the pointer built for field map errors ("" for unscoped problems)."""
    if pointer.startswith(ATTRIBUTES_POINTER_PREFIX):
        return pointer[len(ATTRIBUTES_POINTER_PREFIX):]
    return pointer.lstrip("/")


def _field_pointer(name: str) -> str:
    if not name or name == "_schema":
        return ""
    return f"{ATTRIBUTES_POINTER_PREFIX}{name}"


def _flatten_messages(messages: Any, prefix: str = "") -> Iterator[Tuple[str, str]]:
    if isinstance(messages, Mapping):
        for key, value in messages.items():
            key = str(key)
            if key == "_schema":
                key = ""
            name = f"{prefix}/{key}" if prefix and key else (prefix or key)
            yield from _flatten_messages(value, name)
    elif isinstance(messages, (list, tuple)):
        if all(isinstance(m, str) for m in messages):
            yield prefix, " ".join(messages)
        else:
            for item in messages:
                yield from _flatten_messages(item, prefix)
    else:
        yield prefix, str(messages)
