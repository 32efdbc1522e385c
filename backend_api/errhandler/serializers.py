"""
Wire encodings for HTTPError.

Three document shapes are supported, one strategy object each. The JSON:API form is
the default; the field map and message list forms exist for clients written against
the older error documents.
"""
from __future__ import annotations

from typing import Any, Dict, List

from marshmallow import Schema

from errhandler.errors import HTTPError, WireMode, field_name
from errhandler.schemas import (
    FieldMapErrorDocumentSchema,
    JsonApiErrorDocumentSchema,
    MessageListErrorDocumentSchema,
)


NON_FIELD_ERRORS = "non_field_errors"
COMPACT_SEPARATORS = (",", ":")


class ErrorSerializer:
    """Base strategy: subclasses turn an HTTPError into the data their schema dumps."""

    mode: WireMode
    schema: Schema

    def prepare(self, err: HTTPError) -> Dict[str, Any]:
        raise NotImplementedError

    # PUBLIC_INTERFACE
    def dump(self, err: HTTPError) -> Dict[str, Any]:
        """Return the error document as plain Python data."""
        return self.schema.dump(self.prepare(err))

    # PUBLIC_INTERFACE
    def dumps(self, err: HTTPError) -> str:
        """Return the error document as compact JSON text."""
        return self.schema.dumps(self.prepare(err), separators=COMPACT_SEPARATORS)


class JsonApiSerializer(ErrorSerializer):
    """{"errors": [{"status", "title", "detail", "source": {"pointer"}}]}"""

    mode = WireMode.JSONAPI
    schema = JsonApiErrorDocumentSchema()

    def prepare(self, err: HTTPError) -> Dict[str, Any]:
        status = str(err.status_code)
        return {
            "errors": [
                {
                    "status": status,
                    "title": p.title,
                    "detail": p.detail,
                    "source": {"pointer": p.source_pointer},
                }
                for p in err.problems
            ]
        }


class FieldMapSerializer(ErrorSerializer):
    """{"errors": {"<field>": "<message>"}, "status_code": N}"""

    mode = WireMode.MAP
    schema = FieldMapErrorDocumentSchema()

    def prepare(self, err: HTTPError) -> Dict[str, Any]:
        errors: Dict[str, str] = {}
        for p in err.problems:
            key = field_name(p.source_pointer) or NON_FIELD_ERRORS
            errors[key] = f"{errors[key]}; {p.title}" if key in errors else p.title
        return {"errors": errors, "status_code": err.status_code}


class MessageListSerializer(ErrorSerializer):
    """{"errors": ["<title>", ...], "status_code": N}"""

    mode = WireMode.LIST
    schema = MessageListErrorDocumentSchema()

    def prepare(self, err: HTTPError) -> Dict[str, Any]:
        messages: List[str] = [p.title for p in err.problems]
        return {"errors": messages, "status_code": err.status_code}


_SERIALIZERS: Dict[WireMode, ErrorSerializer] = {
    s.mode: s for s in (JsonApiSerializer(), FieldMapSerializer(), MessageListSerializer())
}


# PUBLIC_INTERFACE
def serializer_for(mode: Any = None) -> ErrorSerializer:
    """Return the serializer for a wire mode; None selects the JSON:API default."""
    return _SERIALIZERS[WireMode.parse(mode) or WireMode.JSONAPI]
