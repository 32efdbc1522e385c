from __future__ import annotations

from marshmallow import Schema, fields, validate


class SourceSchema(Schema):
    """Part of the request that caused the error."""
    pointer = fields.Str(required=True, metadata={"description": "JSON pointer into the request document"})


class ErrorObjectSchema(Schema):
    """Single JSON:API error object. Optional members are rendered as empty strings."""
    status = fields.Str(required=True, metadata={"description": "HTTP status code, as a string"})
    title = fields.Str(required=True, metadata={"description": "Short summary of the problem"})
    detail = fields.Str(required=True, metadata={"description": "Explanation of this occurrence of the problem"})
    source = fields.Nested(SourceSchema, required=True)


class JsonApiErrorDocumentSchema(Schema):
    """Default error document: {"errors": [error objects]}."""
    errors = fields.List(fields.Nested(ErrorObjectSchema), required=True)


class FieldMapErrorDocumentSchema(Schema):
    """Alternate error document keyed by input field."""
    errors = fields.Dict(keys=fields.Str(), values=fields.Str(), required=True, metadata={"description": "Field name to message"})
    status_code = fields.Int(required=True, metadata={"description": "HTTP status code"})


class MessageListErrorDocumentSchema(Schema):
    """Alternate error document carrying plain messages."""
    errors = fields.List(fields.Str(), required=True, metadata={"description": "Error messages, in order"})
    status_code = fields.Int(required=True, metadata={"description": "HTTP status code"})


class HealthSchema(Schema):
    """Health-check response payload."""
    message = fields.Str(required=True, metadata={"description": "Service health"})


class VolumeRequestSchema(Schema):
    """Request payload for setting the volume."""
    volume = fields.Int(required=True, strict=True, validate=validate.Range(min=0, max=11), metadata={"description": "Requested volume"})


class VolumeResponseSchema(Schema):
    """Response for an accepted volume setting."""
    volume = fields.Int(required=True, metadata={"description": "Volume now in effect"})
