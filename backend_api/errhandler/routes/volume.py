from __future__ import annotations

from flask_smorest import Blueprint
from marshmallow import ValidationError

from errhandler.cors import cors
from errhandler.errors import HTTPError, error
from errhandler.handler import fallible
from errhandler.schemas import (
    FieldMapErrorDocumentSchema,
    JsonApiErrorDocumentSchema,
    VolumeRequestSchema,
    VolumeResponseSchema,
)

MAX_VOLUME = 10

blp = Blueprint(
    "Volume",
    "volume",
    url_prefix="/volume",
    description="Example route built on a fallible handler",
)


@fallible
@cors(allow_methods=("POST", "OPTIONS"))
def set_volume(response, request):
    """
    PUBLIC_INTERFACE
    Accept a volume between 0 and 10.

    Malformed bodies answer 400, schema violations 422 keyed by field, and
    volume 11 a 422 pointing at /data/attributes/volume.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return error(400, "Malformed request body", "Expected a JSON object.")

    try:
        data = VolumeRequestSchema().load(payload)
    except ValidationError as exc:
        return HTTPError.from_validation_error(exc)

    if data["volume"] > MAX_VOLUME:
        return error(
            422,
            "Volume out of range",
            "Volume does not, in fact, go to 11.",
            "/data/attributes/volume",
        )

    response.set_data(VolumeResponseSchema().dumps(data))
    return None


view = set_volume.as_view("set_volume")
view = blp.alt_response(400, schema=JsonApiErrorDocumentSchema, description="Malformed body")(view)
view = blp.alt_response(422, schema=FieldMapErrorDocumentSchema, description="Invalid volume")(view)
blp.add_url_rule("", view_func=view, methods=["POST", "OPTIONS"])
