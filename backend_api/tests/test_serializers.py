from __future__ import annotations

import json

import pytest

from errhandler.errors import HTTPError, Problem, WireMode, error
from errhandler.serializers import (
    FieldMapSerializer,
    JsonApiSerializer,
    MessageListSerializer,
    serializer_for,
)


def test_jsonapi_document():
    doc = JsonApiSerializer().dump(error(400, "title", "detail", "source"))

    assert doc == {
        "errors": [
            {"status": "400", "title": "title", "detail": "detail", "source": {"pointer": "source"}}
        ]
    }


def test_jsonapi_renders_missing_members_as_empty_strings():
    doc = JsonApiSerializer().dump(error(500, "title"))

    assert doc["errors"][0] == {"status": "500", "title": "title", "detail": "", "source": {"pointer": ""}}


def test_jsonapi_keeps_problem_order():
    err = HTTPError.from_problems(
        422,
        [Problem("B", source_pointer="/data/attributes/b"), Problem("A", source_pointer="/data/attributes/a")],
    )

    doc = JsonApiSerializer().dump(err)

    assert [e["title"] for e in doc["errors"]] == ["B", "A"]
    assert all(e["status"] == "422" for e in doc["errors"])


def test_jsonapi_empty_problem_list():
    assert JsonApiSerializer().dump(HTTPError(503)) == {"errors": []}


@pytest.mark.parametrize("status_code", [400, 404, 418, 500, 503])
def test_status_round_trips_through_json(status_code):
    body = JsonApiSerializer().dumps(error(status_code, "title"))

    assert int(json.loads(body)["errors"][0]["status"]) == status_code


def test_dumps_is_compact():
    body = JsonApiSerializer().dumps(error(400, "title", "detail", "source"))

    assert " " not in body
    assert json.loads(body) == JsonApiSerializer().dump(error(400, "title", "detail", "source"))


def test_field_map_document():
    err = HTTPError.from_fields(422, {"volume": "too loud", "bass": "too low"})

    assert FieldMapSerializer().dump(err) == {
        "errors": {"volume": "too loud", "bass": "too low"},
        "status_code": 422,
    }


def test_field_map_collects_unscoped_and_repeated_problems():
    err = HTTPError.from_problems(
        400,
        [
            Problem("first"),
            Problem("too loud", source_pointer="/data/attributes/volume"),
            Problem("second"),
            Problem("odd number", source_pointer="/volume"),
        ],
    )

    assert FieldMapSerializer().dump(err)["errors"] == {
        "non_field_errors": "first; second",
        "volume": "too loud; odd number",
    }


def test_message_list_document():
    err = HTTPError.from_messages(400, ["msg1", "msg2"])

    assert MessageListSerializer().dump(err) == {"errors": ["msg1", "msg2"], "status_code": 400}


def test_message_list_uses_titles_only():
    err = error(409, "conflict", "already exists", "/data/id")

    assert MessageListSerializer().dump(err) == {"errors": ["conflict"], "status_code": 409}


@pytest.mark.parametrize(
    "mode, expected",
    [
        (None, JsonApiSerializer),
        ("jsonapi", JsonApiSerializer),
        ("map", FieldMapSerializer),
        (WireMode.LIST, MessageListSerializer),
    ],
)
def test_serializer_for(mode, expected):
    assert isinstance(serializer_for(mode), expected)


def test_serializer_for_unknown_mode():
    with pytest.raises(ValueError):
        serializer_for("yaml")
