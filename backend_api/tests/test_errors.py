from __future__ import annotations

import pytest
from marshmallow import ValidationError
from werkzeug.exceptions import NotFound

from errhandler.errors import HTTPError, Problem, WireMode, error, field_name


class TestLogString:
    def test_single_problem(self):
        err = HTTPError(400, [Problem(title="error!")])
        assert err.to_log_string() == "error #1: error!"

    def test_problems_are_numbered_in_order_without_separator(self):
        err = HTTPError.from_problems(400, [Problem("A"), Problem("B")])
        assert err.to_log_string() == "error #1: A" + "error #2: B"

    def test_no_problems(self):
        assert HTTPError(500).to_log_string() == ""

    def test_str_matches_log_string(self):
        err = error(404, "missing")
        assert str(err) == err.to_log_string() == "error #1: missing"


@pytest.mark.parametrize(
    "status_code, args, expected",
    [
        (500, (), Problem("", "", "")),
        (500, ("title",), Problem("title", "", "")),
        (404, ("title", "detail"), Problem("title", "detail", "")),
        (400, ("title", "detail", "source"), Problem("title", "detail", "source")),
        (400, ("title", "detail", "source", "ignored"), Problem("title", "detail", "source")),
    ],
)
def test_error_positional_args(status_code, args, expected):
    err = error(status_code, *args)

    assert err.status_code == status_code
    assert err.problems == (expected,)
    assert err.mode is WireMode.JSONAPI


def test_out_of_range_status_is_kept_as_is():
    assert error(999, "odd").status_code == 999


def test_problems_are_read_only():
    problems = [Problem("A")]
    err = HTTPError.from_problems(422, problems)
    problems.append(Problem("B"))

    assert err.problems == (Problem("A"),)
    with pytest.raises(AttributeError):
        err.status_code = 500
    with pytest.raises(AttributeError):
        err.problems[0].title = "changed"


def test_from_fields_points_at_attributes():
    err = HTTPError.from_fields(422, {"volume": "too loud", "bass": "too low"})

    assert err.mode is WireMode.MAP
    assert err.problems == (
        Problem("too loud", source_pointer="/data/attributes/volume"),
        Problem("too low", source_pointer="/data/attributes/bass"),
    )


def test_from_messages_keeps_order():
    err = HTTPError.from_messages(400, ["first", "second"])

    assert err.mode is WireMode.LIST
    assert [p.title for p in err.problems] == ["first", "second"]
    assert all(p.source_pointer == "" for p in err.problems)


def test_from_validation_error_flattens_nested_messages():
    exc = ValidationError(
        {
            "volume": ["Not a valid integer.", "Missing data."],
            "speaker": {"model": ["Unknown field."]},
            "_schema": ["Invalid input."],
        }
    )

    err = HTTPError.from_validation_error(exc)

    assert err.status_code == 422
    assert err.mode is WireMode.MAP
    assert err.problems == (
        Problem("Not a valid integer. Missing data.", source_pointer="/data/attributes/volume"),
        Problem("Unknown field.", source_pointer="/data/attributes/speaker/model"),
        Problem("Invalid input."),
    )


def test_from_http_exception():
    err = HTTPError.from_http_exception(NotFound("no such volume"))

    assert err.status_code == 404
    assert err.problems == (Problem("Not Found", "no such volume"),)


def test_http_error_can_be_raised():
    with pytest.raises(HTTPError) as info:
        raise error(403, "forbidden")
    assert info.value.status_code == 403


def test_to_wire_document_defaults_to_construction_mode():
    err = HTTPError.from_messages(400, ["bad"])

    assert err.to_wire_document() == {"errors": ["bad"], "status_code": 400}
    assert err.to_wire_document("jsonapi")["errors"][0]["title"] == "bad"


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        ("", None),
        ("jsonapi", WireMode.JSONAPI),
        (" MAP ", WireMode.MAP),
        (WireMode.LIST, WireMode.LIST),
    ],
)
def test_wire_mode_parse(value, expected):
    assert WireMode.parse(value) is expected


def test_wire_mode_parse_rejects_unknown():
    with pytest.raises(ValueError, match="xml"):
        WireMode.parse("xml")


@pytest.mark.parametrize(
    "pointer, expected",
    [
        ("/data/attributes/volume", "volume"),
        ("/data/attributes/speaker/model", "speaker/model"),
        ("/volume", "volume"),
        ("", ""),
    ],
)
def test_field_name(pointer, expected):
    assert field_name(pointer) == expected
