"""Shared fixtures for the errhandler tests."""
from __future__ import annotations

import pytest
from werkzeug.wrappers import Request

from errhandler import create_app


class RecordingLogger:
    """Stand-in for an injected logger; keeps every formatted record."""

    def __init__(self) -> None:
        self.records = []

    def log(self, level, msg, *args, **kwargs):
        self.records.append((level, msg % args if args else msg, kwargs))

    @property
    def messages(self):
        return [message for _, message, _ in self.records]


class BrokenLogger:
    def log(self, level, msg, *args, **kwargs):
        raise RuntimeError("log sink is gone")


@pytest.fixture
def app():
    return create_app({"TESTING": True, "LOG_LEVEL": "DEBUG"})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def recorder():
    return RecordingLogger()


@pytest.fixture
def broken_logger():
    return BrokenLogger()


@pytest.fixture
def make_request():
    def _make(method="GET", path="/things", **kwargs):
        return Request.from_values(path=path, method=method, **kwargs)

    return _make

