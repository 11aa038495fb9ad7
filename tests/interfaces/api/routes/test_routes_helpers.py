"""Tests for the translation of domain errors into HTTP responses."""

from uuid import uuid4

import pytest

from app.domain.errors import (
    InvalidAddressError,
    MissingParameterError,
    NotificationNotFoundError,
    PersistenceError,
    RenderError,
    RouteNotFoundError,
    TemplateNotFoundError,
    UpstreamLookupError,
)
from app.interfaces.api.routes_helpers import to_http_exception


@pytest.mark.parametrize(
    ("error", "expected_status"),
    [
        (RouteNotFoundError("Nope"), 400),
        (MissingParameterError("TaskCreated", ["taskId"]), 400),
        (UpstreamLookupError("Task", uuid4()), 400),
        (InvalidAddressError(uuid4()), 400),
        (NotificationNotFoundError(uuid4()), 404),
        (TemplateNotFoundError("TaskCreated"), 500),
        (RenderError("TaskCreated", "'task_subject' is undefined"), 500),
        (PersistenceError("disk full"), 500),
    ],
)
def test_to_http_exception(error, expected_status):
    exc = to_http_exception(error)

    assert exc.status_code == expected_status
    assert exc.detail == str(error)
