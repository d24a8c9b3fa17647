"""Error envelope produced by the registered exception handlers."""

import json

from starlette.requests import Request

from app.core.exception_handlers import (
    _dependency_exception_handler,
    _fleetflow_exception_handler,
    _generic_exception_handler,
)
from app.domain.exceptions import (
    AuthenticationException,
    DependencyException,
    RoleInUseException,
)


def _request() -> Request:
    return Request({"type": "http", "method": "GET", "path": "/api/v1/roles", "headers": []})


def _body(response) -> dict:
    return json.loads(response.body)


def test_dependency_failure_hides_internal_message() -> None:
    response = _dependency_exception_handler(
        _request(), DependencyException("database", "password authentication failed")
    )
    assert response.status_code == 500
    body = _body(response)
    assert body == {
        "success": False,
        "message": "Service temporarily unavailable",
        "error": "DEPENDENCY_FAILURE",
    }


def test_authentication_failure_sets_challenge_header() -> None:
    response = _fleetflow_exception_handler(_request(), AuthenticationException())
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_conflict_keeps_details() -> None:
    response = _fleetflow_exception_handler(_request(), RoleInUseException("r1", 2))
    assert response.status_code == 409
    body = _body(response)
    assert body["success"] is False
    assert body["error"] == "ROLE_IN_USE"
    assert body["details"]["assignment_count"] == 2


def test_unhandled_error_is_generic() -> None:
    response = _generic_exception_handler(_request(), RuntimeError("boom at line 12"))
    assert response.status_code == 500
    body = _body(response)
    assert body["error"] == "INTERNAL_ERROR"
    assert "boom" not in body["message"]
