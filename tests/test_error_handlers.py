"""Tests for the domain exception to HTTP response mapping."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.error_handlers import register_exception_handlers
from app.exceptions import (
    AppException,
    BusyError,
    DuplicateSignupError,
    InsufficientPermissionsError,
    InvalidTokenError,
    InvalidTransitionError,
    NotFoundError,
    OpportunityNotOpenError,
    ValidationError,
)


@pytest.fixture
def raising_client():
    """App with one route that raises whatever the test hands it."""
    app = FastAPI()
    register_exception_handlers(app)
    holder = {}

    @app.get("/boom")
    def boom():
        raise holder["exc"]

    client = TestClient(app, raise_server_exceptions=False)

    def _raise(exc):
        holder["exc"] = exc
        return client.get("/boom")

    return _raise


class TestErrorHandlers:
    def test_not_found(self, raising_client):
        response = raising_client(NotFoundError("Signup", 3))

        assert response.status_code == 404
        assert response.json() == {"detail": "Signup with identifier '3' not found"}

    def test_not_open(self, raising_client):
        response = raising_client(OpportunityNotOpenError(1, "filled"))

        assert response.status_code == 400
        assert response.json()["error"] == "OpportunityNotOpenError"

    def test_duplicate(self, raising_client):
        response = raising_client(DuplicateSignupError(5, 1))

        assert response.status_code == 400
        assert response.json()["error"] == "DuplicateSignupError"

    def test_invalid_transition(self, raising_client):
        response = raising_client(InvalidTransitionError("completed", "declined"))

        assert response.status_code == 400
        body = response.json()
        assert body["current_status"] == "completed"
        assert body["requested_status"] == "declined"

    def test_validation_with_field(self, raising_client):
        response = raising_client(ValidationError("needed", field="actual_hours"))

        assert response.status_code == 422
        assert response.json() == {"detail": "needed", "field": "actual_hours"}

    def test_busy(self, raising_client):
        response = raising_client(BusyError("Opportunity", 1, 0.2))

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"

    def test_forbidden(self, raising_client):
        response = raising_client(InsufficientPermissionsError("confirm signups"))

        assert response.status_code == 403
        assert response.json()["detail"] == "Not allowed to confirm signups"

    def test_unauthenticated(self, raising_client):
        response = raising_client(InvalidTokenError())

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_generic_app_exception(self, raising_client):
        response = raising_client(AppException("database exploded"))

        assert response.status_code == 500
        assert response.json() == {"detail": "An internal error occurred"}
