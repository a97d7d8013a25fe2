"""
Tests for FastAPI app setup (src/api/main.py).

Covers:
- Health check endpoint
- CORS middleware
- ErrorResponse format for domain, HTTP, validation and unexpected errors
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from src.api.main import app, domain_exception_handler
from src.domain.shared.exceptions import (
    DomainException,
    ForbiddenResourceError,
    GenerationNotFoundError,
    UploadTooLargeError,
)


def test_health_check_endpoint(client):
    with patch("src.api.main.redis_health_check", return_value=True):
        response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "ok"
    assert data["redis"] == "ok"
    assert "version" in data
    assert "timestamp" in data


def test_cors_middleware_configured(client):
    with patch("src.api.main.redis_health_check", return_value=True):
        response = client.get("/health", headers={"Origin": "http://localhost:3000"})

    assert "access-control-allow-origin" in response.headers


def test_missing_user_header_is_401_error_response(client):
    response = client.get("/api/generations")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    body = response.json()
    assert body["code"] == "UNAUTHORIZED"
    assert body["message"] == "Missing or invalid X-User-Id header"


@pytest.mark.parametrize("value", ["abc", "0", "-3", ""])
def test_malformed_user_header_is_401(client, value):
    response = client.get("/api/generations", headers={"X-User-Id": value})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_unknown_route_is_404_error_response(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["code"] == "NOT_FOUND"


def test_validation_error_format(client, auth_headers):
    response = client.get("/api/generations?per_page=0", headers=auth_headers)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["details"]["errors"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc, status_code, code",
    [
        (GenerationNotFoundError(7), 404, "GENERATION_NOT_FOUND"),
        (ForbiddenResourceError("generation", 7, 6), 403, "FORBIDDEN"),
        (UploadTooLargeError("too big", file_size_bytes=10, max_size_bytes=5), 413, "FILE_TOO_LARGE"),
        (DomainException("something odd"), 400, "DOMAIN_ERROR"),
    ],
)
async def test_domain_exception_mapping(exc, status_code, code):
    request = MagicMock()

    response = await domain_exception_handler(request, exc)

    assert response.status_code == status_code
    assert code.encode() in response.body


def test_unexpected_errors_become_500(client, auth_headers):
    failing_client = TestClient(app, raise_server_exceptions=False)

    with patch(
        "src.application.services.generation_service.GenerationService.list_generations",
        side_effect=RuntimeError("boom"),
    ):
        response = failing_client.get("/api/generations", headers=auth_headers)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    body = response.json()
    assert body["code"] == "INTERNAL_SERVER_ERROR"
    assert body["details"]["type"] == "RuntimeError"


def test_health_check_reports_unavailable_redis(client):
    with patch("src.api.main.redis_health_check", return_value=False):
        response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["redis"] == "unavailable"
