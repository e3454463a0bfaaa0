"""
Tests for the operational endpoints and the error mapping.

Tests cover:
- Liveness and readiness probes
- Prometheus metrics exposure, including service outcomes
- X-Request-ID header on every response
- Error kind to HTTP status mapping
"""

import pytest

from social_api.errors import ErrorKind, STATUS_BY_KIND, status_for
from social_api.storage import Base, engine


class TestHealth:
    """Test health probes."""

    def test_live(self, client):
        response = client.get("/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_ready(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_not_ready_without_schema(self, client):
        Base.metadata.drop_all(bind=engine)

        response = client.get("/health/ready")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "not_ready"
        assert data["reason"]


class TestMetrics:
    """Test GET /metrics."""

    def test_metrics_exposed(self, client):
        client.get("/messages")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert "http_requests_total" in response.text
        assert "request_latency_seconds" in response.text

    def test_service_outcomes_recorded(self, client):
        client.post("/register", json={"username": "", "password": "password"})

        response = client.get("/metrics")

        assert 'operation="register",result="InvalidUsername"' in response.text

    def test_path_label_uses_route_template(self, client):
        client.get("/messages/12345")

        response = client.get("/metrics")

        assert 'path="/messages/{message_id}"' in response.text


class TestRequestId:
    def test_request_id_header(self, client):
        response = client.get("/messages")

        assert response.headers.get("X-Request-ID")

    def test_request_id_unique_per_request(self, client):
        first = client.get("/messages").headers["X-Request-ID"]
        second = client.get("/messages").headers["X-Request-ID"]

        assert first != second


class TestErrorMapping:
    @pytest.mark.parametrize(
        "kind, expected",
        [
            (ErrorKind.DUPLICATE_USERNAME, 409),
            (ErrorKind.INVALID_USERNAME, 400),
            (ErrorKind.WEAK_PASSWORD, 400),
            (ErrorKind.INVALID_CREDENTIALS, 401),
            (ErrorKind.ACCOUNT_NOT_FOUND, 400),
            (ErrorKind.MESSAGE_NOT_FOUND, 400),
            (ErrorKind.INVALID_MESSAGE_TEXT, 400),
        ],
    )
    def test_status_for_kind(self, kind, expected):
        assert status_for(kind) == expected

    def test_every_kind_is_mapped(self):
        assert set(STATUS_BY_KIND) == set(ErrorKind)

    def test_error_body_shape(self, client):
        response = client.post("/login", json={"username": "ghost", "password": "password"})

        assert response.status_code == 401
        assert response.json() == {
            "detail": "Invalid username or password.",
            "error": "InvalidCredentials",
        }
