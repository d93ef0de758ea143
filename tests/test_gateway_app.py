"""
Tests for the gateway's HTTP surface.
"""
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from scribe.gateway.app import create_app


@pytest.fixture
def gateway():
    gateway = MagicMock()
    gateway.handle.return_value = {"transcription": "hello world"}
    return gateway


@pytest.fixture
def client(gateway):
    return TestClient(create_app(gateway))


class TestProcessAudioRoute:
    def test_forwards_body_and_authorization(self, client, gateway):
        payload = {"audioUrl": "u", "fileName": "f.webm", "userId": "user-1"}
        response = client.post("/process-audio", json=payload, headers={"Authorization": "Bearer t"})

        assert response.status_code == 200
        assert response.json() == {"transcription": "hello world"}
        gateway.handle.assert_called_once_with(payload, "Bearer t")

    def test_invalid_json_is_passed_as_none(self, client, gateway):
        response = client.post(
            "/process-audio",
            content=b"not json",
            headers={"Authorization": "Bearer t", "Content-Type": "application/json"},
        )
        assert response.status_code == 200
        gateway.handle.assert_called_once_with(None, "Bearer t")

    def test_error_bodies_are_served_as_200(self, client, gateway):
        gateway.handle.return_value = {"transcription": "sample", "error": "Missing required fields: userId", "message": "m"}
        response = client.post("/process-audio", json={}, headers={"Authorization": "Bearer t"})
        assert response.status_code == 200
        assert response.json()["error"] == "Missing required fields: userId"


class TestCors:
    def test_preflight(self, client):
        response = client.options(
            "/process-audio",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "authorization, x-client-info, apikey, content-type",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        allowed = response.headers["access-control-allow-headers"].lower()
        for header in ["authorization", "x-client-info", "apikey", "content-type"]:
            assert header in allowed

    def test_simple_request_carries_cors_header(self, client):
        response = client.post(
            "/process-audio", json={}, headers={"Origin": "http://localhost:5173", "Authorization": "Bearer t"}
        )
        assert response.headers["access-control-allow-origin"] == "*"


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
