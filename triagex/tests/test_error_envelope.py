from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from triagex.app import app


def test_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json() == {"message": "TriageX Backend API is running!"}


def test_unknown_route_envelope(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    j = r.json()
    assert j["code"] == "NOT_FOUND"
    assert j["success"] is False


def test_trace_id_header_is_echoed(client):
    r = client.get("/", headers={"x-trace-id": "abc-123"})
    assert r.headers["x-trace-id"] == "abc-123"

    r2 = client.get("/")
    assert r2.headers["x-trace-id"]


def test_error_body_carries_request_trace_id(client, auth_headers):
    r = client.post(
        "/api/triage/submit",
        headers={**auth_headers, "x-trace-id": "trace-42"},
        json={"symptoms": []},
    )
    assert r.status_code == 400
    assert r.json()["trace_id"] == "trace-42"


def test_storage_error_hides_internal_detail(client, auth_headers):
    err = OperationalError("SELECT", {}, Exception("connection refused"))
    with patch("sqlalchemy.orm.Session.scalars", side_effect=err):
        r = client.get("/api/triage/history", headers=auth_headers)
    assert r.status_code == 500
    j = r.json()
    assert j["code"] == "INTERNAL_SERVER_ERROR"
    assert j["message"] == "Server error while retrieving triage history"
    assert "connection refused" not in r.text
    assert "details" not in j


def test_unhandled_exception_envelope(auth_headers):
    client = TestClient(app, raise_server_exceptions=False)
    with patch("triagex.services.assessments.to_result", side_effect=ValueError("boom")):
        r = client.post("/api/triage/submit", headers=auth_headers, json={"symptoms": ["fever"]})
    assert r.status_code == 500
    j = r.json()
    assert j["code"] == "INTERNAL_SERVER_ERROR"
    assert j["message"] == "An unexpected error occurred"
    assert "boom" not in r.text


def test_unhandled_exception_keeps_trace_id(auth_headers):
    client = TestClient(app, raise_server_exceptions=False)
    with patch("triagex.services.assessments.to_result", side_effect=ValueError("boom")):
        r = client.post(
            "/api/triage/submit",
            headers={**auth_headers, "x-trace-id": "trace-500"},
            json={"symptoms": ["fever"]},
        )
    assert r.status_code == 500
    assert r.json()["trace_id"] == "trace-500"
    assert r.headers["x-trace-id"] == "trace-500"


def test_unhandled_exception_generates_trace_id(auth_headers):
    client = TestClient(app, raise_server_exceptions=False)
    with patch("triagex.services.assessments.to_result", side_effect=ValueError("boom")):
        r = client.post("/api/triage/submit", headers=auth_headers, json={"symptoms": ["fever"]})
    assert r.status_code == 500
    trace_id = r.json()["trace_id"]
    assert trace_id
    assert r.headers["x-trace-id"] == trace_id


def test_result_lookup_storage_error_envelope(client, auth_headers):
    created = client.post("/api/triage/submit", headers=auth_headers, json={"symptoms": ["fever"]}).json()
    err = OperationalError("SELECT", {}, Exception("connection refused"))
    with patch("sqlalchemy.orm.Session.scalars", side_effect=err):
        r = client.get(f"/api/triage/results/{created['id']}", headers=auth_headers)
    assert r.status_code == 500
    j = r.json()
    assert j["code"] == "INTERNAL_SERVER_ERROR"
    assert j["message"] == "Server error while retrieving triage result"
    assert "details" not in j
    assert "connection refused" not in r.text


def test_submit_storage_error_envelope(client, auth_headers):
    err = OperationalError("INSERT", {}, Exception("disk full"))
    with patch("sqlalchemy.orm.Session.commit", side_effect=err):
        r = client.post("/api/triage/submit", headers=auth_headers, json={"symptoms": ["fever"]})
    assert r.status_code == 500
    j = r.json()
    assert j["message"] == "Server error during symptom analysis"
    assert "details" not in j
    assert "disk full" not in r.text
