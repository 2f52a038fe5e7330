"""
tests/test_contact_endpoint.py - POST/OPTIONS /api/contact
==========================================================

Covers the request pipeline order (rate limit -> parse -> validate ->
honeypot -> send), every response code and the rate limit side effects.
"""
import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from main import create_app
from utils.exceptions import ConfigurationError, TransportError

URL = "/api/contact"


def _ip(address: str) -> dict:
    return {"X-Forwarded-For": address}


# ---------------------------------------------------------------------------
# Success and honeypot
# ---------------------------------------------------------------------------

def test_valid_submission_succeeds(client, valid_payload, email_client):
    resp = client.post(URL, json=valid_payload)

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"]
    assert body["messageId"] == "msg-123"
    assert email_client.call_count == 1


def test_optional_fields_are_forwarded(client, valid_payload, email_client):
    valid_payload.update({"projectType": "mobile", "budget": "5k-10k"})
    resp = client.post(URL, json=valid_payload)

    assert resp.status_code == 200
    assert "Mobile application" in email_client.sent[0].text_body


def test_honeypot_reports_success_without_sending(client, valid_payload, email_client):
    valid_payload["honeypot"] = "I am a bot"
    resp = client.post(URL, json=valid_payload)

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert "messageId" not in body
    assert email_client.call_count == 0


def test_dev_mode_uses_sentinel_message_id(store, valid_payload):
    app = create_app(settings=Settings(app_env="development"), store=store)
    resp = TestClient(app).post(URL, json=valid_payload)

    assert resp.status_code == 200
    assert resp.json()["messageId"] == "dev-console"


# ---------------------------------------------------------------------------
# Client input errors
# ---------------------------------------------------------------------------

def test_malformed_json_is_invalid_json(client, email_client):
    resp = client.post(URL, content=b"{not json", headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Invalid JSON body", "code": "INVALID_JSON"}
    assert email_client.call_count == 0


def test_empty_body_is_invalid_json(client):
    resp = client.post(URL, content=b"")
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_JSON"


def test_deeply_nested_json_is_invalid_json(client, email_client):
    resp = client.post(URL, content=b"[" * 100_000, headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_JSON"
    assert email_client.call_count == 0


def test_display_name_email_is_rejected(client, valid_payload, email_client):
    valid_payload["email"] = "Jo Bot <jo@example.com>"
    resp = client.post(URL, json=valid_payload)

    assert resp.status_code == 400
    assert resp.json()["errors"] == [{"field": "email", "message": "Please enter a valid email address"}]
    assert email_client.call_count == 0


def test_short_message_is_validation_error(client, valid_payload, email_client):
    valid_payload["message"] = "x" * 5
    resp = client.post(URL, json=valid_payload)

    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_ERROR"
    assert body["errors"] == [{"field": "message", "message": "Message must be at least 20 characters"}]
    assert email_client.call_count == 0


@pytest.mark.parametrize(
    "field,value",
    [("name", "J"), ("email", "nope"), ("subject", "Hi"), ("message", "short"), ("budget", "1m")],
)
def test_each_field_violation_reports_that_field(client, valid_payload, field, value):
    valid_payload[field] = value
    resp = client.post(URL, json=valid_payload)

    assert resp.status_code == 400
    errors = resp.json()["errors"]
    assert [error["field"] for error in errors] == [field]


# ---------------------------------------------------------------------------
# Rate limiting
# ---------------------------------------------------------------------------

def test_sixth_request_in_window_is_rate_limited(client, valid_payload, email_client):
    for _ in range(5):
        assert client.post(URL, json=valid_payload, headers=_ip("203.0.113.7")).status_code == 200

    resp = client.post(URL, json=valid_payload, headers=_ip("203.0.113.7"))

    assert resp.status_code == 429
    assert resp.headers["Retry-After"] == "60"
    assert resp.json()["code"] == "RATE_LIMIT_EXCEEDED"
    assert resp.json()["success"] is False
    assert email_client.call_count == 5


def test_rate_limit_is_per_client(client, valid_payload):
    for _ in range(6):
        client.post(URL, json=valid_payload, headers=_ip("203.0.113.7"))

    assert client.post(URL, json=valid_payload, headers=_ip("198.51.100.4")).status_code == 200


def test_failed_requests_count_toward_limit(client, valid_payload, store):
    for _ in range(5):
        assert client.post(URL, content=b"garbage", headers=_ip("203.0.113.7")).status_code == 400

    assert store.get("203.0.113.7").count == 5
    assert client.post(URL, json=valid_payload, headers=_ip("203.0.113.7")).status_code == 429


def test_rate_limit_checked_before_parsing(client):
    for _ in range(5):
        client.post(URL, content=b"garbage")
    resp = client.post(URL, content=b"garbage")
    assert resp.status_code == 429


def test_window_expiry_allows_requests_again(client, valid_payload, clock):
    for _ in range(6):
        client.post(URL, json=valid_payload)
    assert client.post(URL, json=valid_payload).status_code == 429

    clock.advance(61)

    assert client.post(URL, json=valid_payload).status_code == 200


def test_configured_policy_is_used(store, email_client, valid_payload):
    settings = Settings(app_env="test", rate_limit_max_requests=2)
    client = TestClient(create_app(settings=settings, store=store, email_client=email_client))

    assert client.post(URL, json=valid_payload).status_code == 200
    assert client.post(URL, json=valid_payload).status_code == 200
    assert client.post(URL, json=valid_payload).status_code == 429


def test_retry_after_follows_configured_window(store, email_client, valid_payload):
    settings = Settings(app_env="test", rate_limit_max_requests=1, rate_limit_window_seconds=30)
    client = TestClient(create_app(settings=settings, store=store, email_client=email_client))

    assert client.post(URL, json=valid_payload).status_code == 200
    resp = client.post(URL, json=valid_payload)

    assert resp.status_code == 429
    assert resp.headers["Retry-After"] == "30"


# ---------------------------------------------------------------------------
# Server errors
# ---------------------------------------------------------------------------

def test_transport_failure_is_sanitized_server_error(client, valid_payload, email_client):
    email_client.error = TransportError(
        "Failed to send email: Key not found", status_code=401, provider_message="Key not found"
    )
    resp = client.post(URL, json=valid_payload)

    assert resp.status_code == 500
    body = resp.json()
    assert body["code"] == "SERVER_ERROR"
    assert body["success"] is False
    assert "Key not found" not in body["error"]
    assert email_client.call_count == 1


def test_configuration_error_looks_like_server_error(client, valid_payload, email_client):
    email_client.error = ConfigurationError("BREVO_API_KEY is not set")
    resp = client.post(URL, json=valid_payload)

    assert resp.status_code == 500
    assert resp.json()["code"] == "SERVER_ERROR"
    assert "BREVO" not in resp.json()["error"]


def test_unexpected_error_is_server_error(app, valid_payload, email_client):
    email_client.error = RuntimeError("boom")
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.post(URL, json=valid_payload)

    assert resp.status_code == 500
    assert resp.json()["code"] == "SERVER_ERROR"


# ---------------------------------------------------------------------------
# Preflight and routing
# ---------------------------------------------------------------------------

def test_options_preflight(client, store):
    resp = client.options(URL)

    assert resp.status_code == 204
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert "POST" in resp.headers["Access-Control-Allow-Methods"]
    assert resp.headers["Access-Control-Allow-Headers"] == "Content-Type"
    assert len(store) == 0


def test_get_is_not_allowed(client):
    resp = client.get(URL)
    assert resp.status_code == 405
    assert resp.json()["code"] == "HTTP_405"


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_lifespan_runs_sweeper(app):
    sweeper = app.state.rate_limit_sweeper
    with TestClient(app):
        assert sweeper.running
    assert not sweeper.running


def test_production_startup_fails_without_delivery_config(store, email_client):
    settings = Settings(app_env="production", brevo_api_key="", brevo_sender_email="")
    app = create_app(settings=settings, store=store, email_client=email_client)

    with pytest.raises(ConfigurationError, match="BREVO_API_KEY"):
        with TestClient(app):
            pass
    assert not app.state.rate_limit_sweeper.running


def test_production_startup_with_delivery_config(store, email_client):
    settings = Settings(app_env="production", brevo_api_key="test-key", brevo_sender_email="site@example.com")
    app = create_app(settings=settings, store=store, email_client=email_client)

    with TestClient(app) as client:
        assert app.state.rate_limit_sweeper.running
        assert client.get("/health").status_code == 200
