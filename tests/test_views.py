import pytest

from worker import views
from worker.models import Job
from worker.tracking import ResultTracker

from tests.helpers import FakeCache, FakeTransport

INTERNAL_HEADERS = {"HTTP_X_SERVICE_NAME": "api_gateway_service", "HTTP_X_SERVICE_KEY": "gw-secret"}


@pytest.fixture(autouse=True)
def internal_keys(settings):
    settings.INTERNAL_SERVICE_KEYS = {"api_gateway_service": "gw-secret"}


@pytest.fixture
def status_cache(monkeypatch):
    cache = FakeCache()
    monkeypatch.setattr(views, "get_cache", lambda: cache)
    return cache


@pytest.mark.parametrize("ready, status_code, body", [
    (True, 200, {"status": "healthy", "smtp_ready": True}),
    (False, 503, {"status": "unhealthy", "smtp_ready": False}),
])
def test_health_reports_smtp_liveness(client, monkeypatch, ready, status_code, body):
    monkeypatch.setattr(views, "get_transport", lambda: FakeTransport(ready=ready))

    response = client.get("/health/")

    assert response.status_code == status_code
    assert response.json() == body


def test_status_of_sent_job(client, status_cache):
    ResultTracker(status_cache, ttl=86400, clock=lambda: "2026-01-01T00:00:00+00:00").record_success(
        Job(request_id="t-1", user_id="u-1", notification_type="welcome"), "<m-1@example.com>", "a@example.com"
    )

    response = client.get("/api/v1/email/status/t-1/", **INTERNAL_HEADERS)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["state"] == "sent"
    assert data["record"]["message_id"] == "<m-1@example.com>"


def test_status_of_failed_job(client, status_cache):
    ResultTracker(status_cache, ttl=86400).record_failure(
        Job(request_id="t-2", user_id="u-1", notification_type="welcome", retry_count=2), "Template not found: welcome"
    )

    response = client.get("/api/v1/email/status/t-2/", **INTERNAL_HEADERS)

    data = response.json()["data"]
    assert data["state"] == "failed"
    assert data["record"]["error"] == "Template not found: welcome"
    assert data["record"]["retry_count"] == 2


def test_unknown_job_is_404(client, status_cache):
    response = client.get("/api/v1/email/status/nope/", **INTERNAL_HEADERS)

    assert response.status_code == 404


def test_cache_outage_is_503(client, monkeypatch):
    def broken_cache():
        cache = FakeCache()
        cache.fail_reads = True
        return cache

    monkeypatch.setattr(views, "get_cache", broken_cache)

    response = client.get("/api/v1/email/status/t-1/", **INTERNAL_HEADERS)

    assert response.status_code == 503


@pytest.mark.parametrize("headers", [
    {},
    {"HTTP_X_SERVICE_NAME": "api_gateway_service", "HTTP_X_SERVICE_KEY": "wrong"},
    {"HTTP_X_SERVICE_NAME": "push_service", "HTTP_X_SERVICE_KEY": "gw-secret"},
])
def test_status_requires_internal_service_credentials(client, status_cache, headers):
    response = client.get("/api/v1/email/status/t-1/", **headers)

    assert response.status_code == 403
