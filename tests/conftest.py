"""Fixtures wiring a JobProcessor to in-memory doubles of Redis, the lookup
services and SMTP."""

import pytest

from worker.cache import PROFILE_CACHE_PREFIX, TEMPLATE_CACHE_PREFIX, CacheAsideResolver
from worker.models import EmailTemplate, Job, UserProfile
from worker.rendering import TemplateRenderer
from worker.services import JobProcessor
from worker.tracking import ResultTracker

from tests.helpers import FakeCache, FakeClock, FakeLookup, FakeTransport


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return FakeCache(clock)


@pytest.fixture
def templates():
    return FakeLookup("Template", {
        "welcome": {
            "template_key": "welcome",
            "subject_template": "Welcome, {{name}}",
            "body_template": "Hello {{name}}",
            "required_variables": ["name"],
        },
    })


@pytest.fixture
def users():
    return FakeLookup("User", {
        "u-1": {"user_id": "u-1", "email": "a@example.com", "name": "Ada"},
    })


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def processor(cache, templates, users, transport):
    return JobProcessor(
        template_resolver=CacheAsideResolver(
            cache, prefix=TEMPLATE_CACHE_PREFIX, ttl=3600, fetch=templates,
            decode=EmailTemplate.from_dict, encode=EmailTemplate.to_dict, kind="template",
        ),
        profile_resolver=CacheAsideResolver(
            cache, prefix=PROFILE_CACHE_PREFIX, ttl=600, fetch=users,
            decode=UserProfile.from_dict, encode=UserProfile.to_dict, kind="user",
        ),
        renderer=TemplateRenderer(),
        transport=transport,
        tracker=ResultTracker(cache, ttl=86400, clock=lambda: "2026-01-01T00:00:00+00:00"),
        from_email="noreply@example.com",
    )


@pytest.fixture
def job():
    return Job(
        request_id="t-1",
        user_id="u-1",
        notification_type="welcome",
        message_data={"name": "Ada"},
    )
