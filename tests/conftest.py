"""
Shared fixtures: an app built around a fake clock, an inspectable rate limit
store and a recording email client, so no test touches the network.
"""
import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from main import create_app
from middleware.rate_limiter import RateLimitStore
from models.email import BrevoSendResult


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingEmailClient:
    """Stands in for BrevoClient; records envelopes instead of sending them."""

    def __init__(self, message_id: str = "msg-123", error: Exception = None):
        self.message_id = message_id
        self.error = error
        self.sent = []

    @property
    def call_count(self) -> int:
        return len(self.sent)

    async def send(self, envelope):
        self.sent.append(envelope)
        if self.error is not None:
            raise self.error
        return BrevoSendResult(message_id=self.message_id)


VALID_PAYLOAD = {
    "name": "Jo",
    "email": "a@b.com",
    "subject": "Hi there",
    "message": "x" * 20,
    "honeypot": "",
}


@pytest.fixture
def valid_payload() -> dict:
    return dict(VALID_PAYLOAD)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> RateLimitStore:
    return RateLimitStore(clock=clock)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_env="test",
        brevo_sender_email="site@example.com",
        brevo_sender_name="Website Contact",
    )


@pytest.fixture
def email_client() -> RecordingEmailClient:
    return RecordingEmailClient()


@pytest.fixture
def app(settings, store, email_client):
    return create_app(settings=settings, store=store, email_client=email_client)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
