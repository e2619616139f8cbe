"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from bot.sessions import InMemorySessionStore  # noqa: E402
from config import Config  # noqa: E402
from transport.messenger.schemas import SendApiResponse, UserProfile  # noqa: E402


class FakeSender:
    """
    Records outbound messages instead of calling the Graph API.

    send() records synchronously, so tests can assert right after the
    webhook or handler returns.
    """

    def __init__(self, fail_with=None):
        self.sent = []          # [(recipient_id, payload)]
        self.fail_with = fail_with
        self.send_api_message = AsyncMock(
            return_value=SendApiResponse(recipient_id="user-1", message_id="mid.1")
        )
        self.get_user_profile = AsyncMock(
            return_value=UserProfile(id="user-1", first_name="Ada", last_name="Lovelace")
        )

    def send(self, recipient_id, payload, callback=None):
        self.sent.append((recipient_id, payload))
        if callback is not None:
            if self.fail_with is not None:
                callback(self.fail_with, None)
            else:
                callback(None, {"recipient_id": recipient_id, "message_id": "mid.1"})
        return None

    async def drain(self):
        return None

    async def aclose(self):
        return None


@pytest.fixture
def config():
    """Complete configuration with dummy credentials."""
    return Config(
        page_access_token="page-token",
        app_verify_token="verify-token",
        app_secret="app-secret",
        graph_api_url="https://graph.test",
        graph_api_version="v19.0",
        notification_type="REGULAR",
        configure_page=False,
        wit_token="wit-token",
        wit_api_url="https://wit.test",
        wit_api_version="20160526",
        nlu_backend="stub",
        port=3000,
        environment="test",
        log_level="DEBUG",
        http_timeout_s=5.0,
    )


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def fake_sender():
    return FakeSender()


def make_event(sender_id="user-1", **parts):
    """Raw messaging event from sender_id to the page."""
    event = {
        "sender": {"id": sender_id},
        "recipient": {"id": "page-1"},
        "timestamp": 1458692752478,
    }
    event.update(parts)
    return event


def make_payload(*events, object_="page"):
    """Raw webhook payload with one entry holding the events."""
    return {
        "object": object_,
        "entry": [{"id": "page-1", "time": 1458692752478, "messaging": list(events)}],
    }
