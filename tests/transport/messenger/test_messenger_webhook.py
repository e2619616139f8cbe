"""
Messenger Webhook Tests

GET challenge and POST callbacks through the FastAPI app.
"""

import json
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from conftest import FakeSender, make_event, make_payload
from infra.bootstrap import build_bot
from main import create_app
from nlu import StubNLUBackend
from transport.messenger.security import compute_signature


def signed_post(client, payload, secret="app-secret", header="X-Hub-Signature-256", algorithm="sha256"):
    body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    return client.post(
        "/webhook",
        content=body,
        headers={header: compute_signature(secret, body, algorithm), "Content-Type": "application/json"},
    )


@pytest.fixture
def mock_bot():
    bot = MagicMock()
    bot.handle_payload.return_value = 1
    return bot


@pytest.fixture
def client(config, mock_bot):
    return TestClient(create_app(config, bot=mock_bot))


class TestChallenge:

    def test_valid_challenge(self, client):
        response = client.get(
            "/webhook",
            params={"hub.mode": "subscribe", "hub.challenge": "1158201444", "hub.verify_token": "verify-token"},
        )

        assert response.status_code == 200
        assert response.text == "1158201444"

    def test_wrong_token(self, client):
        response = client.get(
            "/webhook",
            params={"hub.mode": "subscribe", "hub.challenge": "1158201444", "hub.verify_token": "nope"},
        )

        assert response.status_code == 403

    def test_wrong_mode(self, client):
        response = client.get(
            "/webhook",
            params={"hub.mode": "unsubscribe", "hub.challenge": "1158201444", "hub.verify_token": "verify-token"},
        )

        assert response.status_code == 400


class TestReceiver:

    def test_valid_signature_hands_payload_to_bot(self, client, mock_bot):
        payload = make_payload(make_event(message={"mid": "mid.1", "seq": 1, "text": "hello"}))

        response = signed_post(client, payload)

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        handed = mock_bot.handle_payload.call_args[0][0]
        assert handed.object == "page"
        assert handed.entry[0]["messaging"][0]["message"]["text"] == "hello"

    def test_legacy_sha1_signature(self, client, mock_bot):
        response = signed_post(client, make_payload(), header="X-Hub-Signature", algorithm="sha1")

        assert response.status_code == 200
        mock_bot.handle_payload.assert_called_once()

    def test_missing_signature(self, client, mock_bot):
        response = client.post("/webhook", content=json.dumps(make_payload()).encode())

        assert response.status_code == 401
        mock_bot.handle_payload.assert_not_called()

    def test_invalid_signature(self, client, mock_bot):
        response = signed_post(client, make_payload(), secret="other-secret")

        assert response.status_code == 403
        mock_bot.handle_payload.assert_not_called()

    def test_invalid_json(self, client, mock_bot):
        response = signed_post(client, b"{not json")

        assert response.status_code == 422
        mock_bot.handle_payload.assert_not_called()

    def test_empty_object_is_acknowledged(self, client, mock_bot):
        response = signed_post(client, {})

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_unrecognized_shape_is_acknowledged(self, client, mock_bot):
        response = signed_post(client, {"object": "page", "entry": "nope"})

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        mock_bot.handle_payload.assert_not_called()

    def test_json_array_is_acknowledged(self, client, mock_bot):
        response = signed_post(client, [1, 2, 3])

        assert response.status_code == 200
        mock_bot.handle_payload.assert_not_called()

    def test_bot_errors_still_acknowledged(self, client, mock_bot):
        mock_bot.handle_payload.side_effect = RuntimeError("listener bug")

        response = signed_post(client, make_payload())

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestHealth:

    def test_live(self, client):
        assert client.get("/health/live").json() == {"status": "alive"}

    def test_ready(self, client):
        assert client.get("/health/ready").json() == {"status": "ready"}

    def test_not_ready_without_credentials(self, config, mock_bot):
        config.app_secret = ""
        client = TestClient(create_app(config, bot=mock_bot))

        body = client.get("/health/ready").json()

        assert body["status"] == "not_ready"
        assert "APP_SECRET" in body["reason"]


class TestEndToEnd:
    """Real bot behind the webhook, fake Graph API."""

    def test_keyword_message_gets_reply(self, config, store):
        sender = FakeSender()
        bot = build_bot(config, store=store, sender=sender, backend=StubNLUBackend())
        payload = make_payload(make_event(message={"mid": "mid.1", "seq": 1, "text": "button"}))

        with TestClient(create_app(config, bot=bot)) as client:
            response = signed_post(client, payload)

        assert response.status_code == 200
        assert len(store) == 1
        assert sender.sent[0][0] == "user-1"
        assert sender.sent[0][1]["attachment"]["payload"]["template_type"] == "button"

    def test_bad_entry_does_not_drop_valid_events(self, config, store):
        sender = FakeSender()
        bot = build_bot(config, store=store, sender=sender, backend=StubNLUBackend())
        payload = make_payload(make_event(message={"mid": "mid.1", "seq": 1, "text": "generic"}))
        payload["entry"].append({"id": "page-1", "messaging": ["garbage"]})
        payload["entry"].append("not an entry")

        with TestClient(create_app(config, bot=bot)) as client:
            response = signed_post(client, payload)

        assert response.status_code == 200
        assert len(store) == 1
        assert len(sender.sent) == 1
        assert sender.sent[0][1]["attachment"]["payload"]["template_type"] == "generic"

    def test_weather_question_runs_nlu_turn(self, config, store):
        sender = FakeSender()
        bot = build_bot(config, store=store, sender=sender, backend=StubNLUBackend())
        payload = make_payload(make_event(message={"mid": "mid.2", "seq": 2, "text": "weather in Madrid"}))

        # Leaving the block runs shutdown, which drains the NLU turn
        with TestClient(create_app(config, bot=bot)) as client:
            signed_post(client, payload)

        assert ("user-1", {"text": "echo: The weather will be sunny in Madrid"}) in sender.sent
        session_id = store.find_or_create("user-1")
        assert store.get_context(session_id) == {"forecast": "sunny in Madrid"}
