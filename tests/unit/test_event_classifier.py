"""
Test suite for event classification.

Verifies:
- Each event shape gets exactly one category
- Precedence between message parts
- Attachments fan out one sub-event each
"""

import pytest

from bot.events import ClassifiedEvent, EventCategory, classify_attachment, classify_event
from transport.messenger.schemas import Attachment, MessagingEvent

from conftest import make_event


def classify(**parts):
    return classify_event(MessagingEvent(**make_event(**parts)))


def categories(**parts):
    return [item.category for item in classify(**parts)]


class TestMessageEvents:

    def test_text_message(self):
        result = classify(message={"mid": "mid.1", "seq": 1, "text": "hello"})

        assert len(result) == 1
        assert result[0].category == EventCategory.MESSAGE
        assert result[0].attachment is None

    def test_quick_reply_wins_over_text(self):
        message = {"text": "Red", "quick_reply": {"payload": "PICK_RED"}}

        assert categories(message=message) == [EventCategory.QUICK_REPLY]

    def test_text_wins_over_attachments(self):
        message = {"text": "look", "attachments": [{"type": "image"}]}

        assert categories(message=message) == [EventCategory.MESSAGE]

    def test_attachments_fan_out(self):
        message = {"attachments": [{"type": "image"}, {"type": "file"}]}

        result = classify(message=message)

        assert [item.category for item in result] == [EventCategory.IMAGE, EventCategory.FILE]
        assert [item.attachment.type for item in result] == ["image", "file"]

    @pytest.mark.parametrize("media,category", [
        ("image", EventCategory.IMAGE),
        ("audio", EventCategory.AUDIO),
        ("video", EventCategory.VIDEO),
        ("file", EventCategory.FILE),
        ("location", EventCategory.LOCATION),
        ("fallback", EventCategory.ATTACHMENT),
        ("sticker", EventCategory.ATTACHMENT),
    ])
    def test_attachment_media_types(self, media, category):
        assert classify_attachment(Attachment(type=media)) == category

    def test_empty_message_is_unknown(self):
        assert categories(message={"mid": "mid.1"}) == [EventCategory.UNKNOWN]

    def test_echo(self):
        message = {"is_echo": True, "app_id": 1517776481860111, "text": "generic"}

        assert categories(message=message) == [EventCategory.ECHO_MESSAGE]

    def test_echo_with_attachments_is_single_event(self):
        message = {"is_echo": True, "attachments": [{"type": "image"}, {"type": "file"}]}

        assert categories(message=message) == [EventCategory.ECHO_MESSAGE]


class TestNotificationEvents:

    def test_optin(self):
        assert categories(optin={"ref": "PASS_THROUGH"}) == [EventCategory.AUTHENTICATION]

    def test_delivery(self):
        delivery = {"mids": ["mid.1"], "watermark": 1458668856253, "seq": 37}

        assert categories(delivery=delivery) == [EventCategory.DELIVERY]

    def test_postback(self):
        assert categories(postback={"payload": "Start"}) == [EventCategory.POSTBACK]

    def test_read(self):
        assert categories(read={"watermark": 1458668856253, "seq": 38}) == [EventCategory.READ]

    def test_account_linked(self):
        linking = {"status": "linked", "authorization_code": "PASS_THROUGH_AUTHORIZATION_CODE"}

        assert categories(account_linking=linking) == [EventCategory.ACCOUNT_LINKED]

    def test_account_unlinked(self):
        assert categories(account_linking={"status": "unlinked"}) == [EventCategory.ACCOUNT_UNLINKED]

    def test_account_linking_other_status_is_unknown(self):
        assert categories(account_linking={"status": "pending"}) == [EventCategory.UNKNOWN]

    def test_precedence_delivery_before_postback(self):
        result = categories(delivery={"watermark": 1}, postback={"payload": "Start"})

        assert result == [EventCategory.DELIVERY]

    def test_message_before_notifications(self):
        result = categories(message={"text": "hi"}, read={"watermark": 1})

        assert result == [EventCategory.MESSAGE]

    def test_bare_event_is_unknown(self):
        result = classify()

        assert result == [ClassifiedEvent(EventCategory.UNKNOWN, result[0].event)]


class TestCategoryValues:

    def test_wire_names(self):
        """Category values keep the names listeners are known by."""
        assert EventCategory.QUICK_REPLY.value == "quickReply"
        assert EventCategory.ECHO_MESSAGE.value == "echoMessage"
        assert EventCategory.ACCOUNT_LINKED.value == "accountLinked"
        assert EventCategory.ACCOUNT_UNLINKED.value == "accountUnlinked"
