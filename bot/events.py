"""
Event classification.

PURE FUNCTION - NO I/O
Assigns each decoded messaging event to exactly one category. Messages
carrying attachments fan out into one sub-event per attachment.

Precedence:
  1. message without echo flag -> quickReply | message | per-attachment
  2. echo-flagged message      -> echoMessage
  3. optin, delivery, postback, read, account_linking (in that order)
  4. anything else             -> unknown
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from transport.messenger.schemas import Attachment, MessagingEvent


class EventCategory(str, Enum):
    """Category assigned to one inbound event."""

    MESSAGE = "message"
    QUICK_REPLY = "quickReply"
    ECHO_MESSAGE = "echoMessage"
    AUTHENTICATION = "authentication"
    DELIVERY = "delivery"
    POSTBACK = "postback"
    READ = "read"
    ACCOUNT_LINKED = "accountLinked"
    ACCOUNT_UNLINKED = "accountUnlinked"

    # One per attachment
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    FILE = "file"
    LOCATION = "location"
    ATTACHMENT = "attachment"

    UNKNOWN = "unknown"


ATTACHMENT_CATEGORIES = {
    "image": EventCategory.IMAGE,
    "audio": EventCategory.AUDIO,
    "video": EventCategory.VIDEO,
    "file": EventCategory.FILE,
    "location": EventCategory.LOCATION,
}


@dataclass(frozen=True)
class ClassifiedEvent:
    """An event paired with its category (and attachment, for sub-events)."""

    category: EventCategory
    event: Optional[MessagingEvent]
    attachment: Optional[Attachment] = None


def classify_attachment(attachment: Attachment) -> EventCategory:
    """Media type of an attachment, or the generic attachment category."""
    return ATTACHMENT_CATEGORIES.get(attachment.type, EventCategory.ATTACHMENT)


def classify_event(event: MessagingEvent) -> list[ClassifiedEvent]:
    """
    Classify one messaging event.

    Returns:
        A single ClassifiedEvent, or one per attachment for attachment messages
    """
    message = event.message

    if message is not None and not message.is_echo:
        if message.quick_reply is not None:
            return [ClassifiedEvent(EventCategory.QUICK_REPLY, event)]
        if message.text:
            return [ClassifiedEvent(EventCategory.MESSAGE, event)]
        if message.attachments:
            return [
                ClassifiedEvent(classify_attachment(attachment), event, attachment)
                for attachment in message.attachments
            ]
        return [ClassifiedEvent(EventCategory.UNKNOWN, event)]

    if message is not None:
        return [ClassifiedEvent(EventCategory.ECHO_MESSAGE, event)]

    if event.optin is not None:
        return [ClassifiedEvent(EventCategory.AUTHENTICATION, event)]
    if event.delivery is not None:
        return [ClassifiedEvent(EventCategory.DELIVERY, event)]
    if event.postback is not None:
        return [ClassifiedEvent(EventCategory.POSTBACK, event)]
    if event.read is not None:
        return [ClassifiedEvent(EventCategory.READ, event)]

    linking = event.account_linking
    if linking is not None and linking.status == "linked":
        return [ClassifiedEvent(EventCategory.ACCOUNT_LINKED, event)]
    if linking is not None and linking.status == "unlinked":
        return [ClassifiedEvent(EventCategory.ACCOUNT_UNLINKED, event)]

    return [ClassifiedEvent(EventCategory.UNKNOWN, event)]
