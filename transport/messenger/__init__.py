"""
Messenger Transport Layer - Module Exports

The webhook router is imported from transport.messenger.webhook directly.
"""

from .schemas import (
    AccountLinking,
    Attachment,
    Delivery,
    Entry,
    Message,
    MessagingEvent,
    MessengerWebhookPayload,
    Optin,
    Participant,
    Postback,
    QuickReply,
    Read,
    SendApiResponse,
    UserProfile,
)
from .security import (
    SignatureVerificationError,
    check_signature,
    compute_signature,
    verify_signature,
    verify_webhook_challenge,
)
from .sender import MessengerSender, MessengerSenderError, SendCallback

__all__ = [
    # Schemas
    "MessengerWebhookPayload",
    "Entry",
    "MessagingEvent",
    "Participant",
    "Message",
    "QuickReply",
    "Attachment",
    "Optin",
    "Delivery",
    "Postback",
    "Read",
    "AccountLinking",
    "SendApiResponse",
    "UserProfile",
    # Security
    "verify_signature",
    "verify_webhook_challenge",
    "check_signature",
    "compute_signature",
    "SignatureVerificationError",
    # Sender
    "MessengerSender",
    "MessengerSenderError",
    "SendCallback",
]
